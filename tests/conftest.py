"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository and domain service
- A saved auction house and a running auction inside it
"""

import pytest

from src.adapters.repository.memory import InMemoryAuctionHouseRepository
from src.domain.auction_house import AuctionHouseService
from src.domain.models import Auction, AuctionHouse, AuctionStatus
from tests.factories import make_auction, make_house


@pytest.fixture
def repository() -> InMemoryAuctionHouseRepository:
    """Fresh in-memory repository for each test."""
    return InMemoryAuctionHouseRepository()


@pytest.fixture
def service(repository: InMemoryAuctionHouseRepository) -> AuctionHouseService:
    """Domain service backed by the in-memory repository."""
    return AuctionHouseService(repository=repository)


@pytest.fixture
def house(service: AuctionHouseService) -> AuctionHouse:
    """A saved auction house."""
    return service.create_house(make_house())


@pytest.fixture
def running_auction(service: AuctionHouseService, house: AuctionHouse) -> Auction:
    """A saved RUNNING auction with an initial price of 100.0."""
    return service.create_auction(
        house.id, make_auction(status=AuctionStatus.RUNNING, initial_price=100.0)
    )
