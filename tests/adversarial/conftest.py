"""
Shared fixtures for adversarial tests.

Provides a domain service on the in-memory backend for race condition tests.
"""

import pytest

from src.adapters.repository.memory import InMemoryAuctionHouseRepository
from src.domain.auction_house import AuctionHouseService
from src.domain.models import AuctionHouse
from tests.factories import make_house

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def service() -> AuctionHouseService:
    """Fresh service and registry for each attack."""
    return AuctionHouseService(repository=InMemoryAuctionHouseRepository())


@pytest.fixture
def house(service: AuctionHouseService) -> AuctionHouse:
    return service.create_house(make_house())

