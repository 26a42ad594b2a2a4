"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request

from src.domain.auction_house import AuctionHouseService
from src.domain.locking import KeyedLocks
from src.domain.ports import AuctionHouseRepository


def get_repository(request: Request) -> AuctionHouseRepository:
    """
    Get the auction house repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_locks(request: Request) -> KeyedLocks:
    """Get the application-wide lock registry (shared by every request)."""
    return request.app.state.locks


def get_auction_house_service(request: Request) -> AuctionHouseService:
    """
    Create auction house service with injected dependencies.

    Wires together the repository and the shared lock registry.
    """
    repository = get_repository(request)
    locks = get_locks(request)
    return AuctionHouseService(repository=repository, locks=locks)
