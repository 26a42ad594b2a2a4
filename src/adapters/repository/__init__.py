"""Repository adapters - In-memory and database implementations."""

from .memory import InMemoryAuctionHouseRepository
from .postgres import PostgresAuctionHouseRepository, run_migrations

__all__ = ["InMemoryAuctionHouseRepository", "PostgresAuctionHouseRepository", "run_migrations"]
