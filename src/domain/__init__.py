"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for auction houses:
the auction lifecycle, bid validation and winner resolution. It defines
its own port interface for persistence, ensuring true hexagonal
architecture decoupling.
"""

from .auction_house import AuctionHouseService
from .exceptions import (
    AuctionAlreadyFinished,
    AuctionHouseAlreadyExists,
    AuctionHouseError,
    AuctionHouseNotFound,
    AuctionNotFinished,
    AuctionNotFound,
    AuctionNotStarted,
    BiddingPriceTooLow,
    GeneralFailure,
    NoBiddingFound,
    NotFound,
)
from .locking import KeyedLocks
from .models import Auction, AuctionHouse, AuctionStatus, Bidder
from .ports import AuctionHouseRepository

__all__ = [
    "Auction",
    "AuctionAlreadyFinished",
    "AuctionHouse",
    "AuctionHouseAlreadyExists",
    "AuctionHouseError",
    "AuctionHouseNotFound",
    "AuctionHouseRepository",
    "AuctionHouseService",
    "AuctionNotFinished",
    "AuctionNotFound",
    "AuctionNotStarted",
    "AuctionStatus",
    "Bidder",
    "BiddingPriceTooLow",
    "GeneralFailure",
    "KeyedLocks",
    "NoBiddingFound",
    "NotFound",
]
