"""
Domain models - Auction houses, auctions and bidders.

Plain dataclasses with the defaults applied at construction time:
timestamps default to the creation instant (UTC), auctions start in
NOT_STARTED, and identifiers stay None until the service assigns them.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def generate_id() -> str:
    """Generate a globally unique identifier for a new entity."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuctionStatus(str, Enum):
    """
    Auction lifecycle states.

    State Transitions (caller-driven):
    - NOT_STARTED -> RUNNING -> TERMINATED
    - any non-finished state -> DELETED

    Finished States:
    - TERMINATED: Winner can be resolved, no further status change
    - DELETED: No further status change

    Note: Transitions between non-finished states are not validated;
    only finished auctions reject status updates.
    """

    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    TERMINATED = "TERMINATED"
    DELETED = "DELETED"


FINISHED_STATUSES = frozenset({AuctionStatus.TERMINATED, AuctionStatus.DELETED})


@dataclass
class Bidder:
    """A single recorded bid within one auction."""

    name: str
    price: float
    id: str | None = None
    bidding_time: datetime = field(default_factory=utc_now)


@dataclass
class Auction:
    """
    A time-bound sale process inside an auction house.

    bidders and bidding are both keyed by bidder id; bidding keeps the
    submitted price of every accepted bid.
    """

    name: str
    initial_price: float
    id: str | None = None
    description: str | None = None
    creator_id: str | None = None
    starting_time: datetime = field(default_factory=utc_now)
    end_time: datetime | None = None
    max_bidders: int = 0
    status: AuctionStatus = AuctionStatus.NOT_STARTED
    current_price: float = 0.0
    bidders: dict[str, Bidder] = field(default_factory=dict)
    bidding: dict[str, float] = field(default_factory=dict)

    @property
    def is_finished(self) -> bool:
        """True once the auction no longer accepts status changes."""
        return self.status in FINISHED_STATUSES

    def set_current_price_if_zero(self) -> None:
        """Start the current price at the initial price when none was given."""
        if self.current_price == 0.0:
            self.current_price = self.initial_price

    def add_bid(self, bidder: Bidder) -> None:
        """Record an accepted bid. The bidder must already carry its id."""
        self.bidders[bidder.id] = bidder
        self.bidding[bidder.id] = bidder.price


@dataclass
class AuctionHouse:
    """A named container of auctions, created by a user."""

    name: str
    creator_name: str
    id: str | None = None
    auctions: dict[str, Auction] = field(default_factory=dict)

    def add_auction(self, auction: Auction) -> None:
        self.auctions[auction.id] = auction
