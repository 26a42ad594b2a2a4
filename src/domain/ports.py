"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the registry interface (port) that the domain
requires from persistence. Adapters implement this protocol.
"""

from typing import Protocol

from .models import Auction, AuctionHouse


class AuctionHouseRepository(Protocol):
    """
    Port interface for auction house persistence.

    Lookups never raise: an absent house or auction is reported as None.
    Mutations that need an existing parent rely on the caller having
    resolved it first.
    """

    def find_house_by_name(self, name: str) -> AuctionHouse | None:
        """First house whose name is exactly equal to name (no case folding)."""
        ...

    def find_house_by_id(self, house_id: str) -> AuctionHouse | None:
        ...

    def save_house(self, house: AuctionHouse) -> AuctionHouse | None:
        """
        Upsert an auction house together with its auctions.

        Generates an id when the house has none. Saving twice with the
        same id replaces the stored house.

        Returns:
            The saved house, or None if persistence failed
        """
        ...

    def save_auction(self, house: AuctionHouse, auction: Auction) -> Auction | None:
        """
        Upsert a single auction (and its bids) inside an existing house.

        Returns:
            The saved auction, or None if the house no longer exists
        """
        ...

    def list_houses(self) -> list[AuctionHouse]:
        """Unordered snapshot of every house."""
        ...

    def list_houses_by_creator(self, creator_id: str) -> list[AuctionHouse]:
        ...

    def delete_house(self, house: AuctionHouse) -> bool:
        """True if a house with that id existed and was removed."""
        ...

    def delete_all_houses(self) -> None:
        """Clear all state. Reserved for tests and resets."""
        ...

    def delete_auction(self, house: AuctionHouse, auction: Auction) -> bool:
        """True if the auction existed in the house and was removed."""
        ...

    def find_auction_by_house_and_auction_id(
        self, house_id: str, auction_id: str
    ) -> Auction | None:
        """Resolve an auction by its house id and auction id; None if either is absent."""
        ...
