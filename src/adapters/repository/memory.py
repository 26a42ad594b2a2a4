"""
In-memory repository adapter - Implements AuctionHouseRepository protocol.

Keeps auction houses in a process-local dict. Houses are stored and
returned by reference, so the service mutates stored auctions in place;
the dict itself is guarded by a re-entrant lock.
"""

import threading

from src.domain.models import Auction, AuctionHouse, generate_id


class InMemoryAuctionHouseRepository:
    """
    Implements AuctionHouseRepository protocol with a dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._houses: dict[str, AuctionHouse] = {}
        self._lock = threading.RLock()

    def find_house_by_name(self, name: str) -> AuctionHouse | None:
        with self._lock:
            return next((house for house in self._houses.values() if house.name == name), None)

    def find_house_by_id(self, house_id: str) -> AuctionHouse | None:
        with self._lock:
            return self._houses.get(house_id)

    def save_house(self, house: AuctionHouse) -> AuctionHouse | None:
        with self._lock:
            if house.id is None:
                house.id = generate_id()
            self._houses[house.id] = house
            return house

    def save_auction(self, house: AuctionHouse, auction: Auction) -> Auction | None:
        with self._lock:
            stored = self._houses.get(house.id)
            if stored is None:
                return None
            stored.auctions[auction.id] = auction
            return auction

    def list_houses(self) -> list[AuctionHouse]:
        with self._lock:
            return list(self._houses.values())

    def list_houses_by_creator(self, creator_id: str) -> list[AuctionHouse]:
        with self._lock:
            return [house for house in self._houses.values() if house.creator_name == creator_id]

    def delete_house(self, house: AuctionHouse) -> bool:
        with self._lock:
            return self._houses.pop(house.id, None) is not None

    def delete_all_houses(self) -> None:
        with self._lock:
            self._houses.clear()

    def delete_auction(self, house: AuctionHouse, auction: Auction) -> bool:
        with self._lock:
            stored = self._houses.get(house.id)
            if stored is None:
                return False
            return stored.auctions.pop(auction.id, None) is not None

    def find_auction_by_house_and_auction_id(
        self, house_id: str, auction_id: str
    ) -> Auction | None:
        with self._lock:
            house = self._houses.get(house_id)
            if house is None:
                return None
            return house.auctions.get(auction_id)
