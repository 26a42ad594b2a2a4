"""
Auction house domain service - Auction lifecycle implementation.

This module contains the core business logic for auction houses:
house and auction management, bid acceptance, and winner resolution.

Auction Lifecycle (caller-driven)
=================================

States:
- NOT_STARTED: Initial state, bids are refused
- RUNNING: The only state in which bids are accepted
- TERMINATED: Finished, the winner can be resolved
- DELETED: Finished without a winner

Rules:
    TERMINATED -> any   (refused, AuctionAlreadyFinished)
    DELETED -> any      (refused, AuctionAlreadyFinished)
    other -> any        (accepted as requested, no ordering check)

Bidding:
    A bid is accepted only while RUNNING and only when its price is
    strictly above both the current price and the initial price.
    Equal prices are refused.

Note: Compound read-validate-write sequences are serialized per entity
with KeyedLocks. Auction-level writes go through save_auction so that
they never rewrite sibling auctions of the same house.
"""

from dataclasses import dataclass, field

from .exceptions import (
    AuctionAlreadyFinished,
    AuctionHouseAlreadyExists,
    AuctionHouseNotFound,
    AuctionNotFinished,
    AuctionNotFound,
    AuctionNotStarted,
    BiddingPriceTooLow,
    GeneralFailure,
    NoBiddingFound,
)
from .locking import KeyedLocks
from .models import Auction, AuctionHouse, AuctionStatus, Bidder, generate_id
from .ports import AuctionHouseRepository


@dataclass
class AuctionHouseService:
    """
    Domain service for auction houses and their auctions.

    Orchestrates validation and persistence through the repository port.
    Never logs; failures are reported with domain exceptions.
    """

    repository: AuctionHouseRepository
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    # Auction houses

    def create_house(self, house: AuctionHouse) -> AuctionHouse:
        """
        Register a new auction house.

        Args:
            house: House to create (its id is generated on save)

        Returns:
            The saved house carrying its generated id

        Raises:
            AuctionHouseAlreadyExists: If a house already uses that name
            GeneralFailure: If the repository could not save the house
        """
        with self.locks.hold(f"house-name:{house.name}"):
            if self.repository.find_house_by_name(house.name) is not None:
                raise AuctionHouseAlreadyExists(house.name)
            saved = self.repository.save_house(house)
        if saved is None:
            raise GeneralFailure(f"Could not save auction house {house.name}")
        return saved

    def list_houses(self) -> list[AuctionHouse]:
        return self.repository.list_houses()

    def list_houses_by_creator(self, creator_id: str) -> list[AuctionHouse]:
        return self.repository.list_houses_by_creator(creator_id)

    def delete_house(self, house_id: str) -> bool:
        """
        Delete an auction house and every auction it owns.

        Raises:
            AuctionHouseNotFound: If no house has that id
        """
        with self.locks.hold(f"house:{house_id}"):
            house = self._get_house(house_id)
            if not self.repository.delete_house(house):
                raise AuctionHouseNotFound(house_id)
        return True

    def delete_all_houses(self) -> None:
        """Clear the registry. Test and reset use only."""
        self.repository.delete_all_houses()

    # Auctions

    def create_auction(self, house_id: str, auction: Auction) -> Auction:
        """
        Create an auction inside an existing auction house.

        Assigns a new id, starts the current price at the initial price
        when it is zero, and fills the creator from the house when unset.
        The supplied status is kept as-is.

        Raises:
            AuctionHouseNotFound: If the house does not exist
        """
        with self.locks.hold(f"house:{house_id}"):
            house = self._get_house(house_id)
            auction.id = generate_id()
            auction.set_current_price_if_zero()
            if auction.creator_id is None:
                auction.creator_id = house.creator_name
            house.add_auction(auction)
            if self.repository.save_auction(house, auction) is None:
                raise AuctionHouseNotFound(house_id)
        return auction

    def list_auctions(self, house_id: str) -> list[Auction]:
        """
        Raises:
            AuctionHouseNotFound: If the house does not exist
        """
        house = self._get_house(house_id)
        return list(house.auctions.values())

    def delete_auction(self, house_id: str, auction_id: str) -> bool:
        """
        Remove an auction from its house.

        Raises:
            AuctionHouseNotFound: If the house does not exist
            AuctionNotFound: If the house has no auction with that id
        """
        with self.locks.hold(self._auction_key(house_id, auction_id)):
            house = self._get_house(house_id)
            auction = self._get_auction(house, auction_id)
            return self.repository.delete_auction(house, auction)

    def list_auctions_by_status(
        self, house_id: str, status: AuctionStatus
    ) -> list[Auction]:
        """
        Raises:
            AuctionHouseNotFound: If the house does not exist
        """
        house = self._get_house(house_id)
        return [auction for auction in list(house.auctions.values()) if auction.status == status]

    def update_auction_status(
        self, house_id: str, auction_id: str, status: AuctionStatus
    ) -> Auction:
        """
        Overwrite the status of an auction that is not finished yet.

        Raises:
            AuctionHouseNotFound: If the house does not exist (or vanished
                before the update could be saved)
            AuctionNotFound: If the house has no auction with that id
            AuctionAlreadyFinished: If the auction is TERMINATED or DELETED
        """
        with self.locks.hold(self._auction_key(house_id, auction_id)):
            house = self._get_house(house_id)
            auction = self._get_auction(house, auction_id)
            if auction.is_finished:
                raise AuctionAlreadyFinished(auction_id)
            auction.status = status
            if self.repository.save_auction(house, auction) is None:
                raise AuctionHouseNotFound(house_id)
        return auction

    # Bidding

    def bid_on_auction(self, house_id: str, auction_id: str, bidder: Bidder) -> Bidder:
        """
        Place a bid on a running auction.

        Args:
            house_id: Id of the house owning the auction
            auction_id: Id of the auction to bid on
            bidder: Bid to place (its id is assigned on acceptance)

        Returns:
            The accepted bidder carrying its new id

        Raises:
            AuctionHouseNotFound: If the house does not exist
            AuctionNotFound: If the house has no auction with that id
            AuctionNotStarted: If the auction is not RUNNING
            BiddingPriceTooLow: If the price does not strictly exceed both
                the current price and the initial price
        """
        with self.locks.hold(self._auction_key(house_id, auction_id)):
            house = self._get_house(house_id)
            auction = self._get_auction(house, auction_id)
            if auction.status != AuctionStatus.RUNNING:
                raise AuctionNotStarted(auction_id)
            if not (bidder.price > auction.current_price and bidder.price > auction.initial_price):
                raise BiddingPriceTooLow(f"{bidder.price} <= {auction.current_price}")

            auction.current_price = bidder.price
            bidder.id = generate_id()
            auction.add_bid(bidder)
            if self.repository.save_auction(house, auction) is None:
                raise AuctionHouseNotFound(house_id)
        return bidder

    def get_all_bidding(self, house_id: str, auction_id: str) -> dict[str, float]:
        """
        Map each bidder display name to its bid price.

        Several bids under the same display name collapse into one entry
        holding the highest of their prices.

        Raises:
            AuctionHouseNotFound: If the house does not exist
            AuctionNotFound: If the house has no auction with that id
        """
        house = self._get_house(house_id)
        auction = self._get_auction(house, auction_id)

        bidding: dict[str, float] = {}
        for bidder_id, price in list(auction.bidding.items()):
            name = auction.bidders[bidder_id].name
            bidding[name] = max(price, bidding.get(name, price))
        return bidding

    def get_winner(self, house_id: str, auction_id: str) -> Bidder:
        """
        Resolve the winner of a terminated auction.

        The highest bid wins; equal prices go to the earliest bidding
        time, then to the smallest bidder id.

        Raises:
            AuctionHouseNotFound: If the house does not exist
            AuctionNotFound: If the house has no auction with that id
            AuctionNotFinished: If the auction is not TERMINATED
            NoBiddingFound: If nobody bid on the auction
        """
        auction = self.repository.find_auction_by_house_and_auction_id(house_id, auction_id)
        if auction is None:
            self._get_house(house_id)
            raise AuctionNotFound(auction_id)
        if auction.status != AuctionStatus.TERMINATED:
            raise AuctionNotFinished(auction_id)
        if not auction.bidding:
            raise NoBiddingFound(auction_id)

        bidders = [auction.bidders[bidder_id] for bidder_id in auction.bidding]
        return min(
            bidders,
            key=lambda bidder: (-auction.bidding[bidder.id], bidder.bidding_time, bidder.id),
        )

    # Helpers

    def _get_house(self, house_id: str) -> AuctionHouse:
        house = self.repository.find_house_by_id(house_id)
        if house is None:
            raise AuctionHouseNotFound(house_id)
        return house

    def _get_auction(self, house: AuctionHouse, auction_id: str) -> Auction:
        auction = house.auctions.get(auction_id)
        if auction is None:
            raise AuctionNotFound(auction_id)
        return auction

    @staticmethod
    def _auction_key(house_id: str, auction_id: str) -> str:
        return f"auction:{house_id}:{auction_id}"
