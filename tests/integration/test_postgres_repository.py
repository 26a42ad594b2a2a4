"""
Integration tests for PostgresAuctionHouseRepository.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be reachable at DATABASE_URL; skipped otherwise.
"""

from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor

import pytest
from psycopg import OperationalError
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresAuctionHouseRepository, run_migrations
from src.config.settings import get_settings
from src.domain.auction_house import AuctionHouseService
from src.domain.exceptions import AuctionHouseAlreadyExists, GeneralFailure
from src.domain.models import Auction, AuctionHouse, AuctionStatus
from tests.factories import make_auction, make_bidder, make_house

pytestmark = pytest.mark.postgres


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=2.0)
    except (PoolTimeout, OperationalError):
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAuctionHouseRepository:
    """Create repository instance for each test."""
    return PostgresAuctionHouseRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean auction tables before each test (auctions and bids cascade)."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM auction_houses")
        conn.commit()
    yield


def save_with_auction(
    repository: PostgresAuctionHouseRepository,
    status: AuctionStatus = AuctionStatus.RUNNING,
) -> tuple[AuctionHouse, Auction]:
    house = repository.save_house(make_house())
    auction = make_auction(status=status, initial_price=100.0)
    auction.id = "auction-1"
    auction.set_current_price_if_zero()
    house.add_auction(auction)
    repository.save_auction(house, auction)
    return house, auction


class TestSaveHouse:
    """Tests for save_house."""

    def test_save_generates_id_and_round_trips(
        self, repository: PostgresAuctionHouseRepository
    ) -> None:
        house = repository.save_house(make_house())

        loaded = repository.find_house_by_id(house.id)

        assert loaded == AuctionHouse(id=house.id, name="Spideo", creator_name="Elliott")

    def test_duplicate_name_returns_none(self, repository: PostgresAuctionHouseRepository) -> None:
        """UNIQUE(name) refuses a second house under the same name."""
        repository.save_house(make_house())
        duplicate = AuctionHouse(name="Spideo", creator_name="Emilie")

        assert repository.save_house(duplicate) is None
        assert duplicate.id is None
        assert len(repository.list_houses()) == 1

    def test_save_house_prunes_removed_auctions(
        self, repository: PostgresAuctionHouseRepository
    ) -> None:
        house, auction = save_with_auction(repository)
        house.auctions.pop(auction.id)

        repository.save_house(house)

        assert repository.find_auction_by_house_and_auction_id(house.id, auction.id) is None


class TestSaveAuction:
    """Tests for save_auction."""

    def test_auction_and_bids_round_trip(self, repository: PostgresAuctionHouseRepository) -> None:
        house, auction = save_with_auction(repository)
        bidder = make_bidder(150.0)
        bidder.id = "bidder-1"
        auction.current_price = 150.0
        auction.add_bid(bidder)
        repository.save_auction(house, auction)

        loaded = repository.find_auction_by_house_and_auction_id(house.id, auction.id)

        assert loaded.status == AuctionStatus.RUNNING
        assert loaded.current_price == 150.0
        assert loaded.creator_id is None
        assert loaded.bidding == {"bidder-1": 150.0}
        assert loaded.bidders["bidder-1"].name == "Anonymous-1"
        assert loaded.bidders["bidder-1"].bidding_time == bidder.bidding_time

    def test_save_auction_in_missing_house_returns_none(
        self, repository: PostgresAuctionHouseRepository
    ) -> None:
        house = AuctionHouse(id="gone", name="Gone", creator_name="Nobody")
        auction = make_auction()
        auction.id = "auction-1"

        assert repository.save_auction(house, auction) is None

    def test_save_auction_leaves_siblings_untouched(
        self, repository: PostgresAuctionHouseRepository
    ) -> None:
        """Saving one auction from a stale aggregate never rewrites another."""
        house, first = save_with_auction(repository)
        stale = repository.find_house_by_id(house.id)

        second = make_auction(1)
        second.id = "auction-2"
        house.add_auction(second)
        repository.save_auction(house, second)

        first_copy = stale.auctions[first.id]
        first_copy.status = AuctionStatus.TERMINATED
        repository.save_auction(stale, first_copy)

        loaded = repository.find_house_by_id(house.id)
        assert set(loaded.auctions) == {"auction-1", "auction-2"}
        assert loaded.auctions["auction-1"].status == AuctionStatus.TERMINATED


class TestListAndDelete:
    """Tests for listing and deletion."""

    def test_list_houses_by_creator(self, repository: PostgresAuctionHouseRepository) -> None:
        repository.save_house(make_house(0))
        repository.save_house(make_house(1))

        houses = repository.list_houses_by_creator("Emilie")

        assert [house.name for house in houses] == ["Test"]

    def test_delete_house_cascades(
        self, repository: PostgresAuctionHouseRepository, pool: ConnectionPool
    ) -> None:
        house, _ = save_with_auction(repository)

        assert repository.delete_house(house) is True
        assert repository.delete_house(house) is False

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM auctions")
            assert cursor.fetchone()[0] == 0

    def test_delete_auction(self, repository: PostgresAuctionHouseRepository) -> None:
        house, auction = save_with_auction(repository)

        assert repository.delete_auction(house, auction) is True
        assert repository.delete_auction(house, auction) is False
        assert repository.find_house_by_id(house.id).auctions == {}

    def test_delete_all_houses(self, repository: PostgresAuctionHouseRepository) -> None:
        for index in range(3):
            repository.save_house(make_house(index))

        repository.delete_all_houses()

        assert repository.list_houses() == []

    def test_find_auction_of_missing_house(
        self, repository: PostgresAuctionHouseRepository
    ) -> None:
        assert repository.find_auction_by_house_and_auction_id("missing", "missing") is None


class TestServiceOnPostgres:
    """The domain service keeps its guarantees on the shared database."""

    def test_concurrent_create_same_name_exactly_one_succeeds(
        self, pool: ConnectionPool
    ) -> None:
        """Separate services (as in separate processes) still race safely."""

        def create() -> bool:
            service = AuctionHouseService(PostgresAuctionHouseRepository(pool))
            try:
                service.create_house(AuctionHouse(name="Spideo", creator_name="Elliott"))
            except (AuctionHouseAlreadyExists, GeneralFailure):
                return False
            return True

        with ThreadPoolExecutor(max_workers=5) as executor:
            results = list(executor.map(lambda _: create(), range(5)))

        assert results.count(True) == 1
        assert len(PostgresAuctionHouseRepository(pool).list_houses()) == 1

    def test_bid_flow_persists(self, repository: PostgresAuctionHouseRepository) -> None:
        service = AuctionHouseService(repository)
        house = service.create_house(make_house())
        auction = service.create_auction(
            house.id, make_auction(status=AuctionStatus.RUNNING, initial_price=100.0)
        )

        service.bid_on_auction(house.id, auction.id, make_bidder(150.0, "Anon-1"))
        service.bid_on_auction(house.id, auction.id, make_bidder(160.0, "Anon-2"))
        service.update_auction_status(house.id, auction.id, AuctionStatus.TERMINATED)

        assert service.get_all_bidding(house.id, auction.id) == {"Anon-1": 150.0, "Anon-2": 160.0}
        assert service.get_winner(house.id, auction.id).name == "Anon-2"
