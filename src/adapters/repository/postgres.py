"""
PostgreSQL repository adapter - Implements AuctionHouseRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Storage Layout:
---------------
An auction house aggregate is spread over three tables linked by
cascading foreign keys:

1. **auction_houses**: one row per house, UNIQUE(name) backs the
   duplicate-name rule across processes.

2. **auctions**: one row per auction, owned by a house.

3. **auction_bidders**: one row per accepted bid, owned by an auction.
   The bid-price map of an auction is rebuilt from these rows.

Every write runs in a single transaction. save_auction only touches the
rows of one auction so that concurrent bids on sibling auctions of the
same house never overwrite each other.
"""

import logging
from pathlib import Path

from psycopg import Cursor
from psycopg.errors import UniqueViolation
from psycopg_pool import ConnectionPool

from src.domain.models import Auction, AuctionHouse, AuctionStatus, Bidder, generate_id

logger = logging.getLogger(__name__)


class PostgresAuctionHouseRepository:
    """
    Implements AuctionHouseRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    Lookups return freshly loaded aggregates; callers save their changes back.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_house_by_name(self, name: str) -> AuctionHouse | None:
        houses = self._load_houses("WHERE name = %s ORDER BY created_at LIMIT 1", (name,))
        return houses[0] if houses else None

    def find_house_by_id(self, house_id: str) -> AuctionHouse | None:
        houses = self._load_houses("WHERE id = %s", (house_id,))
        return houses[0] if houses else None

    def save_house(self, house: AuctionHouse) -> AuctionHouse | None:
        """
        Upsert a house with all of its auctions and bids.

        Auctions and bids stored for this house but missing from the
        aggregate are removed.

        Returns:
            The saved house, or None if another house already uses its name
        """
        sql = """
            INSERT INTO auction_houses (id, name, creator_name)
            VALUES (%s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET name = EXCLUDED.name,
                creator_name = EXCLUDED.creator_name
        """
        prune_sql = "DELETE FROM auctions WHERE house_id = %s AND NOT (id = ANY(%s))"

        generated = house.id is None
        if generated:
            house.id = generate_id()

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (house.id, house.name, house.creator_name))
                cursor.execute(prune_sql, (house.id, list(house.auctions)))
                for auction in house.auctions.values():
                    self._upsert_auction(cursor, house.id, auction)
                conn.commit()
        except UniqueViolation:
            logger.warning("Auction house name already stored: %s", house.name)
            if generated:
                house.id = None
            return None
        return house

    def save_auction(self, house: AuctionHouse, auction: Auction) -> Auction | None:
        """
        Upsert one auction and its bids.

        The parent row is share-locked so that a concurrent house deletion
        cannot interleave with the write.

        Returns:
            The saved auction, or None if the house no longer exists
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM auction_houses WHERE id = %s FOR SHARE", (house.id,))
            if cursor.fetchone() is None:
                conn.commit()
                return None
            self._upsert_auction(cursor, house.id, auction)
            conn.commit()
        return auction

    def list_houses(self) -> list[AuctionHouse]:
        return self._load_houses("", ())

    def list_houses_by_creator(self, creator_id: str) -> list[AuctionHouse]:
        return self._load_houses("WHERE creator_name = %s", (creator_id,))

    def delete_house(self, house: AuctionHouse) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM auction_houses WHERE id = %s", (house.id,))
            conn.commit()
            return cursor.rowcount == 1

    def delete_all_houses(self) -> None:
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM auction_houses")
            conn.commit()

    def delete_auction(self, house: AuctionHouse, auction: Auction) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                "DELETE FROM auctions WHERE id = %s AND house_id = %s",
                (auction.id, house.id),
            )
            conn.commit()
            deleted = cursor.rowcount == 1
        house.auctions.pop(auction.id, None)
        return deleted

    def find_auction_by_house_and_auction_id(
        self, house_id: str, auction_id: str
    ) -> Auction | None:
        house = self.find_house_by_id(house_id)
        if house is None:
            return None
        return house.auctions.get(auction_id)

    def _upsert_auction(self, cursor: Cursor, house_id: str, auction: Auction) -> None:
        auction_sql = """
            INSERT INTO auctions (
                id, house_id, name, description, creator_id, starting_time, end_time,
                max_bidders, status, initial_price, current_price
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET name = EXCLUDED.name,
                description = EXCLUDED.description,
                creator_id = EXCLUDED.creator_id,
                starting_time = EXCLUDED.starting_time,
                end_time = EXCLUDED.end_time,
                max_bidders = EXCLUDED.max_bidders,
                status = EXCLUDED.status,
                initial_price = EXCLUDED.initial_price,
                current_price = EXCLUDED.current_price
        """
        prune_sql = "DELETE FROM auction_bidders WHERE auction_id = %s AND NOT (id = ANY(%s))"
        bidder_sql = """
            INSERT INTO auction_bidders (id, auction_id, name, bidding_time, price)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET name = EXCLUDED.name,
                bidding_time = EXCLUDED.bidding_time,
                price = EXCLUDED.price
        """

        cursor.execute(
            auction_sql,
            (
                auction.id,
                house_id,
                auction.name,
                auction.description,
                auction.creator_id,
                auction.starting_time,
                auction.end_time,
                auction.max_bidders,
                auction.status.value,
                auction.initial_price,
                auction.current_price,
            ),
        )
        cursor.execute(prune_sql, (auction.id, list(auction.bidders)))
        if auction.bidders:
            cursor.executemany(
                bidder_sql,
                [
                    (bidder.id, auction.id, bidder.name, bidder.bidding_time, auction.bidding[bidder.id])
                    for bidder in auction.bidders.values()
                ],
            )

    def _load_houses(self, where: str, params: tuple) -> list[AuctionHouse]:
        """
        Load house aggregates matching a WHERE clause on auction_houses.

        Three queries regardless of the number of houses: houses, then
        their auctions, then the bids of those auctions.
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(f"SELECT id, name, creator_name FROM auction_houses {where}", params)
            houses = {
                row[0]: AuctionHouse(id=row[0], name=row[1], creator_name=row[2])
                for row in cursor.fetchall()
            }
            if not houses:
                return []

            cursor.execute(
                """
                SELECT id, house_id, name, description, creator_id, starting_time, end_time,
                       max_bidders, status, initial_price, current_price
                FROM auctions
                WHERE house_id = ANY(%s)
                """,
                (list(houses),),
            )
            auctions: dict[str, Auction] = {}
            for row in cursor.fetchall():
                auction = Auction(
                    id=row[0],
                    name=row[2],
                    description=row[3],
                    creator_id=row[4],
                    starting_time=row[5],
                    end_time=row[6],
                    max_bidders=row[7],
                    status=AuctionStatus(row[8]),
                    initial_price=row[9],
                    current_price=row[10],
                )
                houses[row[1]].add_auction(auction)
                auctions[auction.id] = auction

            if auctions:
                cursor.execute(
                    """
                    SELECT id, auction_id, name, bidding_time, price
                    FROM auction_bidders
                    WHERE auction_id = ANY(%s)
                    """,
                    (list(auctions),),
                )
                for row in cursor.fetchall():
                    bidder = Bidder(id=row[0], name=row[2], bidding_time=row[3], price=row[4])
                    auctions[row[1]].add_bid(bidder)
            conn.commit()

        return list(houses.values())


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
