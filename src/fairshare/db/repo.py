from __future__ import annotations

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncIterator, Iterable

import asyncpg

from fairshare.db.models import Expense, Participant, ParticipantStatus, SettlementStatus
from fairshare.logging import get_logger, sql_logger
from fairshare.services.settlement import Settlement


class Database:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None
        self._log = get_logger(__name__)

    async def connect(self) -> None:
        if self._pool is None:
            # asyncpg wants a plain postgresql:// scheme, without the "+asyncpg" driver suffix
            dsn = self._dsn.replace("+asyncpg", "")
            self._pool = await asyncpg.create_pool(dsn)
            self._log.info("db.pool.created")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._log.info("db.pool.closed")

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetch", query=query, args=args)
        return await self._pool.fetch(query, *args)

    async def execute(self, query: str, *args: Any) -> str:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.execute", query=query, args=args)
        return await self._pool.execute(query, *args)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        await self._ensure_pool()
        assert self._pool
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                sql_logger.info("sql.transaction")
                yield conn

    async def _ensure_pool(self) -> None:
        if self._pool is None:
            await self.connect()


def _participant_from_row(row: Any) -> Participant:
    return Participant(
        id=row["id"],
        name=row["name"],
        email=row.get("email"),
        status=ParticipantStatus(row["status"]) if row.get("status") else None,
    )


def _expense_from_row(row: Any) -> Expense:
    return Expense(
        id=row["id"],
        trip_id=row["trip_id"],
        description=row["description"],
        amount=float(row["amount"]),
        payer_id=row["payer_id"],
        split_between=tuple(row["split_between"] or ()),
        category=row["category"],
        created_at=row.get("created_at"),
    )


def _settlement_from_row(row: Any) -> Settlement:
    return Settlement(
        from_id=row["from_id"],
        to_id=row["to_id"],
        amount=float(row["amount"]),
        status=SettlementStatus(row["status"]),
    )


class FairShareRepository:
    def __init__(self, db: Database) -> None:
        self.db = db
        self._log = get_logger(__name__)

    async def get_participants(self, trip_id: str) -> list[Participant]:
        rows = await self.db.fetch(
            """
            SELECT id, name, email, status
            FROM trip_participants
            WHERE trip_id = $1
            ORDER BY position, id
            """,
            trip_id,
        )
        return [_participant_from_row(row) for row in rows]

    async def get_expenses(self, trip_id: str) -> list[Expense]:
        rows = await self.db.fetch(
            """
            SELECT e.*,
                   array_agg(s.participant_id ORDER BY s.participant_id)
                       FILTER (WHERE s.participant_id IS NOT NULL) AS split_between
            FROM expenses e
            LEFT JOIN expense_splits s ON s.expense_id = e.id
            WHERE e.trip_id = $1
            GROUP BY e.id
            ORDER BY e.created_at, e.id
            """,
            trip_id,
        )
        return [_expense_from_row(row) for row in rows]

    async def get_settlements(self, trip_id: str) -> list[Settlement]:
        rows = await self.db.fetch(
            """
            SELECT from_id, to_id, amount, status
            FROM settlements
            WHERE trip_id = $1
            ORDER BY position
            """,
            trip_id,
        )
        return [_settlement_from_row(row) for row in rows]

    async def replace_settlements(self, trip_id: str, settlements: Iterable[Settlement]) -> None:
        settlements = list(settlements)
        async with self.db.transaction() as conn:
            if settlements:
                # a stored 'settled' is never downgraded by the computed status
                await conn.executemany(
                    """
                    INSERT INTO settlements (trip_id, from_id, to_id, amount, status, position)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    ON CONFLICT (trip_id, from_id, to_id) DO UPDATE
                        SET amount = EXCLUDED.amount,
                            position = EXCLUDED.position,
                            status = CASE WHEN settlements.status = 'settled'
                                          THEN 'settled' ELSE EXCLUDED.status END,
                            updated_at = now()
                    """,
                    [
                        (trip_id, s.from_id, s.to_id, Decimal(str(s.amount)), s.status.value, position)
                        for position, s in enumerate(settlements)
                    ],
                )
            await conn.execute(
                """
                DELETE FROM settlements
                WHERE trip_id = $1
                  AND (from_id, to_id) NOT IN (SELECT * FROM unnest($2::text[], $3::text[]))
                """,
                trip_id,
                [s.from_id for s in settlements],
                [s.to_id for s in settlements],
            )
        self._log.info("settlements.replaced", trip_id=trip_id, count=len(settlements))

    async def mark_settlement_settled(self, trip_id: str, from_id: str, to_id: str) -> bool:
        result = await self.db.execute(
            """
            UPDATE settlements
            SET status = 'settled', updated_at = now()
            WHERE trip_id = $1 AND from_id = $2 AND to_id = $3 AND status = 'pending'
            """,
            trip_id,
            from_id,
            to_id,
        )
        return result != "UPDATE 0"
