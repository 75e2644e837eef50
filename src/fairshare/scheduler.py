from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from fairshare.config import get_settings
from fairshare.db.models import Expense, Participant
from fairshare.logging import get_logger
from fairshare.services.reconcile import reconcile_settlements
from fairshare.services.settlement import Settlement, settle_expenses


class TripSnapshotRepository(Protocol):
    async def get_participants(self, trip_id: str) -> list[Participant]: ...

    async def get_expenses(self, trip_id: str) -> list[Expense]: ...

    async def get_settlements(self, trip_id: str) -> list[Settlement]: ...

    async def replace_settlements(self, trip_id: str, settlements: Iterable[Settlement]) -> None: ...


def _job_id(trip_id: str) -> str:
    return f"recompute:{trip_id}"


async def recompute_trip(repo: TripSnapshotRepository, trip_id: str) -> list[Settlement]:
    participants = await repo.get_participants(trip_id)
    expenses = await repo.get_expenses(trip_id)
    stored = await repo.get_settlements(trip_id)

    settlements = reconcile_settlements(settle_expenses(expenses, participants), stored)
    await repo.replace_settlements(trip_id, settlements)
    return await repo.get_settlements(trip_id)


async def _recompute_job(repo: TripSnapshotRepository, trip_id: str, lock: asyncio.Lock) -> None:
    log = get_logger(__name__)
    try:
        async with lock:
            settlements = await recompute_trip(repo, trip_id)
    except Exception:
        log.exception("recompute.failed", trip_id=trip_id)
        raise
    log.info("recompute.done", trip_id=trip_id, settlements=len(settlements))


class RecomputeScheduler:
    """Coalesces recompute requests per trip into one write after a quiet period.

    Every ``request`` re-arms the trip's one-shot job, so a burst of edits ends in
    a single recompute-and-persist ``delay_seconds`` after the last edit.
    """

    def __init__(
        self,
        repo: TripSnapshotRepository,
        *,
        delay_seconds: Optional[float] = None,
        timezone_name: Optional[str] = None,
    ) -> None:
        if delay_seconds is None or timezone_name is None:
            settings = get_settings()
            delay_seconds = settings.recompute_delay_seconds if delay_seconds is None else delay_seconds
            timezone_name = settings.tz if timezone_name is None else timezone_name

        self.repo = repo
        self.delay = timedelta(seconds=delay_seconds)
        self._scheduler = AsyncIOScheduler(timezone=timezone_name)
        self._locks: dict[str, asyncio.Lock] = {}
        self._log = get_logger(__name__)

    def start(self, paused: bool = False) -> None:
        self._scheduler.start(paused=paused)

    def shutdown(self) -> None:
        self._scheduler.shutdown(wait=False)

    def request(self, trip_id: str) -> datetime:
        run_at = datetime.now(timezone.utc) + self.delay
        self._scheduler.add_job(
            _recompute_job,
            DateTrigger(run_date=run_at),
            id=_job_id(trip_id),
            replace_existing=True,
            coalesce=True,
            misfire_grace_time=None,
            # one run in progress plus one queued on the lock; the queued run reads
            # the snapshot only after the lock is free, so it covers any later edit
            max_instances=2,
            kwargs={"repo": self.repo, "trip_id": trip_id, "lock": self._locks.setdefault(trip_id, asyncio.Lock())},
        )
        self._log.info("recompute.armed", trip_id=trip_id, run_at=run_at.isoformat())
        return run_at

    def cancel(self, trip_id: str) -> bool:
        job = self._scheduler.get_job(_job_id(trip_id))
        if job is None:
            return False
        job.remove()
        return True

    def pending(self) -> list[str]:
        prefix = _job_id("")
        return [job.id[len(prefix):] for job in self._scheduler.get_jobs() if job.id.startswith(prefix)]


async def setup_scheduler(repo: TripSnapshotRepository) -> RecomputeScheduler:
    scheduler = RecomputeScheduler(repo)
    scheduler.start()
    return scheduler
