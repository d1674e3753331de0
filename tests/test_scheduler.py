"""测试定时同步调度."""

import asyncio
from datetime import timedelta

import pytest

from feedshelf.config import Settings
from feedshelf.core.errors import SynchronizationError
from feedshelf.scheduler import (
    InProcessLock,
    PostgresAdvisoryLock,
    SyncScheduler,
    create_sync_lock,
)


class FakeSynchronizer:
    """记录调用的同步服务."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None) -> None:
        self.delay = delay
        self.error = error
        self.job_ids: list[str] = []

    async def synchronize(self, job_id: str) -> None:
        self.job_ids.append(job_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error


class TestInProcessLock:
    """InProcessLock 测试."""

    async def test_try_acquire(self) -> None:
        lock = InProcessLock()

        assert await lock.acquire()
        assert not await lock.acquire()

        await lock.release()
        assert await lock.acquire()

    async def test_release_when_not_held(self) -> None:
        lock = InProcessLock()
        await lock.release()
        assert await lock.acquire()


class TestSyncScheduler:
    """SyncScheduler 测试."""

    async def test_run_once(self) -> None:
        synchronizer = FakeSynchronizer()
        scheduler = SyncScheduler(synchronizer, InProcessLock())  # type: ignore[arg-type]

        job_id = await scheduler.run_once()

        assert job_id is not None
        assert synchronizer.job_ids == [job_id]

    async def test_job_ids_are_unique(self) -> None:
        synchronizer = FakeSynchronizer()
        scheduler = SyncScheduler(synchronizer, InProcessLock())  # type: ignore[arg-type]

        await scheduler.run_once()
        await scheduler.run_once()

        assert len(set(synchronizer.job_ids)) == 2

    async def test_overlapping_runs_are_skipped(self) -> None:
        synchronizer = FakeSynchronizer(delay=0.05)
        scheduler = SyncScheduler(synchronizer, InProcessLock())  # type: ignore[arg-type]

        results = await asyncio.gather(scheduler.run_once(), scheduler.run_once())

        assert sum(1 for r in results if r is None) == 1
        assert len(synchronizer.job_ids) == 1

    async def test_timeout_releases_lock(self) -> None:
        synchronizer = FakeSynchronizer(delay=1.0)
        lock = InProcessLock()
        scheduler = SyncScheduler(
            synchronizer,  # type: ignore[arg-type]
            lock,
            task_timeout=timedelta(milliseconds=20),
        )

        assert await scheduler.run_once() is not None
        assert await lock.acquire()

    @pytest.mark.parametrize(
        "error", [SynchronizationError([ValueError("boom")]), RuntimeError("database down")]
    )
    async def test_errors_are_logged_not_raised(self, error: Exception) -> None:
        lock = InProcessLock()
        scheduler = SyncScheduler(FakeSynchronizer(error=error), lock)  # type: ignore[arg-type]

        assert await scheduler.run_once() is not None
        assert await lock.acquire()

    async def test_start_and_shutdown(self) -> None:
        scheduler = SyncScheduler(
            FakeSynchronizer(),  # type: ignore[arg-type]
            InProcessLock(),
            interval=timedelta(hours=1),
        )

        scheduler.start()
        assert scheduler.running

        scheduler.shutdown()
        assert not scheduler.running


class TestCreateSyncLock:
    """create_sync_lock 测试."""

    def test_memory(self) -> None:
        lock = create_sync_lock(Settings(sync_lock="memory"), engine=None)  # type: ignore[arg-type]
        assert isinstance(lock, InProcessLock)

    def test_postgresql(self, engine) -> None:  # type: ignore[no-untyped-def]
        lock = create_sync_lock(Settings(sync_lock="postgresql"), engine)
        assert isinstance(lock, PostgresAdvisoryLock)
