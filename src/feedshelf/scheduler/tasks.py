"""定时任务定义."""

import asyncio
import logging
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.ext.asyncio import AsyncEngine

from feedshelf.config import Settings
from feedshelf.core.errors import SynchronizationError
from feedshelf.core.sync import Synchronizer
from feedshelf.scheduler.locks import InProcessLock, PostgresAdvisoryLock, SyncLock
from feedshelf.utils.ids import new_job_id

logger = logging.getLogger(__name__)

SYNC_JOB_ID = "feed_synchronization"


class SyncScheduler:
    """
    周期性执行同步任务.

    每次触发先尝试获取锁，上一次任务仍在运行时跳过本次触发。
    """

    def __init__(
        self,
        synchronizer: Synchronizer,
        lock: SyncLock,
        interval: timedelta = timedelta(hours=1),
        task_timeout: timedelta = timedelta(minutes=5),
    ) -> None:
        self.synchronizer = synchronizer
        self.lock = lock
        self.interval = interval
        self.task_timeout = task_timeout
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        """调度器是否已启动."""
        return self._scheduler is not None and self._scheduler.running

    async def run_once(self) -> str | None:
        """
        执行一次同步任务.

        Returns:
            任务 ID，锁被占用而跳过时返回 None
        """
        if not await self.lock.acquire():
            logger.info("已有同步任务在运行，跳过本次调度")
            return None

        job_id = new_job_id()
        try:
            async with asyncio.timeout(self.task_timeout.total_seconds()):
                await self.synchronizer.synchronize(job_id)
        except TimeoutError:
            logger.error(f"同步任务超时: job_id={job_id}, timeout={self.task_timeout}")
        except SynchronizationError as e:
            logger.error(f"同步任务部分失败: job_id={job_id}, 失败={len(e.errors)}")
        except Exception as e:
            logger.exception(f"同步任务失败: job_id={job_id}, error={e}")
        finally:
            await self.lock.release()

        return job_id

    def start(self) -> None:
        """启动调度器，并立即执行一次."""
        self._scheduler = AsyncIOScheduler()

        self._scheduler.add_job(
            self.run_once,
            "interval",
            seconds=self.interval.total_seconds(),
            id=SYNC_JOB_ID,
            name="订阅源同步",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        # 启动时立即执行一次同步
        self._scheduler.add_job(
            self.run_once,
            "date",
            id=f"{SYNC_JOB_ID}_initial",
            name="初始同步",
        )

        self._scheduler.start()
        logger.info(f"定时任务调度器已启动，同步间隔: {self.interval}")

    def shutdown(self) -> None:
        """关闭调度器，不等待正在运行的任务."""
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("定时任务调度器已关闭")
        self._scheduler = None


_scheduler: SyncScheduler | None = None


def create_sync_lock(settings: Settings, engine: AsyncEngine) -> SyncLock:
    """按配置创建同步锁."""
    if settings.sync_lock == "postgresql":
        return PostgresAdvisoryLock(engine)
    return InProcessLock()


def create_scheduler(
    settings: Settings,
    synchronizer: Synchronizer,
    lock: SyncLock,
) -> SyncScheduler:
    """创建定时任务调度器，配置启用时启动."""
    global _scheduler

    _scheduler = SyncScheduler(
        synchronizer,
        lock,
        interval=settings.synchronization_interval,
        task_timeout=settings.sync_task_timeout,
    )
    if settings.scheduler_enabled:
        _scheduler.start()
    else:
        logger.info("定时同步已禁用")

    return _scheduler


def get_scheduler() -> SyncScheduler | None:
    """获取当前调度器."""
    return _scheduler


async def shutdown_scheduler() -> None:
    """关闭定时任务调度器."""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown()
        _scheduler = None
