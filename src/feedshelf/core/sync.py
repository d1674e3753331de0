"""同步服务 - 定期刷新订阅源并写入新条目."""

import logging
from datetime import timedelta

from feedshelf.config import Settings
from feedshelf.core.entries import EntryBuilder
from feedshelf.core.errors import SynchronizationError
from feedshelf.core.pool import WorkerPool
from feedshelf.core.repositories import SynchronizingRepository
from feedshelf.core.schemas import FeedFetchMetadata, FeedMetadata
from feedshelf.fetcher.client import FeedClient
from feedshelf.models import Feed
from feedshelf.utils.dates import utcnow

logger = logging.getLogger(__name__)


class Synchronizer:
    """同步服务."""

    def __init__(
        self,
        repository: SynchronizingRepository,
        client: FeedClient,
        entry_builder: EntryBuilder | None = None,
        feeds_per_job: int = 20,
        min_feed_age: timedelta = timedelta(hours=6),
        worker_count: int = 5,
    ) -> None:
        self.repository = repository
        self.client = client
        self.entry_builder = entry_builder or EntryBuilder()
        self.feeds_per_job = feeds_per_job
        self.min_feed_age = min_feed_age
        self.worker_count = worker_count

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        repository: SynchronizingRepository,
        client: FeedClient,
    ) -> "Synchronizer":
        """按配置创建."""
        return cls(
            repository,
            client,
            entry_builder=EntryBuilder.from_settings(settings),
            feeds_per_job=settings.feeds_per_job,
            min_feed_age=settings.min_feed_age,
            worker_count=settings.worker_count,
        )

    async def synchronize(self, job_id: str) -> None:
        """
        同步最久未刷新的一批 Feed.

        Args:
            job_id: 任务 ID，用于日志

        Raises:
            SynchronizationError: 部分 Feed 同步失败（其余 Feed 不受影响）
        """
        last_sync_before = utcnow() - self.min_feed_age

        feeds = await self.repository.feed_get_n_by_last_synchronization_time(
            self.feeds_per_job, last_sync_before
        )
        if not feeds:
            logger.info(f"没有需要同步的 Feed: job_id={job_id}")
            return

        logger.info(f"开始同步: job_id={job_id}, feeds={len(feeds)}")

        pool: WorkerPool[Feed] = WorkerPool(self.worker_count, name=f"sync-{job_id}")
        errors = await pool.run(feeds, lambda feed: self._synchronize_feed_logged(feed, job_id))

        if errors:
            logger.error(
                f"同步完成，部分失败: job_id={job_id}, "
                f"成功={len(feeds) - len(errors)}, 失败={len(errors)}"
            )
            raise SynchronizationError(errors)

        logger.info(f"同步完成: job_id={job_id}, feeds={len(feeds)}")

    async def _synchronize_feed_logged(self, feed: Feed, job_id: str) -> None:
        try:
            await self.synchronize_feed(feed, job_id)
        except Exception as e:
            logger.error(f"同步失败: job_id={job_id}, feed_url={feed.feed_url}, error={e!r}")
            raise

    async def synchronize_feed(self, feed: Feed, job_id: str) -> None:
        """
        同步单个 Feed.

        304 时只更新同步时间；200 且内容哈希变化时先写入条目，再更新 Feed 元数据和哈希；
        最后总是更新缓存头和同步时间。
        """
        result = await self.client.fetch(feed.feed_url, feed.etag, feed.last_modified)

        now = utcnow()

        if result.not_modified:
            logger.debug(f"未变化: job_id={job_id}, feed_url={feed.feed_url}")
            await self.repository.feed_update_fetch_metadata(
                FeedFetchMetadata(
                    uuid=feed.uuid,
                    etag=feed.etag,
                    last_modified=feed.last_modified,
                    updated_at=now,
                    fetched_at=now,
                )
            )
            return

        if result.feed is not None and result.hash != feed.hash:
            # 条目写入成功后才记录新哈希，失败时下次同步会重新写入
            entries = self.entry_builder.build_many(feed.uuid, result.feed.items, now)
            count = await self.repository.entry_upsert_many(entries)
            logger.info(
                f"已更新条目: job_id={job_id}, feed_url={feed.feed_url}, entries={count}"
            )

            await self.repository.feed_update_metadata(
                FeedMetadata(
                    uuid=feed.uuid,
                    title=result.feed.title or feed.title,
                    description=result.feed.description,
                    hash=result.hash,
                    updated_at=now,
                )
            )

        await self.repository.feed_update_fetch_metadata(
            FeedFetchMetadata(
                uuid=feed.uuid,
                etag=result.etag,
                last_modified=result.last_modified,
                updated_at=now,
                fetched_at=now,
            )
        )
