"""同步任务使用的 SQL 仓储."""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import or_, select, update

from feedshelf.core.schemas import FeedFetchMetadata, FeedMetadata
from feedshelf.models import Entry, Feed, Subscription
from feedshelf.storage.base import SQLRepository, batched, dialect_name, upsert
from feedshelf.storage.feeds import entry_values
from feedshelf.storage.fulltext import search_vector


class SQLSynchronizingRepository(SQLRepository):
    """待同步 Feed 的选取与同步结果的写入."""

    async def feed_get_n_by_last_synchronization_time(
        self, n: int, before: datetime
    ) -> list[Feed]:
        """
        获取最多 n 个在 before 之前同步过（或从未同步）且仍有订阅的 Feed.

        按 fetched_at 升序（从未同步的在前），相同时按 uuid 排序。
        """
        has_subscription = (
            select(Subscription.uuid).where(Subscription.feed_uuid == Feed.uuid).exists()
        )
        stmt = (
            select(Feed)
            .where(
                or_(Feed.fetched_at.is_(None), Feed.fetched_at < before),
                has_subscription,
            )
            .order_by(Feed.fetched_at.asc().nulls_first(), Feed.uuid)
            .limit(n)
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def feed_update_fetch_metadata(self, metadata: FeedFetchMetadata) -> None:
        """更新缓存头和同步时间."""
        stmt = (
            update(Feed)
            .where(Feed.uuid == metadata.uuid)
            .values(
                etag=metadata.etag,
                last_modified=metadata.last_modified,
                updated_at=metadata.updated_at,
                fetched_at=metadata.fetched_at,
            )
            .execution_options(synchronize_session=False)
        )
        async with self.transaction("feed_update_fetch_metadata") as session:
            await session.execute(stmt)

    async def feed_update_metadata(self, metadata: FeedMetadata) -> None:
        """更新标题、描述、内容哈希和检索向量."""
        async with self.transaction("feed_update_metadata") as session:
            stmt = (
                update(Feed)
                .where(Feed.uuid == metadata.uuid)
                .values(
                    title=metadata.title,
                    description=metadata.description,
                    hash=metadata.hash,
                    fulltextsearch_tsv=search_vector(
                        dialect_name(session), metadata.title, metadata.description
                    ),
                    updated_at=metadata.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            await session.execute(stmt)

    async def entry_upsert_many(self, entries: Sequence[Entry]) -> int:
        """批量新增或更新条目，返回影响的行数."""
        count = 0
        async with self.transaction("entry_upsert_many") as session:
            dialect = dialect_name(session)
            for batch in batched(entries):
                stmt = upsert(session, Entry).values(
                    [entry_values(dialect, entry) for entry in batch]
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["feed_uuid", "url"],
                    set_={
                        "title": stmt.excluded.title,
                        "summary": stmt.excluded.summary,
                        "textrank_terms": stmt.excluded.textrank_terms,
                        "fulltextsearch_tsv": stmt.excluded.fulltextsearch_tsv,
                        "updated_at": stmt.excluded.updated_at,
                    },
                )
                result = await session.execute(stmt)
                count += result.rowcount
        return count
