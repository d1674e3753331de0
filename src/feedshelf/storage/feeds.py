"""Feed 服务使用的 SQL 仓储."""

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Uuid, delete, literal, or_, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from feedshelf.core.errors import (
    CategoryNotFoundError,
    PreferencesEntryVisibilityUnknownError,
    SubscriptionNotFoundError,
)
from feedshelf.models import (
    Category,
    Entry,
    EntryMetadata,
    Feed,
    Preferences,
    Subscription,
)
from feedshelf.storage.base import SQLRepository, batched, dialect_name, upsert
from feedshelf.storage.fulltext import search_vector

logger = logging.getLogger(__name__)


def entry_values(dialect: str, entry: Entry) -> dict:
    """条目写入的列值."""
    return {
        "uid": entry.uid,
        "feed_uuid": entry.feed_uuid,
        "url": entry.url,
        "title": entry.title,
        "summary": entry.summary,
        "textrank_terms": list(entry.textrank_terms),
        "fulltextsearch_tsv": search_vector(
            dialect, entry.title, entry.summary, " ".join(entry.textrank_terms)
        ),
        "published_at": entry.published_at,
        "updated_at": entry.updated_at,
    }


async def delete_orphan_feeds(session: AsyncSession, feed_uuids: Sequence[UUID]) -> int:
    """删除没有任何订阅的 Feed，条目及阅读状态随外键级联删除."""
    if not feed_uuids:
        return 0

    has_subscription = (
        select(Subscription.uuid).where(Subscription.feed_uuid == Feed.uuid).exists()
    )
    result = await session.execute(
        delete(Feed)
        .where(Feed.uuid.in_(feed_uuids), ~has_subscription)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.info(f"已删除无订阅的 Feed: count={result.rowcount}")
    return result.rowcount


class SQLFeedRepository(SQLRepository):
    """分类、订阅、阅读状态与偏好的持久化."""

    # Category

    async def category_create(self, category: Category) -> Category:
        """新增分类."""
        async with self.transaction("category_create") as session:
            session.add(category)
        return category

    async def category_is_registered(
        self,
        user_uuid: UUID,
        name: str,
        slug: str,
        exclude_uuid: UUID | None = None,
    ) -> bool:
        """用户是否已有同名或同 slug 的分类."""
        stmt = select(Category.uuid).where(
            Category.user_uuid == user_uuid,
            or_(Category.name == name, Category.slug == slug),
        )
        if exclude_uuid is not None:
            stmt = stmt.where(Category.uuid != exclude_uuid)

        async with self.session() as session:
            result = await session.execute(stmt.limit(1))
            return result.first() is not None

    async def category_get_by_uuid(self, user_uuid: UUID, category_uuid: UUID) -> Category | None:
        """按 UUID 获取分类."""
        stmt = select(Category).where(
            Category.user_uuid == user_uuid,
            Category.uuid == category_uuid,
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def category_get_by_slug(self, user_uuid: UUID, slug: str) -> Category | None:
        """按 slug 获取分类."""
        stmt = select(Category).where(
            Category.user_uuid == user_uuid,
            Category.slug == slug,
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def category_get_by_name(self, user_uuid: UUID, name: str) -> Category | None:
        """按名称获取分类."""
        stmt = select(Category).where(
            Category.user_uuid == user_uuid,
            Category.name == name,
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def category_update(self, category: Category) -> None:
        """更新分类名称和 slug."""
        stmt = (
            update(Category)
            .where(
                Category.user_uuid == category.user_uuid,
                Category.uuid == category.uuid,
            )
            .values(
                name=category.name,
                slug=category.slug,
                updated_at=category.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        async with self.transaction("category_update") as session:
            result = await session.execute(stmt)
            if result.rowcount != 1:
                raise CategoryNotFoundError

    async def category_delete(self, user_uuid: UUID, category_uuid: UUID) -> None:
        """删除分类及其订阅，并清理无订阅的 Feed."""
        async with self.transaction("category_delete") as session:
            result = await session.execute(
                select(Subscription.feed_uuid).where(
                    Subscription.user_uuid == user_uuid,
                    Subscription.category_uuid == category_uuid,
                )
            )
            feed_uuids = list(result.scalars().all())

            await session.execute(
                delete(Subscription)
                .where(
                    Subscription.user_uuid == user_uuid,
                    Subscription.category_uuid == category_uuid,
                )
                .execution_options(synchronize_session=False)
            )

            result = await session.execute(
                delete(Category)
                .where(
                    Category.user_uuid == user_uuid,
                    Category.uuid == category_uuid,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise CategoryNotFoundError

            await delete_orphan_feeds(session, feed_uuids)

    # Feed

    async def feed_get_by_url(self, feed_url: str) -> Feed | None:
        """按 URL 获取 Feed."""
        async with self.session() as session:
            result = await session.execute(select(Feed).where(Feed.feed_url == feed_url))
            return result.scalar_one_or_none()

    async def feed_slug_exists(self, slug: str) -> bool:
        """slug 是否已被其他 Feed 占用."""
        async with self.session() as session:
            result = await session.execute(select(Feed.uuid).where(Feed.slug == slug).limit(1))
            return result.first() is not None

    async def feed_create(self, feed: Feed) -> bool:
        """
        新增 Feed，URL 已存在时不做任何修改.

        Returns:
            是否实际插入
        """
        async with self.transaction("feed_create") as session:
            stmt = (
                upsert(session, Feed)
                .values(
                    uuid=feed.uuid,
                    feed_url=feed.feed_url,
                    title=feed.title,
                    description=feed.description,
                    slug=feed.slug,
                    etag=feed.etag,
                    last_modified=feed.last_modified,
                    hash=feed.hash,
                    fulltextsearch_tsv=search_vector(
                        dialect_name(session), feed.title, feed.description
                    ),
                    created_at=feed.created_at,
                    updated_at=feed.updated_at,
                    fetched_at=feed.fetched_at,
                )
                .on_conflict_do_nothing(index_elements=["feed_url"])
            )
            result = await session.execute(stmt)
            return result.rowcount == 1

    # Entry

    async def entry_create_many(self, entries: Sequence[Entry]) -> int:
        """批量新增条目，(feed_uuid, url) 已存在的跳过，返回新增数量."""
        count = 0
        async with self.transaction("entry_create_many") as session:
            dialect = dialect_name(session)
            for batch in batched(entries):
                stmt = (
                    upsert(session, Entry)
                    .values([entry_values(dialect, entry) for entry in batch])
                    .on_conflict_do_nothing(index_elements=["feed_uuid", "url"])
                )
                result = await session.execute(stmt)
                count += result.rowcount
        return count

    async def entry_get_by_uid(self, entry_uid: str) -> Entry | None:
        """按 UID 获取条目."""
        async with self.session() as session:
            return await session.get(Entry, entry_uid)

    async def entry_metadata_get(self, user_uuid: UUID, entry_uid: str) -> EntryMetadata | None:
        """获取用户对条目的阅读状态."""
        async with self.session() as session:
            return await session.get(EntryMetadata, (user_uuid, entry_uid))

    async def entry_metadata_upsert(self, metadata: EntryMetadata) -> None:
        """写入阅读状态."""
        async with self.transaction("entry_metadata_upsert") as session:
            stmt = upsert(session, EntryMetadata).values(
                user_uuid=metadata.user_uuid,
                entry_uid=metadata.entry_uid,
                read=metadata.read,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_uuid", "entry_uid"],
                set_={"read": stmt.excluded.read},
            )
            await session.execute(stmt)

    async def _entry_mark_many_as_read(self, user_uuid: UUID, *conditions: object) -> int:
        """将用户订阅可达的条目批量标记为已读."""
        reachable = (
            select(
                literal(user_uuid, Uuid).label("user_uuid"),
                Entry.uid,
                true().label("read"),
            )
            .join(Subscription, Subscription.feed_uuid == Entry.feed_uuid)
            .where(Subscription.user_uuid == user_uuid, *conditions)
        )

        async with self.transaction("entry_mark_many_as_read") as session:
            stmt = upsert(session, EntryMetadata).from_select(
                ["user_uuid", "entry_uid", "read"], reachable
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_uuid", "entry_uid"],
                set_={"read": True},
            )
            result = await session.execute(stmt)
            return result.rowcount

    async def entry_mark_all_as_read(self, user_uuid: UUID) -> int:
        """标记用户所有订阅的条目为已读."""
        return await self._entry_mark_many_as_read(user_uuid)

    async def entry_mark_all_as_read_by_category(self, user_uuid: UUID, category_uuid: UUID) -> int:
        """标记分类下所有条目为已读."""
        return await self._entry_mark_many_as_read(
            user_uuid, Subscription.category_uuid == category_uuid
        )

    async def entry_mark_all_as_read_by_subscription(
        self, user_uuid: UUID, subscription_uuid: UUID
    ) -> int:
        """标记订阅下所有条目为已读."""
        return await self._entry_mark_many_as_read(
            user_uuid, Subscription.uuid == subscription_uuid
        )

    # Subscription

    async def subscription_create(self, subscription: Subscription) -> Subscription:
        """新增订阅."""
        async with self.transaction("subscription_create") as session:
            session.add(subscription)
        return subscription

    async def subscription_get_by_uuid(
        self, user_uuid: UUID, subscription_uuid: UUID
    ) -> Subscription | None:
        """按 UUID 获取订阅."""
        stmt = select(Subscription).where(
            Subscription.user_uuid == user_uuid,
            Subscription.uuid == subscription_uuid,
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def subscription_get_by_feed(self, user_uuid: UUID, feed_uuid: UUID) -> Subscription | None:
        """获取用户对某个 Feed 的订阅."""
        stmt = select(Subscription).where(
            Subscription.user_uuid == user_uuid,
            Subscription.feed_uuid == feed_uuid,
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def subscription_update(self, subscription: Subscription) -> None:
        """更新订阅的分类和别名."""
        stmt = (
            update(Subscription)
            .where(
                Subscription.user_uuid == subscription.user_uuid,
                Subscription.uuid == subscription.uuid,
            )
            .values(
                category_uuid=subscription.category_uuid,
                alias=subscription.alias,
                updated_at=subscription.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        async with self.transaction("subscription_update") as session:
            result = await session.execute(stmt)
            if result.rowcount != 1:
                raise SubscriptionNotFoundError

    async def subscription_delete(self, user_uuid: UUID, subscription_uuid: UUID) -> None:
        """删除订阅，Feed 不再有订阅时一并删除."""
        async with self.transaction("subscription_delete") as session:
            result = await session.execute(
                select(Subscription.feed_uuid).where(
                    Subscription.user_uuid == user_uuid,
                    Subscription.uuid == subscription_uuid,
                )
            )
            feed_uuid = result.scalar_one_or_none()
            if feed_uuid is None:
                raise SubscriptionNotFoundError

            result = await session.execute(
                delete(Subscription)
                .where(
                    Subscription.user_uuid == user_uuid,
                    Subscription.uuid == subscription_uuid,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise SubscriptionNotFoundError

            await delete_orphan_feeds(session, [feed_uuid])

    # Preferences

    async def preferences_get(self, user_uuid: UUID) -> Preferences | None:
        """获取用户偏好."""
        async with self.session() as session:
            try:
                return await session.get(Preferences, user_uuid)
            except LookupError as e:
                # 存储中的可见性取值无法映射到枚举
                raise PreferencesEntryVisibilityUnknownError from e

    async def preferences_create(self, preferences: Preferences) -> Preferences:
        """新增用户偏好."""
        async with self.transaction("preferences_create") as session:
            session.add(preferences)
        return preferences

    async def preferences_update(self, preferences: Preferences) -> None:
        """写入用户偏好（不存在时创建）."""
        async with self.transaction("preferences_update") as session:
            stmt = upsert(session, Preferences).values(
                user_uuid=preferences.user_uuid,
                show_entries=preferences.show_entries,
                show_entry_summaries=preferences.show_entry_summaries,
                updated_at=preferences.updated_at,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_uuid"],
                set_={
                    "show_entries": stmt.excluded.show_entries,
                    "show_entry_summaries": stmt.excluded.show_entry_summaries,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            await session.execute(stmt)
