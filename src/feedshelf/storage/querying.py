"""阅读页查询使用的 SQL 仓储."""

from typing import Any
from uuid import UUID

from sqlalchemy import and_, case, false, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from feedshelf.core.errors import PreferencesEntryVisibilityUnknownError
from feedshelf.core.schemas import (
    CategorySubscriptions,
    EntryQuery,
    SidebarCategory,
    SubscribedEntry,
    SubscribedFeed,
    SubscriptionTitle,
)
from feedshelf.models import (
    Category,
    Entry,
    EntryMetadata,
    EntryVisibility,
    Feed,
    Subscription,
)
from feedshelf.storage.base import SQLRepository, dialect_name
from feedshelf.storage.fulltext import search_condition

# 别名非空时优先于 Feed 标题
_DISPLAY_TITLE = func.coalesce(func.nullif(Subscription.alias, ""), Feed.title)

_IS_READ = func.coalesce(EntryMetadata.read, false())


def visibility_condition(visibility: EntryVisibility) -> Any | None:
    """可见性对应的查询条件，计数与列表共用."""
    if visibility == EntryVisibility.ALL:
        return None
    if visibility == EntryVisibility.READ:
        return EntryMetadata.read.is_(True)
    if visibility == EntryVisibility.UNREAD:
        return _IS_READ.is_(False)
    raise PreferencesEntryVisibilityUnknownError


def _scope(stmt: Any, dialect: str, query: EntryQuery, visibility: EntryVisibility) -> Any:
    """用户订阅范围内的条目，按分类、订阅、检索词和可见性过滤."""
    stmt = (
        stmt.join(Feed, Feed.uuid == Entry.feed_uuid)
        .join(
            Subscription,
            and_(
                Subscription.feed_uuid == Entry.feed_uuid,
                Subscription.user_uuid == query.user_uuid,
            ),
        )
        .outerjoin(
            EntryMetadata,
            and_(
                EntryMetadata.entry_uid == Entry.uid,
                EntryMetadata.user_uuid == query.user_uuid,
            ),
        )
    )

    if query.category_uuid is not None:
        stmt = stmt.where(Subscription.category_uuid == query.category_uuid)
    if query.subscription_uuid is not None:
        stmt = stmt.where(Subscription.uuid == query.subscription_uuid)
    if query.search_terms:
        stmt = stmt.where(
            search_condition(
                dialect,
                Feed.fulltextsearch_tsv,
                Entry.fulltextsearch_tsv,
                query.search_terms,
            )
        )

    condition = visibility_condition(visibility)
    if condition is not None:
        stmt = stmt.where(condition)
    return stmt


async def subscriptions_by_category(
    session: AsyncSession, user_uuid: UUID
) -> list[CategorySubscriptions]:
    """用户的分类（按名称排序）及各分类下的订阅（按显示名称排序）."""
    result = await session.execute(
        select(Category).where(Category.user_uuid == user_uuid).order_by(Category.name)
    )
    categories = {
        category.uuid: CategorySubscriptions(
            uuid=category.uuid, name=category.name, slug=category.slug
        )
        for category in result.scalars().all()
    }
    if not categories:
        return []

    result = await session.execute(
        select(
            Subscription.uuid,
            Subscription.category_uuid,
            Subscription.alias,
            Feed.uuid,
            Feed.feed_url,
            Feed.title,
            Feed.description,
        )
        .join(Feed, Feed.uuid == Subscription.feed_uuid)
        .where(Subscription.user_uuid == user_uuid)
        .order_by(_DISPLAY_TITLE, Subscription.uuid)
    )
    for row in result.all():
        categories[row[1]].subscriptions.append(
            SubscriptionTitle(
                uuid=row[0],
                category_uuid=row[1],
                alias=row[2],
                feed_uuid=row[3],
                feed_url=row[4],
                feed_title=row[5],
                feed_description=row[6],
            )
        )

    return list(categories.values())


class SQLQueryingRepository(SQLRepository):
    """阅读页、侧边栏与订阅列表查询."""

    async def category_get_by_uuid(self, user_uuid: UUID, category_uuid: UUID) -> Category | None:
        """按 UUID 获取分类."""
        stmt = select(Category).where(
            Category.user_uuid == user_uuid,
            Category.uuid == category_uuid,
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def subscription_title_get_by_uuid(
        self, user_uuid: UUID, subscription_uuid: UUID
    ) -> SubscriptionTitle | None:
        """获取订阅及其 Feed 标题和描述."""
        stmt = (
            select(Subscription, Feed)
            .join(Feed, Feed.uuid == Subscription.feed_uuid)
            .where(
                Subscription.user_uuid == user_uuid,
                Subscription.uuid == subscription_uuid,
            )
        )
        async with self.session() as session:
            result = await session.execute(stmt)
            row = result.first()

        if row is None:
            return None

        subscription, feed = row
        return SubscriptionTitle(
            uuid=subscription.uuid,
            category_uuid=subscription.category_uuid,
            alias=subscription.alias,
            feed_uuid=feed.uuid,
            feed_url=feed.feed_url,
            feed_title=feed.title,
            feed_description=feed.description,
        )

    async def subscriptions_by_category(self, user_uuid: UUID) -> list[CategorySubscriptions]:
        """订阅列表，按分类分组."""
        async with self.session() as session:
            return await subscriptions_by_category(session, user_uuid)

    async def sidebar_categories_get(self, user_uuid: UUID) -> list[SidebarCategory]:
        """
        侧边栏：分类及其订阅源的未读数.

        先查询分类，再一次性查询这些分类下的订阅源。
        未读数不受可见性偏好影响。
        """
        async with self.session() as session:
            result = await session.execute(
                select(Category)
                .where(Category.user_uuid == user_uuid)
                .order_by(Category.name)
            )
            categories = {
                category.uuid: SidebarCategory(
                    uuid=category.uuid, name=category.name, slug=category.slug
                )
                for category in result.scalars().all()
            }
            if not categories:
                return []

            unread = func.coalesce(
                func.sum(
                    case(
                        (and_(Entry.uid.is_not(None), _IS_READ.is_(False)), 1),
                        else_=0,
                    )
                ),
                0,
            )
            stmt = (
                select(
                    Subscription.uuid,
                    Subscription.category_uuid,
                    Subscription.alias,
                    Feed.uuid,
                    Feed.feed_url,
                    Feed.title,
                    Feed.slug,
                    Feed.description,
                    unread.label("unread"),
                )
                .join(Feed, Feed.uuid == Subscription.feed_uuid)
                .outerjoin(Entry, Entry.feed_uuid == Feed.uuid)
                .outerjoin(
                    EntryMetadata,
                    and_(
                        EntryMetadata.entry_uid == Entry.uid,
                        EntryMetadata.user_uuid == Subscription.user_uuid,
                    ),
                )
                .where(
                    Subscription.user_uuid == user_uuid,
                    Subscription.category_uuid.in_(list(categories)),
                )
                .group_by(
                    Subscription.uuid,
                    Subscription.category_uuid,
                    Subscription.alias,
                    Feed.uuid,
                    Feed.feed_url,
                    Feed.title,
                    Feed.slug,
                    Feed.description,
                )
                .order_by(_DISPLAY_TITLE, Subscription.uuid)
            )
            result = await session.execute(stmt)
            rows = result.all()

        for row in rows:
            category = categories[row[1]]
            category.feeds.append(
                SubscribedFeed(
                    subscription_uuid=row[0],
                    alias=row[2],
                    uuid=row[3],
                    feed_url=row[4],
                    title=row[5],
                    slug=row[6],
                    description=row[7],
                    unread=int(row[8]),
                )
            )
            category.unread += int(row[8])

        return list(categories.values())

    async def entry_count(self, query: EntryQuery, visibility: EntryVisibility) -> int:
        """符合条件的条目数."""
        async with self.session() as session:
            stmt = _scope(
                select(func.count(Entry.uid)).select_from(Entry),
                dialect_name(session),
                query,
                visibility,
            )
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def entry_get_n(
        self,
        query: EntryQuery,
        visibility: EntryVisibility,
        limit: int,
        offset: int,
    ) -> list[SubscribedEntry]:
        """按发布时间倒序分页获取条目."""
        async with self.session() as session:
            stmt = _scope(
                select(
                    Entry.uid,
                    Entry.url,
                    Entry.title,
                    Entry.summary,
                    Entry.published_at,
                    Entry.updated_at,
                    Entry.feed_uuid,
                    Feed.title,
                    Feed.slug,
                    Subscription.alias,
                    _IS_READ,
                ).select_from(Entry),
                dialect_name(session),
                query,
                visibility,
            )
            stmt = (
                stmt.order_by(Entry.published_at.desc(), Entry.uid.asc())
                .limit(limit)
                .offset(offset)
            )
            result = await session.execute(stmt)
            rows = result.all()

        return [
            SubscribedEntry(
                uid=row[0],
                url=row[1],
                title=row[2],
                summary=row[3],
                published_at=row[4],
                updated_at=row[5],
                feed_uuid=row[6],
                feed_title=row[7],
                feed_slug=row[8],
                subscription_alias=row[9],
                read=bool(row[10]),
            )
            for row in rows
        ]
