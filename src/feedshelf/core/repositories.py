"""各服务依赖的仓储接口."""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from feedshelf.core.schemas import (
    CategorySubscriptions,
    EntryQuery,
    FeedFetchMetadata,
    FeedMetadata,
    SidebarCategory,
    SubscribedEntry,
    SubscriptionTitle,
)
from feedshelf.models import (
    Category,
    Entry,
    EntryMetadata,
    EntryVisibility,
    Feed,
    Preferences,
    Subscription,
)


class FeedRepository(Protocol):
    """Feed 服务的持久化接口."""

    async def category_create(self, category: Category) -> Category: ...

    async def category_is_registered(
        self,
        user_uuid: UUID,
        name: str,
        slug: str,
        exclude_uuid: UUID | None = None,
    ) -> bool: ...

    async def category_get_by_uuid(self, user_uuid: UUID, category_uuid: UUID) -> Category | None: ...

    async def category_get_by_slug(self, user_uuid: UUID, slug: str) -> Category | None: ...

    async def category_get_by_name(self, user_uuid: UUID, name: str) -> Category | None: ...

    async def category_update(self, category: Category) -> None: ...

    async def category_delete(self, user_uuid: UUID, category_uuid: UUID) -> None: ...

    async def feed_get_by_url(self, feed_url: str) -> Feed | None: ...

    async def feed_slug_exists(self, slug: str) -> bool: ...

    async def feed_create(self, feed: Feed) -> bool: ...

    async def entry_create_many(self, entries: Sequence[Entry]) -> int: ...

    async def entry_get_by_uid(self, entry_uid: str) -> Entry | None: ...

    async def entry_metadata_get(self, user_uuid: UUID, entry_uid: str) -> EntryMetadata | None: ...

    async def entry_metadata_upsert(self, metadata: EntryMetadata) -> None: ...

    async def entry_mark_all_as_read(self, user_uuid: UUID) -> int: ...

    async def entry_mark_all_as_read_by_category(self, user_uuid: UUID, category_uuid: UUID) -> int: ...

    async def entry_mark_all_as_read_by_subscription(
        self, user_uuid: UUID, subscription_uuid: UUID
    ) -> int: ...

    async def subscription_create(self, subscription: Subscription) -> Subscription: ...

    async def subscription_get_by_uuid(
        self, user_uuid: UUID, subscription_uuid: UUID
    ) -> Subscription | None: ...

    async def subscription_get_by_feed(self, user_uuid: UUID, feed_uuid: UUID) -> Subscription | None: ...

    async def subscription_update(self, subscription: Subscription) -> None: ...

    async def subscription_delete(self, user_uuid: UUID, subscription_uuid: UUID) -> None: ...

    async def preferences_get(self, user_uuid: UUID) -> Preferences | None: ...

    async def preferences_create(self, preferences: Preferences) -> Preferences: ...

    async def preferences_update(self, preferences: Preferences) -> None: ...


class QueryingRepository(Protocol):
    """阅读页查询接口."""

    async def category_get_by_uuid(self, user_uuid: UUID, category_uuid: UUID) -> Category | None: ...

    async def subscription_title_get_by_uuid(
        self, user_uuid: UUID, subscription_uuid: UUID
    ) -> SubscriptionTitle | None: ...

    async def subscriptions_by_category(self, user_uuid: UUID) -> list[CategorySubscriptions]: ...

    async def sidebar_categories_get(self, user_uuid: UUID) -> list[SidebarCategory]: ...

    async def entry_count(self, query: EntryQuery, visibility: EntryVisibility) -> int: ...

    async def entry_get_n(
        self,
        query: EntryQuery,
        visibility: EntryVisibility,
        limit: int,
        offset: int,
    ) -> list[SubscribedEntry]: ...


class SynchronizingRepository(Protocol):
    """同步任务的持久化接口."""

    async def feed_get_n_by_last_synchronization_time(
        self, n: int, before: datetime
    ) -> list[Feed]: ...

    async def feed_update_fetch_metadata(self, metadata: FeedFetchMetadata) -> None: ...

    async def feed_update_metadata(self, metadata: FeedMetadata) -> None: ...

    async def entry_upsert_many(self, entries: Sequence[Entry]) -> int: ...


class ExportingRepository(Protocol):
    """OPML 导出接口."""

    async def subscriptions_by_category(self, user_uuid: UUID) -> list[CategorySubscriptions]: ...
