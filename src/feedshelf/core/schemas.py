"""查询与同步使用的数据结构."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class SubscribedEntry:
    """阅读页中的条目，附带所属 Feed 和阅读状态."""

    uid: str
    url: str
    title: str
    summary: str
    published_at: datetime
    updated_at: datetime
    feed_uuid: UUID
    feed_title: str
    feed_slug: str
    subscription_alias: str = ""
    read: bool = False

    @property
    def feed_display_title(self) -> str:
        """别名优先."""
        return self.subscription_alias or self.feed_title


@dataclass
class SubscribedFeed:
    """侧边栏中的订阅源."""

    uuid: UUID
    feed_url: str
    title: str
    slug: str
    description: str
    subscription_uuid: UUID
    alias: str = ""
    unread: int = 0

    @property
    def display_title(self) -> str:
        """别名优先."""
        return self.alias or self.title


@dataclass
class SidebarCategory:
    """侧边栏中的分类及其未读数."""

    uuid: UUID
    name: str
    slug: str
    unread: int = 0
    feeds: list[SubscribedFeed] = field(default_factory=list)


@dataclass
class SubscriptionTitle:
    """订阅及其 Feed 标题."""

    uuid: UUID
    category_uuid: UUID
    feed_uuid: UUID
    feed_url: str
    feed_title: str
    feed_description: str
    alias: str = ""

    @property
    def display_title(self) -> str:
        """别名优先."""
        return self.alias or self.feed_title


@dataclass
class CategorySubscriptions:
    """分类及其下的订阅."""

    uuid: UUID
    name: str
    slug: str
    subscriptions: list[SubscriptionTitle] = field(default_factory=list)


@dataclass
class EntryQuery:
    """阅读页条目查询条件."""

    user_uuid: UUID
    category_uuid: UUID | None = None
    subscription_uuid: UUID | None = None
    search_terms: str = ""


@dataclass
class FeedFetchMetadata:
    """抓取相关的 Feed 元数据."""

    uuid: UUID
    etag: str
    last_modified: datetime | None
    updated_at: datetime
    fetched_at: datetime


@dataclass
class FeedMetadata:
    """内容相关的 Feed 元数据."""

    uuid: UUID
    title: str
    description: str
    hash: int
    updated_at: datetime
