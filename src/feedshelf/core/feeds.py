"""Feed 服务：分类、订阅、阅读状态与偏好."""

import logging
from uuid import UUID

from feedshelf.core.entries import EntryBuilder
from feedshelf.core.errors import (
    CategoryAlreadyRegisteredError,
    CategoryNameRequiredError,
    CategoryNotFoundError,
    CategorySlugRequiredError,
    EntryNotFoundError,
    FeedNotFoundError,
    FeedParseError,
    FeedSlugRequiredError,
    FeedTitleRequiredError,
    FeedURLInvalidError,
    FeedURLNoHostError,
    FeedURLNoSchemeError,
    FeedURLRequiredError,
    FeedURLUnsupportedSchemeError,
    PreferencesEntryVisibilityUnknownError,
    SubscriptionAlreadyRegisteredError,
    SubscriptionNotFoundError,
)
from feedshelf.core.repositories import FeedRepository
from feedshelf.fetcher.client import FeedClient
from feedshelf.models import (
    Category,
    EntryMetadata,
    EntryVisibility,
    Feed,
    Preferences,
    Subscription,
)
from feedshelf.utils.dates import utcnow
from feedshelf.utils.ids import new_uuid
from feedshelf.utils.slugs import make_slug
from feedshelf.utils.urls import check_feed_url

logger = logging.getLogger(__name__)

_URL_ERRORS = {
    "empty": FeedURLRequiredError,
    "invalid": FeedURLInvalidError,
    "no-scheme": FeedURLNoSchemeError,
    "unsupported-scheme": FeedURLUnsupportedSchemeError,
    "no-host": FeedURLNoHostError,
}


def validate_feed_url(feed_url: str) -> None:
    """校验订阅地址：非空、可解析、http(s) 协议且包含主机名."""
    reason = check_feed_url(feed_url)
    if reason is not None:
        raise _URL_ERRORS[reason]


def validate_feed(feed: Feed) -> None:
    """校验待创建的 Feed."""
    validate_feed_url(feed.feed_url)
    if not feed.title:
        raise FeedTitleRequiredError
    if not feed.slug:
        raise FeedSlugRequiredError


def parse_entry_visibility(value: str | EntryVisibility) -> EntryVisibility:
    """解析可见性取值."""
    try:
        return EntryVisibility(value)
    except ValueError as e:
        raise PreferencesEntryVisibilityUnknownError from e


def _normalize_category_name(name: str) -> tuple[str, str]:
    name = name.strip()
    if not name:
        raise CategoryNameRequiredError

    slug = make_slug(name.lower())
    if not slug:
        raise CategorySlugRequiredError
    return name, slug


class FeedService:
    """订阅管理服务."""

    def __init__(
        self,
        repository: FeedRepository,
        client: FeedClient,
        entry_builder: EntryBuilder | None = None,
    ) -> None:
        self.repository = repository
        self.client = client
        self.entry_builder = entry_builder or EntryBuilder()

    # Category

    async def create_category(self, user_uuid: UUID, name: str) -> Category:
        """
        新增分类.

        Raises:
            CategoryNameRequiredError: 名称为空
            CategorySlugRequiredError: 名称转写后 slug 为空
            CategoryAlreadyRegisteredError: 同名或同 slug 的分类已存在
        """
        name, slug = _normalize_category_name(name)

        if await self.repository.category_is_registered(user_uuid, name, slug):
            raise CategoryAlreadyRegisteredError

        now = utcnow()
        category = Category(
            uuid=new_uuid(),
            user_uuid=user_uuid,
            name=name,
            slug=slug,
            created_at=now,
            updated_at=now,
        )
        return await self.repository.category_create(category)

    async def update_category(self, user_uuid: UUID, category_uuid: UUID, name: str) -> Category:
        """重命名分类."""
        category = await self.category_by_uuid(user_uuid, category_uuid)
        name, slug = _normalize_category_name(name)

        if await self.repository.category_is_registered(
            user_uuid, name, slug, exclude_uuid=category.uuid
        ):
            raise CategoryAlreadyRegisteredError

        category.name = name
        category.slug = slug
        category.updated_at = utcnow()
        await self.repository.category_update(category)
        return category

    async def delete_category(self, user_uuid: UUID, category_uuid: UUID) -> None:
        """删除分类及其订阅，不再被订阅的 Feed 一并删除."""
        await self.category_by_uuid(user_uuid, category_uuid)
        await self.repository.category_delete(user_uuid, category_uuid)
        logger.info(f"已删除分类: user={user_uuid}, category={category_uuid}")

    async def category_by_slug(self, user_uuid: UUID, slug: str) -> Category:
        """按 slug 获取分类."""
        category = await self.repository.category_get_by_slug(user_uuid, slug)
        if category is None:
            raise CategoryNotFoundError
        return category

    async def category_by_uuid(self, user_uuid: UUID, category_uuid: UUID) -> Category:
        """按 UUID 获取分类."""
        category = await self.repository.category_get_by_uuid(user_uuid, category_uuid)
        if category is None:
            raise CategoryNotFoundError
        return category

    async def get_or_create_category(self, user_uuid: UUID, name: str) -> tuple[Category, bool]:
        """获取同名分类，不存在时创建."""
        normalized, _ = _normalize_category_name(name)

        category = await self.repository.category_get_by_name(user_uuid, normalized)
        if category is not None:
            return category, False

        return await self.create_category(user_uuid, normalized), True

    # Feed

    async def _unique_feed_slug(self, feed: Feed) -> str:
        slug = make_slug(feed.title)
        if not slug:
            raise FeedSlugRequiredError

        if await self.repository.feed_slug_exists(slug):
            # 不同 Feed 标题相同
            slug = f"{slug}-{str(feed.uuid)[:8]}"
        return slug

    async def get_or_create_feed_and_entries(self, feed_url: str) -> tuple[Feed, bool]:
        """
        获取已存在的 Feed，不存在时抓取、创建并写入其条目.

        Args:
            feed_url: 订阅地址

        Returns:
            (Feed, 是否新建)
        """
        feed_url = feed_url.strip()
        validate_feed_url(feed_url)

        existing = await self.repository.feed_get_by_url(feed_url)
        if existing is not None:
            return existing, False

        result = await self.client.fetch(feed_url)
        if result.feed is None:
            msg = f"fetching: empty response for {feed_url}"
            raise FeedParseError(msg)

        now = utcnow()
        feed = Feed(
            uuid=new_uuid(),
            feed_url=feed_url,
            title=result.feed.title.strip(),
            description=result.feed.description.strip(),
            etag=result.etag,
            last_modified=result.last_modified,
            hash=result.hash,
            created_at=now,
            updated_at=now,
            fetched_at=now,
        )
        if not feed.title:
            raise FeedTitleRequiredError
        feed.slug = await self._unique_feed_slug(feed)
        validate_feed(feed)

        if not await self.repository.feed_create(feed):
            # 同一 Feed 被并发订阅，使用已写入的记录
            canonical = await self.repository.feed_get_by_url(feed_url)
            if canonical is None:
                raise FeedNotFoundError
            return canonical, False

        entries = self.entry_builder.build_many(feed.uuid, result.feed.items, now)
        count = await self.repository.entry_create_many(entries)
        logger.info(f"已创建 Feed: url={feed_url}, entries={count}")

        return feed, True

    # Subscription

    async def subscribe(self, user_uuid: UUID, category_uuid: UUID, feed_url: str) -> Subscription:
        """
        订阅 Feed.

        Raises:
            CategoryNotFoundError: 分类不存在
            SubscriptionAlreadyRegisteredError: 用户已订阅该 Feed
        """
        await self.category_by_uuid(user_uuid, category_uuid)

        feed, _ = await self.get_or_create_feed_and_entries(feed_url)

        if await self.repository.subscription_get_by_feed(user_uuid, feed.uuid) is not None:
            raise SubscriptionAlreadyRegisteredError

        now = utcnow()
        subscription = Subscription(
            uuid=new_uuid(),
            user_uuid=user_uuid,
            category_uuid=category_uuid,
            feed_uuid=feed.uuid,
            created_at=now,
            updated_at=now,
        )
        await self.repository.subscription_create(subscription)
        logger.info(f"已订阅: user={user_uuid}, feed={feed.feed_url}")
        return subscription

    async def get_or_create_subscription(self, subscription: Subscription) -> tuple[Subscription, bool]:
        """获取用户对该 Feed 的订阅，不存在时创建."""
        existing = await self.repository.subscription_get_by_feed(
            subscription.user_uuid, subscription.feed_uuid
        )
        if existing is not None:
            return existing, False

        now = utcnow()
        subscription.created_at = now
        subscription.updated_at = now
        return await self.repository.subscription_create(subscription), True

    async def subscription_by_uuid(self, user_uuid: UUID, subscription_uuid: UUID) -> Subscription:
        """按 UUID 获取订阅."""
        subscription = await self.repository.subscription_get_by_uuid(user_uuid, subscription_uuid)
        if subscription is None:
            raise SubscriptionNotFoundError
        return subscription

    async def delete_subscription(self, user_uuid: UUID, subscription_uuid: UUID) -> None:
        """取消订阅，Feed 不再被订阅时一并删除."""
        await self.repository.subscription_delete(user_uuid, subscription_uuid)
        logger.info(f"已取消订阅: user={user_uuid}, subscription={subscription_uuid}")

    async def update_subscription(
        self,
        user_uuid: UUID,
        subscription_uuid: UUID,
        category_uuid: UUID,
        alias: str = "",
    ) -> Subscription:
        """修改订阅的分类和别名."""
        subscription = await self.subscription_by_uuid(user_uuid, subscription_uuid)
        await self.category_by_uuid(user_uuid, category_uuid)

        subscription.category_uuid = category_uuid
        subscription.alias = alias.strip()
        subscription.updated_at = utcnow()
        await self.repository.subscription_update(subscription)
        return subscription

    # Entry

    async def toggle_entry_read(self, user_uuid: UUID, entry_uid: str) -> EntryMetadata:
        """切换条目的已读状态，首次切换标记为已读."""
        if await self.repository.entry_get_by_uid(entry_uid) is None:
            raise EntryNotFoundError

        metadata = await self.repository.entry_metadata_get(user_uuid, entry_uid)
        if metadata is None:
            metadata = EntryMetadata(user_uuid=user_uuid, entry_uid=entry_uid, read=True)
        else:
            metadata.read = not metadata.read

        await self.repository.entry_metadata_upsert(metadata)
        return metadata

    async def mark_all_entries_as_read(self, user_uuid: UUID) -> int:
        """将用户订阅的所有条目标记为已读."""
        return await self.repository.entry_mark_all_as_read(user_uuid)

    async def mark_all_entries_as_read_by_category(self, user_uuid: UUID, category_uuid: UUID) -> int:
        """将分类下的所有条目标记为已读."""
        await self.category_by_uuid(user_uuid, category_uuid)
        return await self.repository.entry_mark_all_as_read_by_category(user_uuid, category_uuid)

    async def mark_all_entries_as_read_by_subscription(
        self, user_uuid: UUID, subscription_uuid: UUID
    ) -> int:
        """将订阅下的所有条目标记为已读."""
        await self.subscription_by_uuid(user_uuid, subscription_uuid)
        return await self.repository.entry_mark_all_as_read_by_subscription(
            user_uuid, subscription_uuid
        )

    # Preferences

    async def preferences(self, user_uuid: UUID) -> Preferences:
        """获取用户偏好，未设置时返回默认值（全部条目、显示摘要）."""
        preferences = await self.repository.preferences_get(user_uuid)
        if preferences is None:
            return Preferences(user_uuid=user_uuid)
        return preferences

    async def create_preferences(self, user_uuid: UUID) -> Preferences:
        """为新用户创建默认偏好."""
        return await self.repository.preferences_create(Preferences(user_uuid=user_uuid))

    async def update_preferences(
        self,
        user_uuid: UUID,
        show_entries: str | EntryVisibility,
        show_entry_summaries: bool,
    ) -> Preferences:
        """
        更新用户偏好.

        Raises:
            PreferencesEntryVisibilityUnknownError: 未知的可见性取值
        """
        preferences = Preferences(
            user_uuid=user_uuid,
            show_entries=parse_entry_visibility(show_entries),
            show_entry_summaries=show_entry_summaries,
            updated_at=utcnow(),
        )
        await self.repository.preferences_update(preferences)
        return preferences
