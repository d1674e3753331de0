"""阅读页查询服务."""

from dataclasses import dataclass, field
from uuid import UUID

from feedshelf.core.errors import CategoryNotFoundError, SubscriptionNotFoundError
from feedshelf.core.feeds import parse_entry_visibility
from feedshelf.core.pagination import Page, check_page_number, new_page
from feedshelf.core.repositories import QueryingRepository
from feedshelf.core.schemas import (
    CategorySubscriptions,
    EntryQuery,
    SidebarCategory,
    SubscribedEntry,
    SubscriptionTitle,
)
from feedshelf.models import Preferences

ALL_ENTRIES_HEADER = "All"


@dataclass
class FeedPage:
    """阅读页."""

    page: Page
    header: str
    description: str = ""
    unread: int = 0
    show_entry_summaries: bool = True
    categories: list[SidebarCategory] = field(default_factory=list)
    entries: list[SubscribedEntry] = field(default_factory=list)


class QueryingService:
    """按分类、订阅、检索词分页生成阅读页."""

    def __init__(self, repository: QueryingRepository, entries_per_page: int = 20) -> None:
        self.repository = repository
        self.entries_per_page = entries_per_page

    async def _feed_page(
        self,
        query: EntryQuery,
        preferences: Preferences,
        page_number: int,
        header: str,
        description: str = "",
    ) -> FeedPage:
        check_page_number(page_number)
        visibility = parse_entry_visibility(preferences.show_entries)

        count = await self.repository.entry_count(query, visibility)
        page = new_page(page_number, count, self.entries_per_page, query.search_terms)

        categories = await self.repository.sidebar_categories_get(query.user_uuid)
        entries = await self.repository.entry_get_n(
            query,
            visibility,
            limit=self.entries_per_page,
            offset=(page_number - 1) * self.entries_per_page,
        )

        return FeedPage(
            page=page,
            header=header,
            description=description,
            unread=sum(category.unread for category in categories),
            show_entry_summaries=preferences.show_entry_summaries,
            categories=categories,
            entries=entries,
        )

    async def _category(self, user_uuid: UUID, category_uuid: UUID) -> str:
        category = await self.repository.category_get_by_uuid(user_uuid, category_uuid)
        if category is None:
            raise CategoryNotFoundError
        return category.name

    async def subscription_by_uuid(self, user_uuid: UUID, subscription_uuid: UUID) -> SubscriptionTitle:
        """获取订阅及其 Feed 标题."""
        subscription = await self.repository.subscription_title_get_by_uuid(
            user_uuid, subscription_uuid
        )
        if subscription is None:
            raise SubscriptionNotFoundError
        return subscription

    async def subscriptions_by_category(self, user_uuid: UUID) -> list[CategorySubscriptions]:
        """订阅列表，按分类分组."""
        return await self.repository.subscriptions_by_category(user_uuid)

    async def feeds_by_page(
        self, user_uuid: UUID, preferences: Preferences, page_number: int
    ) -> FeedPage:
        """所有订阅的条目."""
        return await self._feed_page(
            EntryQuery(user_uuid=user_uuid), preferences, page_number, ALL_ENTRIES_HEADER
        )

    async def feeds_by_category_and_page(
        self,
        user_uuid: UUID,
        preferences: Preferences,
        category_uuid: UUID,
        page_number: int,
    ) -> FeedPage:
        """分类下的条目."""
        check_page_number(page_number)
        header = await self._category(user_uuid, category_uuid)
        return await self._feed_page(
            EntryQuery(user_uuid=user_uuid, category_uuid=category_uuid),
            preferences,
            page_number,
            header,
        )

    async def feeds_by_subscription_and_page(
        self,
        user_uuid: UUID,
        preferences: Preferences,
        subscription_uuid: UUID,
        page_number: int,
    ) -> FeedPage:
        """单个订阅的条目."""
        check_page_number(page_number)
        subscription = await self.subscription_by_uuid(user_uuid, subscription_uuid)
        return await self._feed_page(
            EntryQuery(user_uuid=user_uuid, subscription_uuid=subscription_uuid),
            preferences,
            page_number,
            subscription.display_title,
            subscription.feed_description,
        )

    async def feeds_by_query_and_page(
        self,
        user_uuid: UUID,
        preferences: Preferences,
        search_terms: str,
        page_number: int,
    ) -> FeedPage:
        """全文检索所有订阅的条目."""
        return await self._feed_page(
            EntryQuery(user_uuid=user_uuid, search_terms=search_terms.strip()),
            preferences,
            page_number,
            ALL_ENTRIES_HEADER,
        )

    async def feeds_by_category_and_query_and_page(
        self,
        user_uuid: UUID,
        preferences: Preferences,
        category_uuid: UUID,
        search_terms: str,
        page_number: int,
    ) -> FeedPage:
        """全文检索分类下的条目."""
        check_page_number(page_number)
        header = await self._category(user_uuid, category_uuid)
        return await self._feed_page(
            EntryQuery(
                user_uuid=user_uuid,
                category_uuid=category_uuid,
                search_terms=search_terms.strip(),
            ),
            preferences,
            page_number,
            header,
        )

    async def feeds_by_subscription_and_query_and_page(
        self,
        user_uuid: UUID,
        preferences: Preferences,
        subscription_uuid: UUID,
        search_terms: str,
        page_number: int,
    ) -> FeedPage:
        """全文检索单个订阅的条目."""
        check_page_number(page_number)
        subscription = await self.subscription_by_uuid(user_uuid, subscription_uuid)
        return await self._feed_page(
            EntryQuery(
                user_uuid=user_uuid,
                subscription_uuid=subscription_uuid,
                search_terms=search_terms.strip(),
            ),
            preferences,
            page_number,
            subscription.display_title,
            subscription.feed_description,
        )
