"""阅读页 API."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from feedshelf.api.deps import get_feed_service, get_querying_service, get_user_uuid
from feedshelf.core.feeds import FeedService
from feedshelf.core.querying import FeedPage, QueryingService
from feedshelf.core.schemas import SidebarCategory, SubscribedEntry

router = APIRouter(prefix="/api/feeds", tags=["reading"])


def category_to_dict(category: SidebarCategory) -> dict:
    """侧边栏分类."""
    return {
        "uuid": category.uuid,
        "name": category.name,
        "slug": category.slug,
        "unread": category.unread,
        "feeds": [
            {
                "uuid": feed.uuid,
                "subscription_uuid": feed.subscription_uuid,
                "title": feed.display_title,
                "feed_url": feed.feed_url,
                "slug": feed.slug,
                "unread": feed.unread,
            }
            for feed in category.feeds
        ],
    }


def entry_to_dict(entry: SubscribedEntry, show_summary: bool) -> dict:
    """阅读页条目，按偏好隐藏摘要."""
    return {
        "uid": entry.uid,
        "url": entry.url,
        "title": entry.title,
        "summary": entry.summary if show_summary else "",
        "published_at": entry.published_at.isoformat(),
        "updated_at": entry.updated_at.isoformat(),
        "feed_uuid": entry.feed_uuid,
        "feed_title": entry.feed_display_title,
        "feed_slug": entry.feed_slug,
        "read": entry.read,
    }


def feed_page_to_dict(feed_page: FeedPage) -> dict:
    """阅读页响应."""
    page = feed_page.page
    return {
        "header": feed_page.header,
        "description": feed_page.description,
        "unread": feed_page.unread,
        "show_entry_summaries": feed_page.show_entry_summaries,
        "page": {
            "number": page.number,
            "previous": page.previous,
            "next": page.next,
            "total_pages": page.total_pages,
            "pages_left": page.pages_left,
            "item_count": page.item_count,
            "offset": page.offset,
            "search_terms": page.search_terms,
        },
        "categories": [category_to_dict(c) for c in feed_page.categories],
        "entries": [
            entry_to_dict(e, feed_page.show_entry_summaries) for e in feed_page.entries
        ],
    }


@router.get("")
async def all_entries(
    q: str = Query("", description="检索词"),
    page: int = Query(1, description="页码"),
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
    querying: QueryingService = Depends(get_querying_service),
) -> dict:
    """所有订阅的条目."""
    preferences = await feed_service.preferences(user_uuid)

    if q.strip():
        feed_page = await querying.feeds_by_query_and_page(user_uuid, preferences, q, page)
    else:
        feed_page = await querying.feeds_by_page(user_uuid, preferences, page)

    return feed_page_to_dict(feed_page)


@router.get("/categories/{category_uuid}")
async def category_entries(
    category_uuid: UUID,
    q: str = Query("", description="检索词"),
    page: int = Query(1, description="页码"),
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
    querying: QueryingService = Depends(get_querying_service),
) -> dict:
    """分类下的条目."""
    preferences = await feed_service.preferences(user_uuid)

    if q.strip():
        feed_page = await querying.feeds_by_category_and_query_and_page(
            user_uuid, preferences, category_uuid, q, page
        )
    else:
        feed_page = await querying.feeds_by_category_and_page(
            user_uuid, preferences, category_uuid, page
        )

    return feed_page_to_dict(feed_page)


@router.get("/subscriptions/{subscription_uuid}")
async def subscription_entries(
    subscription_uuid: UUID,
    q: str = Query("", description="检索词"),
    page: int = Query(1, description="页码"),
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
    querying: QueryingService = Depends(get_querying_service),
) -> dict:
    """单个订阅的条目."""
    preferences = await feed_service.preferences(user_uuid)

    if q.strip():
        feed_page = await querying.feeds_by_subscription_and_query_and_page(
            user_uuid, preferences, subscription_uuid, q, page
        )
    else:
        feed_page = await querying.feeds_by_subscription_and_page(
            user_uuid, preferences, subscription_uuid, page
        )

    return feed_page_to_dict(feed_page)
