"""分类 API."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from feedshelf.api.deps import get_feed_service, get_querying_service, get_user_uuid
from feedshelf.core.feeds import FeedService
from feedshelf.core.querying import QueryingService
from feedshelf.models import Category

router = APIRouter(prefix="/api/categories", tags=["categories"])


class CategoryRequest(BaseModel):
    """新增或重命名分类."""

    name: str


def category_to_dict(category: Category) -> dict:
    return {
        "uuid": category.uuid,
        "name": category.name,
        "slug": category.slug,
        "created_at": category.created_at.isoformat(),
        "updated_at": category.updated_at.isoformat(),
    }


@router.get("")
async def list_categories(
    user_uuid: UUID = Depends(get_user_uuid),
    querying: QueryingService = Depends(get_querying_service),
) -> dict:
    """获取分类及其订阅."""
    categories = await querying.subscriptions_by_category(user_uuid)

    return {
        "total": len(categories),
        "items": [
            {
                "uuid": category.uuid,
                "name": category.name,
                "slug": category.slug,
                "subscriptions": [
                    {
                        "uuid": subscription.uuid,
                        "feed_uuid": subscription.feed_uuid,
                        "feed_url": subscription.feed_url,
                        "title": subscription.display_title,
                        "alias": subscription.alias,
                    }
                    for subscription in category.subscriptions
                ],
            }
            for category in categories
        ],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryRequest,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """新增分类."""
    category = await feed_service.create_category(user_uuid, request.name)
    return category_to_dict(category)


@router.get("/by-slug/{slug}")
async def get_category_by_slug(
    slug: str,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """按 slug 获取分类."""
    category = await feed_service.category_by_slug(user_uuid, slug)
    return category_to_dict(category)


@router.get("/{category_uuid}")
async def get_category(
    category_uuid: UUID,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """获取分类."""
    category = await feed_service.category_by_uuid(user_uuid, category_uuid)
    return category_to_dict(category)


@router.patch("/{category_uuid}")
async def rename_category(
    category_uuid: UUID,
    request: CategoryRequest,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """重命名分类."""
    category = await feed_service.update_category(user_uuid, category_uuid, request.name)
    return category_to_dict(category)


@router.delete("/{category_uuid}")
async def delete_category(
    category_uuid: UUID,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """删除分类及其订阅."""
    await feed_service.delete_category(user_uuid, category_uuid)
    return {"uuid": category_uuid, "deleted": True}


@router.post("/{category_uuid}/read")
async def mark_category_as_read(
    category_uuid: UUID,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """将分类下的条目全部标记为已读."""
    count = await feed_service.mark_all_entries_as_read_by_category(user_uuid, category_uuid)
    return {"uuid": category_uuid, "marked": count}
