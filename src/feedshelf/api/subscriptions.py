"""订阅 API."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from feedshelf.api.deps import get_feed_service, get_querying_service, get_user_uuid
from feedshelf.core.feeds import FeedService
from feedshelf.core.querying import QueryingService
from feedshelf.models import Subscription

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])


class SubscribeRequest(BaseModel):
    """订阅请求."""

    category_uuid: UUID
    feed_url: str


class SubscriptionUpdateRequest(BaseModel):
    """修改订阅."""

    category_uuid: UUID
    alias: str = ""


def subscription_to_dict(subscription: Subscription) -> dict:
    return {
        "uuid": subscription.uuid,
        "category_uuid": subscription.category_uuid,
        "feed_uuid": subscription.feed_uuid,
        "alias": subscription.alias,
        "created_at": subscription.created_at.isoformat(),
        "updated_at": subscription.updated_at.isoformat(),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def subscribe(
    request: SubscribeRequest,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """订阅 Feed，首次订阅时抓取并写入条目."""
    subscription = await feed_service.subscribe(user_uuid, request.category_uuid, request.feed_url)
    return subscription_to_dict(subscription)


@router.get("/{subscription_uuid}")
async def get_subscription(
    subscription_uuid: UUID,
    user_uuid: UUID = Depends(get_user_uuid),
    querying: QueryingService = Depends(get_querying_service),
) -> dict:
    """获取订阅及其 Feed 信息."""
    subscription = await querying.subscription_by_uuid(user_uuid, subscription_uuid)

    return {
        "uuid": subscription.uuid,
        "category_uuid": subscription.category_uuid,
        "feed_uuid": subscription.feed_uuid,
        "feed_url": subscription.feed_url,
        "feed_title": subscription.feed_title,
        "feed_description": subscription.feed_description,
        "alias": subscription.alias,
        "title": subscription.display_title,
    }


@router.patch("/{subscription_uuid}")
async def update_subscription(
    subscription_uuid: UUID,
    request: SubscriptionUpdateRequest,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """修改订阅的分类和别名."""
    subscription = await feed_service.update_subscription(
        user_uuid, subscription_uuid, request.category_uuid, request.alias
    )
    return subscription_to_dict(subscription)


@router.delete("/{subscription_uuid}")
async def delete_subscription(
    subscription_uuid: UUID,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """取消订阅."""
    await feed_service.delete_subscription(user_uuid, subscription_uuid)
    return {"uuid": subscription_uuid, "deleted": True}


@router.post("/{subscription_uuid}/read")
async def mark_subscription_as_read(
    subscription_uuid: UUID,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """将订阅下的条目全部标记为已读."""
    count = await feed_service.mark_all_entries_as_read_by_subscription(
        user_uuid, subscription_uuid
    )
    return {"uuid": subscription_uuid, "marked": count}
