"""显示偏好 API."""

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from feedshelf.api.deps import get_feed_service, get_user_uuid
from feedshelf.core.feeds import FeedService
from feedshelf.models import Preferences

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


class PreferencesRequest(BaseModel):
    """更新偏好."""

    show_entries: str
    show_entry_summaries: bool = True


def preferences_to_dict(preferences: Preferences) -> dict:
    return {
        "show_entries": preferences.show_entries.value,
        "show_entry_summaries": preferences.show_entry_summaries,
    }


@router.get("")
async def get_preferences(
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """获取偏好，未设置时为默认值."""
    return preferences_to_dict(await feed_service.preferences(user_uuid))


@router.put("")
async def update_preferences(
    request: PreferencesRequest,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """更新偏好."""
    preferences = await feed_service.update_preferences(
        user_uuid, request.show_entries, request.show_entry_summaries
    )
    return preferences_to_dict(preferences)
