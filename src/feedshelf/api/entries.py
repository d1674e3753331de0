"""条目阅读状态 API."""

from uuid import UUID

from fastapi import APIRouter, Depends

from feedshelf.api.deps import get_feed_service, get_user_uuid
from feedshelf.core.feeds import FeedService

router = APIRouter(prefix="/api/entries", tags=["entries"])


@router.post("/read")
async def mark_all_as_read(
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """将所有订阅的条目标记为已读."""
    count = await feed_service.mark_all_entries_as_read(user_uuid)
    return {"marked": count}


@router.post("/{entry_uid}/toggle-read")
async def toggle_read(
    entry_uid: str,
    user_uuid: UUID = Depends(get_user_uuid),
    feed_service: FeedService = Depends(get_feed_service),
) -> dict:
    """切换条目的已读状态."""
    metadata = await feed_service.toggle_entry_read(user_uuid, entry_uid)
    return {"uid": metadata.entry_uid, "read": metadata.read}
