"""同步 API."""

from fastapi import APIRouter, HTTPException

from feedshelf.scheduler import get_scheduler

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.post("")
async def trigger_sync() -> dict:
    """立即执行一次同步，已有同步在运行时跳过."""
    scheduler = get_scheduler()
    if scheduler is None:
        raise HTTPException(status_code=503, detail="同步服务未初始化")

    job_id = await scheduler.run_once()

    return {
        "job_id": job_id,
        "skipped": job_id is None,
    }


@router.get("/status")
async def get_sync_status() -> dict:
    """调度器状态."""
    scheduler = get_scheduler()
    if scheduler is None:
        return {"initialized": False, "running": False}

    return {
        "initialized": True,
        "running": scheduler.running,
        "interval_seconds": scheduler.interval.total_seconds(),
    }
