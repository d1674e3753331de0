"""OPML 导入导出 API."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from feedshelf.api.deps import get_exporting_service, get_importing_service, get_user_uuid
from feedshelf.core.exporting import ExportingService
from feedshelf.core.importing import ImportingService
from feedshelf.utils.opml import OPMLError, parse_opml, render_opml

router = APIRouter(prefix="/api/opml", tags=["opml"])


@router.post("/import")
async def import_opml(
    file: UploadFile = File(..., description="OPML 文件"),
    user_uuid: UUID = Depends(get_user_uuid),
    importing: ImportingService = Depends(get_importing_service),
) -> dict:
    """导入 OPML，失败的订阅源单独列出."""
    content = await file.read()
    try:
        document = parse_opml(content)
    except OPMLError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    status = await importing.import_from_opml_document(user_uuid, document)

    return {
        "summary": status.user_summary(),
        "categories": {"total": status.categories.total, "created": status.categories.created},
        "feeds": {"total": status.feeds.total, "created": status.feeds.created},
        "subscriptions": {
            "total": status.subscriptions.total,
            "created": status.subscriptions.created,
        },
        "failures": [
            {"feed_url": failure.feed_url, "error": failure.error} for failure in status.failures
        ],
    }


@router.get("/export")
async def export_opml(
    title: str = Query("feedshelf subscriptions", description="文档标题"),
    user_uuid: UUID = Depends(get_user_uuid),
    exporting: ExportingService = Depends(get_exporting_service),
) -> Response:
    """导出 OPML."""
    document = await exporting.export_as_opml_document(user_uuid, title)

    return Response(
        content=render_opml(document),
        media_type="text/x-opml+xml",
        headers={"Content-Disposition": 'attachment; filename="subscriptions.opml"'},
    )
