"""业务错误到 HTTP 响应的映射."""

import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from feedshelf.core.errors import (
    ConflictError,
    FeedShelfError,
    NotFoundError,
    RemoteError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: list[tuple[type[FeedShelfError], int, str]] = [
    (ValidationError, 422, "validation"),
    (NotFoundError, 404, "not-found"),
    (ConflictError, 409, "conflict"),
    (RemoteError, 502, "remote"),
]


def flash_message(category: str, message: str) -> dict:
    """提示消息."""
    return {"level": "error", "category": category, "message": message}


def error_response(error: FeedShelfError) -> tuple[int, dict]:
    """错误对应的状态码和提示消息."""
    for error_type, status_code, category in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code, flash_message(category, str(error))
    return 500, flash_message("internal", str(error))


async def feedshelf_error_handler(request: Request, exc: FeedShelfError) -> JSONResponse:
    """将业务错误转换为提示消息."""
    status_code, body = error_response(exc)
    if status_code >= 500:
        logger.error(f"请求失败: {request.method} {request.url.path}, error={exc!r}")
    return JSONResponse(status_code=status_code, content=body)


async def http_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    """订阅源网络错误."""
    logger.error(f"订阅源请求失败: {request.method} {request.url.path}, error={exc!r}")
    return JSONResponse(
        status_code=502,
        content=flash_message("remote", f"feed: fetch failed ({type(exc).__name__})"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """注册异常处理器."""
    app.add_exception_handler(FeedShelfError, feedshelf_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(httpx.HTTPError, http_error_handler)  # type: ignore[arg-type]
