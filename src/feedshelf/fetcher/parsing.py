"""Atom/RSS 文档解析."""

import calendar
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import feedparser

from feedshelf.core.errors import FeedParseError


@dataclass
class FeedItem:
    """订阅源中的一个条目."""

    title: str = ""
    link: str = ""
    description: str = ""
    content: str = ""
    published_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ParsedFeed:
    """解析后的订阅源."""

    title: str = ""
    description: str = ""
    link: str = ""
    items: list[FeedItem] = field(default_factory=list)


def _to_datetime(value: time.struct_time | None) -> datetime | None:
    """feedparser 的时间元组已归一化为 UTC."""
    if not value:
        return None
    return datetime.fromtimestamp(calendar.timegm(value), UTC)


def _item_content(entry: Any) -> str:
    contents = entry.get("content") or []
    for content in contents:
        value = content.get("value")
        if value:
            return value
    return ""


def _parse_item(entry: Any) -> FeedItem:
    return FeedItem(
        title=(entry.get("title") or "").strip(),
        link=(entry.get("link") or "").strip(),
        description=entry.get("summary") or "",
        content=_item_content(entry),
        published_at=_to_datetime(entry.get("published_parsed")),
        updated_at=_to_datetime(entry.get("updated_parsed")),
    )


def parse_feed(content: bytes) -> ParsedFeed:
    """
    解析 Atom 或 RSS 文档（自动识别）.

    Args:
        content: 原始响应内容

    Returns:
        解析后的订阅源

    Raises:
        FeedParseError: 内容无法识别为订阅源
    """
    parsed = feedparser.parse(content)

    # 非致命的格式问题（如编码声明不一致）仍然可用，只要识别出了格式
    if not parsed.get("version"):
        msg = f"fetching: failed to parse feed: {parsed.get('bozo_exception')}"
        raise FeedParseError(msg)

    meta = parsed.feed
    return ParsedFeed(
        title=(meta.get("title") or "").strip(),
        description=(meta.get("subtitle") or meta.get("description") or "").strip(),
        link=(meta.get("link") or "").strip(),
        items=[_parse_item(entry) for entry in parsed.entries],
    )
