"""时间工具."""

from datetime import UTC, datetime

from dateutil import parser as date_parser

# RFC 1123, HTTP 日期统一使用 GMT
HTTP_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def utcnow() -> datetime:
    """当前 UTC 时间（带时区）."""
    return datetime.now(UTC)


def to_utc(value: datetime) -> datetime:
    """转换为带时区的 UTC 时间，naive 值视为 UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_http_date(value: datetime) -> str:
    """格式化为 HTTP 日期头（RFC 1123, GMT）."""
    return to_utc(value).strftime(HTTP_DATE_FORMAT)


def parse_http_date(value: str | None) -> datetime | None:
    """解析 HTTP 日期头，无法解析时返回 None."""
    if not value:
        return None
    try:
        return to_utc(date_parser.parse(value))
    except (ValueError, OverflowError):
        return None
