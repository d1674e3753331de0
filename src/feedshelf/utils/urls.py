"""URL 校验."""

from urllib.parse import urlsplit

SUPPORTED_SCHEMES = frozenset({"http", "https"})


def check_feed_url(url: str) -> str | None:
    """
    校验订阅 URL.

    Returns:
        错误原因: empty | invalid | no-scheme | unsupported-scheme | no-host，
        合法时返回 None
    """
    if not url:
        return "empty"

    try:
        parts = urlsplit(url)
    except ValueError:
        return "invalid"

    if not parts.scheme:
        return "no-scheme"
    if parts.scheme.lower() not in SUPPORTED_SCHEMES:
        return "unsupported-scheme"
    if not parts.hostname:
        return "no-host"
    return None
