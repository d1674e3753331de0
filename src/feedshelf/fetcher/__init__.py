"""订阅源抓取模块."""

from feedshelf.fetcher.client import FeedClient, FetchResult
from feedshelf.fetcher.parsing import FeedItem, ParsedFeed, parse_feed

__all__ = [
    "FeedClient",
    "FeedItem",
    "FetchResult",
    "ParsedFeed",
    "parse_feed",
]
