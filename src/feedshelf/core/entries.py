"""条目构建：HTML 转文本、摘要、关键词提取与校验."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from feedshelf.config import Settings
from feedshelf.core.errors import (
    EntryTitleRequiredError,
    EntryUIDInvalidError,
    EntryURLInvalidError,
    FeedShelfError,
)
from feedshelf.fetcher.parsing import FeedItem
from feedshelf.models import Entry
from feedshelf.utils.html_parser import html_to_text
from feedshelf.utils.ids import is_valid_uid, new_entry_uid
from feedshelf.utils.summary import summarize
from feedshelf.utils.textrank import TextRanker
from feedshelf.utils.urls import check_feed_url

logger = logging.getLogger(__name__)


def validate_entry(entry: Entry) -> None:
    """
    校验待写入的条目.

    Raises:
        EntryURLInvalidError: URL 为空或不是 http(s)
        EntryTitleRequiredError: 标题为空
        EntryUIDInvalidError: UID 不是合法的 KSUID
    """
    if check_feed_url(entry.url) is not None:
        raise EntryURLInvalidError
    if not entry.title:
        raise EntryTitleRequiredError
    if not is_valid_uid(entry.uid):
        raise EntryUIDInvalidError


@dataclass
class EntryBuilder:
    """将订阅源条目转换为待写入的 Entry."""

    summary_keep_under: int = 300
    summary_truncate_after: int = 500
    textrank_top_n: int = 10
    text_ranker: TextRanker = field(default_factory=TextRanker)

    @classmethod
    def from_settings(cls, settings: Settings) -> "EntryBuilder":
        """按配置创建."""
        return cls(
            summary_keep_under=settings.summary_keep_under,
            summary_truncate_after=settings.summary_truncate_after,
            textrank_top_n=settings.textrank_top_n,
        )

    def build(self, feed_uuid: UUID, item: FeedItem, now: datetime) -> Entry:
        """
        构建条目.

        描述为空时使用正文；缺失发布时间时依次使用更新时间、同步时间，
        缺失更新时间时与发布时间一致。

        Raises:
            FeedShelfError: 条目校验失败
        """
        text = html_to_text(item.description) or html_to_text(item.content)
        title = item.title.strip()

        published_at = item.published_at or item.updated_at or now
        updated_at = item.updated_at or published_at

        entry = Entry(
            uid=new_entry_uid(),
            feed_uuid=feed_uuid,
            url=item.link.strip(),
            title=title,
            summary=summarize(text, self.summary_keep_under, self.summary_truncate_after),
            textrank_terms=self.text_ranker.rank_top_n_phrases(
                f"{title}\n\n{text}", self.textrank_top_n
            ),
            published_at=published_at,
            updated_at=updated_at,
        )
        validate_entry(entry)
        return entry

    def build_many(self, feed_uuid: UUID, items: Iterable[FeedItem], now: datetime) -> list[Entry]:
        """构建多个条目，跳过无效条目和重复 URL."""
        entries: list[Entry] = []
        seen_urls: set[str] = set()

        for item in items:
            try:
                entry = self.build(feed_uuid, item, now)
            except FeedShelfError as e:
                logger.warning(f"跳过无效条目: feed={feed_uuid}, url={item.link!r}, error={e}")
                continue

            if entry.url in seen_urls:
                continue
            seen_urls.add(entry.url)
            entries.append(entry)

        return entries
