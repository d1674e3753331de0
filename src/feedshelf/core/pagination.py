"""分页计算."""

import math
from dataclasses import dataclass

from feedshelf.core.errors import PageNumberOutOfBoundsError


@dataclass
class Page:
    """分页信息."""

    number: int
    previous: int
    next: int
    total_pages: int
    item_count: int
    offset: int
    search_terms: str = ""

    @property
    def pages_left(self) -> int:
        """剩余页数."""
        return self.total_pages - self.number


def page_count(item_count: int, items_per_page: int) -> int:
    """总页数，没有条目时为 1."""
    if item_count == 0:
        return 1
    return math.ceil(item_count / items_per_page)


def check_page_number(number: int) -> None:
    """页码从 1 开始."""
    if number < 1:
        raise PageNumberOutOfBoundsError


def new_page(
    number: int,
    item_count: int,
    items_per_page: int,
    search_terms: str = "",
) -> Page:
    """
    计算分页信息.

    Args:
        number: 当前页码（从 1 开始）
        item_count: 条目总数
        items_per_page: 每页条目数
        search_terms: 检索词，原样回显

    Raises:
        PageNumberOutOfBoundsError: 页码小于 1 或超过总页数
    """
    check_page_number(number)

    total_pages = page_count(item_count, items_per_page)
    if number > total_pages:
        raise PageNumberOutOfBoundsError

    return Page(
        number=number,
        previous=max(number - 1, 1),
        next=min(number + 1, total_pages),
        total_pages=total_pages,
        item_count=item_count,
        # 从 1 开始，用于显示
        offset=(number - 1) * items_per_page + 1,
        search_terms=search_terms,
    )
