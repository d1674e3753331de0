"""测试分页计算."""

import pytest

from feedshelf.core.errors import PageNumberOutOfBoundsError
from feedshelf.core.pagination import new_page, page_count


class TestPagination:
    """分页测试."""

    @pytest.mark.parametrize(
        ("item_count", "expected"),
        [(0, 1), (1, 1), (20, 1), (21, 2), (40, 2), (41, 3)],
    )
    def test_page_count(self, item_count: int, expected: int) -> None:
        assert page_count(item_count, 20) == expected

    def test_empty_first_page(self) -> None:
        page = new_page(1, 0, 20)
        assert page.number == 1
        assert page.total_pages == 1
        assert page.previous == 1
        assert page.next == 1
        assert page.pages_left == 0

    def test_middle_page(self) -> None:
        page = new_page(2, 45, 20, search_terms="python")
        assert page.previous == 1
        assert page.next == 3
        assert page.total_pages == 3
        assert page.offset == 21
        assert page.item_count == 45
        assert page.search_terms == "python"

    def test_last_page(self) -> None:
        page = new_page(3, 45, 20)
        assert page.next == 3
        assert page.pages_left == 0

    @pytest.mark.parametrize("number", [0, -1, 4])
    def test_out_of_bounds(self, number: int) -> None:
        with pytest.raises(PageNumberOutOfBoundsError):
            new_page(number, 45, 20)
