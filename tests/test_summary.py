"""测试摘要生成."""

from feedshelf.utils.summary import ELLIPSIS, summarize


class TestSummarize:
    """summarize 测试."""

    def test_empty(self) -> None:
        assert summarize("", 10, 20) == ""

    def test_short_text_is_kept(self) -> None:
        text = "short text"
        assert summarize(text, 300, 500) == text

    def test_single_long_paragraph_is_truncated(self) -> None:
        text = "a" * 50
        summary = summarize(text, 10, 20)
        assert summary == "a" * 20 + ELLIPSIS

    def test_single_paragraph_within_limit_is_kept(self) -> None:
        text = "b" * 15
        assert summarize(text, 10, 20) == text

    def test_whole_paragraphs_are_kept(self) -> None:
        text = "\n\n".join(["a" * 8, "b" * 8, "c" * 8])
        assert summarize(text, 10, 20) == "a" * 8 + "\n\n" + "b" * 8

    def test_first_paragraph_too_long(self) -> None:
        text = "a" * 30 + "\n\n" + "b" * 5
        assert summarize(text, 10, 20) == "a" * 20 + ELLIPSIS

    def test_single_paragraph_is_cut_by_characters(self) -> None:
        """单段截断按字符计，不会截断多字节字符."""
        text = "订阅" * 30
        summary = summarize(text, 10, 21)
        assert summary == text[:21] + ELLIPSIS

    def test_keep_limit_counts_bytes(self) -> None:
        """100 个汉字为 300 字节，超过原样保留的上限."""
        text = "订" * 100 + "\n\n" + "阅" * 10
        assert summarize(text, 200, 310) == "订" * 100

    def test_multibyte_paragraphs_are_joined_by_bytes(self) -> None:
        text = "订" * 150 + "\n\n" + "阅" * 150
        summary = summarize(text, 300, 500)
        assert summary == "订" * 150
        assert len(summary.encode()) <= 500

    def test_separators_count_towards_limit(self) -> None:
        """段落间的空行也计入上限."""
        text = "\n\n".join(["a" * 200, "b" * 200, "c" * 99])
        summary = summarize(text, 300, 500)
        assert summary == "a" * 200 + "\n\n" + "b" * 200
        assert len(summary) <= 500

    def test_paragraphs_filling_limit_exactly(self) -> None:
        text = "\n\n".join(["a" * 200, "b" * 200, "c" * 96])
        summary = summarize(text, 300, 500)
        assert summary == text
        assert len(summary) == 500

    def test_idempotent(self) -> None:
        """对摘要再次生成摘要结果不变."""
        text = "\n\n".join(["lorem ipsum " * 5, "dolor sit amet " * 5, "consectetur " * 10])
        summary = summarize(text, 50, 150)
        assert summarize(summary, 50, 150) == summary
