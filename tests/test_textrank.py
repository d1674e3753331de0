"""测试 TextRank 关键词提取."""

from feedshelf.utils.textrank import TextRanker, is_stopword, normalize_text


class TestTextRanker:
    """TextRanker 测试."""

    def test_empty_document(self) -> None:
        ranker = TextRanker()
        assert ranker.rank_top_n_phrases("", 10) == []
        assert ranker.rank_top_n_words("", 10) == []

    def test_stopwords(self) -> None:
        assert is_stopword("the")
        assert is_stopword("an")
        assert not is_stopword("python")

    def test_normalize_text(self) -> None:
        assert normalize_text("café/bar-baz:qux") == "cafe bar baz qux"

    def test_words_ranked_by_frequency(self) -> None:
        text = (
            "Python asyncio makes concurrency simple. "
            "Python tasks run concurrently. "
            "Python developers enjoy asyncio."
        )
        words = TextRanker().rank_top_n_words(text, 2)
        assert words == ["python", "asyncio"]

    def test_phrases_are_adjacent_pairs(self) -> None:
        text = "Light rail stations. Light rail tunnel. Light rail service."
        phrases = TextRanker().rank_top_n_phrases(text, 1)
        # 短语以后出现的词在前
        assert phrases == ["rail light"]

    def test_relations_are_undirected(self) -> None:
        text = "metro county. county metro. county metro."
        phrases = TextRanker().rank_phrases(text)
        assert len(phrases) == 1

    def test_top_n_limits_results(self) -> None:
        text = "alpha beta gamma delta epsilon zeta eta theta"
        assert len(TextRanker().rank_top_n_phrases(text, 3)) == 3
        assert len(TextRanker().rank_top_n_words(text, 3)) == 3

    def test_sentence_boundaries_break_phrases(self) -> None:
        phrases = TextRanker().rank_phrases("alpha. beta.")
        assert phrases == []
