"""TextRank 关键词与短语提取."""

import re
from dataclasses import dataclass, field

from anyascii import anyascii

_NORMALIZE_TABLE = str.maketrans({"/": " ", "-": " ", ":": " "})

_SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
_WORD_SPLIT_PATTERN = re.compile(r"[\s,'\"()\[\]{};<>%@&=#*+|~`^$\\]+")

# 英文停用词，长度不超过 2 的词同样视为停用词
STOPWORDS = frozenset(
    """
    about above across after afterwards again against all almost alone along
    already also although always among amongst and another any anyhow anyone
    anything anyway anywhere are around back became because become becomes
    becoming been before beforehand behind being below beside besides between
    beyond both but can cannot could did does doing done down due during each
    either else elsewhere enough etc even ever every everyone everything
    everywhere except few for former formerly from further get gets got had
    has have having hence her here hereafter hereby herein hers herself him
    himself his how however into its itself just last latter least less made
    make many may meanwhile might mine more moreover most mostly much must
    myself namely neither never nevertheless next nobody none nor not nothing
    now nowhere off often once one only onto other others otherwise our ours
    ourselves out over own per perhaps please put rather same see seem seemed
    seeming seems several she should since some somehow someone something
    sometime sometimes somewhere still such than that the their theirs them
    themselves then thence there thereafter thereby therefore therein these
    they this those though through throughout thru thus together too toward
    towards under until upon very via was were what whatever when whence
    whenever where whereafter whereas whereby wherein whereupon wherever
    whether which while whither who whoever whole whom whose why will with
    within without would yet you your yours yourself yourselves
    """.split()
)


def normalize_text(text: str) -> str:
    """转写为 ASCII 并将 / - : 替换为空格."""
    return anyascii(text).translate(_NORMALIZE_TABLE)


def is_stopword(word: str) -> bool:
    """判断是否为停用词."""
    return len(word) <= 2 or word in STOPWORDS


@dataclass
class RankedWord:
    """候选词."""

    id: int
    word: str
    qty: int = 0
    weight: float = 0.0


@dataclass
class RankedPhrase:
    """候选短语（相邻的两个非停用词）."""

    left_id: int
    right_id: int
    left: str
    right: str
    qty: int = 0
    weight: float = 0.0


@dataclass
class _Graph:
    words: dict[str, RankedWord] = field(default_factory=dict)
    relations: dict[tuple[int, int], RankedPhrase] = field(default_factory=dict)

    def add_word(self, token: str) -> RankedWord:
        word = self.words.get(token)
        if word is None:
            word = RankedWord(id=len(self.words), word=token)
            self.words[token] = word
        word.qty += 1
        return word

    def add_relation(self, current: RankedWord, previous: RankedWord) -> None:
        # 关系无方向：已存在反向关系时累加到反向关系上
        reverse = self.relations.get((previous.id, current.id))
        if reverse is not None:
            reverse.qty += 1
            return

        relation = self.relations.get((current.id, previous.id))
        if relation is None:
            relation = RankedPhrase(
                left_id=current.id,
                right_id=previous.id,
                left=current.word,
                right=previous.word,
            )
            self.relations[(current.id, previous.id)] = relation
        relation.qty += 1


def _normalize_weight(value: float, minimum: float, maximum: float) -> float:
    if maximum == minimum:
        return 1.0
    return (value - minimum) / (maximum - minimum)


def _tokenize(text: str) -> list[list[str]]:
    sentences = []
    for sentence in _SENTENCE_SPLIT_PATTERN.split(text):
        words = [w for w in _WORD_SPLIT_PATTERN.split(sentence.lower()) if w]
        if words:
            sentences.append(words)
    return sentences


class TextRanker:
    """基于 TextRank 提取排名靠前的短语和关键词."""

    def _build_graph(self, text: str) -> _Graph:
        graph = _Graph()

        for sentence in _tokenize(normalize_text(text)):
            previous: RankedWord | None = None
            for token in sentence:
                if is_stopword(token):
                    continue
                current = graph.add_word(token)
                if previous is not None:
                    graph.add_relation(current, previous)
                previous = current

        if graph.words:
            quantities = [w.qty for w in graph.words.values()]
            low, high = min(quantities), max(quantities)
            for word in graph.words.values():
                word.weight = _normalize_weight(word.qty, low, high)

        if graph.relations:
            quantities = [r.qty for r in graph.relations.values()]
            low, high = min(quantities), max(quantities)
            for relation in graph.relations.values():
                relation.weight = _normalize_weight(relation.qty, low, high)

        return graph

    def rank_phrases(self, text: str) -> list[str]:
        """按权重排序的全部短语."""
        graph = self._build_graph(text)
        phrases = sorted(
            graph.relations.values(),
            key=lambda p: (p.weight, p.qty, p.left_id, p.right_id),
            reverse=True,
        )
        return [f"{p.left} {p.right}" for p in phrases]

    def rank_words(self, text: str) -> list[str]:
        """按权重排序的全部关键词."""
        graph = self._build_graph(text)
        words = sorted(
            graph.words.values(),
            key=lambda w: (w.weight, w.qty, w.id),
            reverse=True,
        )
        return [w.word for w in words]

    def rank_top_n_phrases(self, text: str, top_n: int) -> list[str]:
        """提取排名前 N 的短语."""
        return self.rank_phrases(text)[:top_n]

    def rank_top_n_words(self, text: str, top_n: int) -> list[str]:
        """提取排名前 N 的关键词."""
        return self.rank_words(text)[:top_n]
