from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from distsim.text import read_lines, tokenize

# Corpus statistics: vocabulary (first-occurrence order), word x word co-occurrence counts,
# sentence (document) frequencies and IDF. One builder per ingestion pass; build() seals it
# and hands back a read-only snapshot.

_EMPTY: Mapping[str, int] = MappingProxyType({})


class IDFDomainError(ArithmeticError):
    """Raised when a vocabulary word has zero sentence frequency (inconsistent statistics)."""


class Vocabulary:
    """Ordered unique words with an O(1) word -> index mapping.

    Attributes:
        words (tuple): Words in first-occurrence order; position is the vector index.
        word2id (Mapping[str, int]): Read-only mapping from word to its position.
    """

    def __init__(self, words: Sequence[str]):
        self.words = tuple(words)
        index = {w: i for i, w in enumerate(self.words)}
        if len(index) != len(self.words):
            raise ValueError("Vocabulary words must be unique")
        self.word2id = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word) -> bool:
        return word in self.word2id

    def __iter__(self):
        return iter(self.words)

    def __getitem__(self, i: int) -> str:
        return self.words[i]

    def index(self, word: str) -> int:
        return self.word2id[word]

    def __repr__(self) -> str:
        return f"Vocabulary({len(self.words)} words)"


def compute_idf(
    vocabulary: Vocabulary,
    sentence_freq: Mapping[str, int],
    n_sentences: int,
) -> np.ndarray:
    """IDF per vocabulary word: ln(N / df[w]), aligned with vocabulary order.

    Args:
        vocabulary: Vocabulary giving the output order.
        sentence_freq: Number of sentences containing each word.
        n_sentences: Total sentences processed (N).

    Returns:
        Read-only float64 array of length len(vocabulary).

    Raises:
        IDFDomainError: If some vocabulary word has zero (or missing) sentence frequency.
    """
    df = np.array([sentence_freq.get(w, 0) for w in vocabulary], dtype=np.float64)
    if np.any(df <= 0):
        bad = [w for w, d in zip(vocabulary, df) if d <= 0]
        raise IDFDomainError(f"zero sentence frequency for vocabulary words: {bad[:5]}")
    idf = np.log(float(n_sentences) / df)
    idf.setflags(write=False)
    return idf


class CorpusStats:
    """Immutable snapshot of one ingestion pass.

    Attributes:
        vocabulary (Vocabulary): Retained words in first-occurrence order.
        cooccurrence (Mapping[str, Mapping[str, int]]): word -> context word -> count.
        sentence_freq (Mapping[str, int]): word -> number of sentences containing it.
        n_sentences (int): Lines processed, including those with no retained tokens.
        window (Optional[int]): Context half-width used, or None for whole sentences.
        idf (np.ndarray): Read-only IDF vector aligned with the vocabulary.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        cooccurrence: Mapping[str, Mapping[str, int]],
        sentence_freq: Mapping[str, int],
        n_sentences: int,
        window: Optional[int] = None,
    ):
        self.vocabulary = vocabulary
        self.cooccurrence = MappingProxyType(
            {w: MappingProxyType(dict(row)) for w, row in cooccurrence.items()}
        )
        self.sentence_freq = MappingProxyType(dict(sentence_freq))
        self.n_sentences = n_sentences
        self.window = window
        self.idf = compute_idf(vocabulary, self.sentence_freq, n_sentences)

    def cooccurrences(self, word: str) -> Mapping[str, int]:
        """Context counts for word; empty mapping if the word never occurred."""
        return self.cooccurrence.get(word, _EMPTY)

    def summary(self) -> dict:
        return {
            "vocab_size": len(self.vocabulary),
            "n_sentences": self.n_sentences,
            "n_pairs": sum(len(row) for row in self.cooccurrence.values()),
            "window": self.window,
        }


class CorpusStatsBuilder:
    """Accumulates vocabulary, co-occurrence and sentence frequency over one pass of lines.

    Context is every other retained token in the sentence, or only those within `window`
    retained-token positions when a window is given. A word is never its own context,
    including repeated occurrences of the same word in a sentence.
    """

    def __init__(self, stopwords: Iterable[str] = (), window: Optional[int] = None):
        """Initialize an empty builder.

        Args:
            stopwords: Words to drop (compared after lower-casing). Defaults to ().
            window: Context half-width in retained tokens; None means the whole sentence.
                Defaults to None.

        Raises:
            ValueError: If window is not None and not a positive integer.
        """
        if window is not None and (isinstance(window, bool) or int(window) != window or window < 1):
            raise ValueError(f"window must be a positive integer or None, got {window!r}")
        self.stopwords = frozenset(w.lower() for w in stopwords)
        self.window = None if window is None else int(window)
        self._words: List[str] = []
        self._seen: Dict[str, int] = {}
        self._cooc: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self._sentence_freq: Dict[str, int] = defaultdict(int)
        self._n_sentences = 0
        self._built = False

    def add_line(self, line: str) -> List[str]:
        """Tokenize a raw line and add it as one sentence; returns the retained tokens."""
        tokens = tokenize(line, self.stopwords)
        self.add_tokens(tokens)
        return tokens

    def add_tokens(self, tokens: Sequence[str]) -> None:
        """Add one already-filtered sentence (counts as one document even when empty)."""
        if self._built:
            raise RuntimeError("CorpusStatsBuilder already built; start a new builder")
        self._n_sentences += 1
        n = len(tokens)
        for j, word in enumerate(tokens):
            if word not in self._seen:
                self._seen[word] = len(self._words)
                self._words.append(word)
            if self.window is None:
                start, end = 0, n
            else:
                start, end = max(0, j - self.window), min(n, j + self.window + 1)
            row = self._cooc[word]
            for k in range(start, end):
                if k == j or tokens[k] == word:
                    continue
                row[tokens[k]] += 1
        for word in set(tokens):
            self._sentence_freq[word] += 1

    def build(self) -> CorpusStats:
        """Seal the builder and return the immutable statistics snapshot."""
        self._built = True
        return CorpusStats(
            Vocabulary(self._words),
            {w: row for w, row in self._cooc.items() if row},
            self._sentence_freq,
            self._n_sentences,
            window=self.window,
        )


def build_stats(
    lines: Iterable[str],
    stopwords: Iterable[str] = (),
    window: Optional[int] = None,
) -> CorpusStats:
    """Run one ingestion pass over raw lines.

    Args:
        lines: Raw sentences, one document each.
        stopwords: Words to drop. Defaults to ().
        window: Context half-width, or None for whole sentences. Defaults to None.

    Returns:
        CorpusStats for the pass.
    """
    builder = CorpusStatsBuilder(stopwords, window=window)
    for line in lines:
        builder.add_line(line)
    return builder.build()


def build_stats_from_file(
    path: str,
    stopwords: Iterable[str] = (),
    window: Optional[int] = None,
) -> CorpusStats:
    """Same as build_stats, reading the sentences file lazily line by line."""
    return build_stats(read_lines(path), stopwords=stopwords, window=window)
