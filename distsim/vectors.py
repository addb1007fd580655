from typing import Dict

import numpy as np

from distsim.distance import ShapeMismatchError
from distsim.stats import CorpusStats
from distsim.text import Weighting

# Occurrence vectors: dense counts over the vocabulary index space, optional IDF weighting,
# L2 normalization. Normalizing a zero vector is a no-op.


def build_vector(stats: CorpusStats, word: str) -> np.ndarray:
    """Dense co-occurrence counts for word; position i counts vocabulary[i] as context.

    Args:
        stats: Corpus statistics.
        word: Any word; unknown words give the zero vector.

    Returns:
        Float64 array of length len(stats.vocabulary).
    """
    vec = np.zeros(len(stats.vocabulary), dtype=np.float64)
    index = stats.vocabulary.word2id
    for context, count in stats.cooccurrences(word).items():
        vec[index[context]] = count
    return vec


def weight_vector(vector: np.ndarray, weighting: Weighting, idf: np.ndarray) -> np.ndarray:
    """Apply TF (identity) or TFIDF (elementwise product with idf); returns a new array.

    Raises:
        ShapeMismatchError: If TFIDF is requested and vector and idf differ in length.
    """
    vector = np.asarray(vector, dtype=np.float64)
    if weighting is Weighting.TF:
        return vector.copy()
    if vector.shape[-1] != idf.shape[0]:
        raise ShapeMismatchError(
            f"vector length {vector.shape[-1]} does not match idf length {idf.shape[0]}"
        )
    return vector * idf


def normalize(vector: np.ndarray) -> np.ndarray:
    """Return vector / |vector|_2 as a new array; a zero vector is returned unchanged (copied)."""
    vector = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(vector)
    if norm == 0:
        return vector.copy()
    return vector / norm


class OccurrenceSpace:
    """Per-run cache of weighted, normalized occurrence vectors for every vocabulary word.

    The matrix for a weighting is built once, on first use, and shared by all targets that
    ask for that weighting. Row i is normalize(weight_vector(build_vector(vocab[i]))).

    Attributes:
        stats (CorpusStats): Statistics the vectors are derived from.
    """

    def __init__(self, stats: CorpusStats):
        self.stats = stats
        self._matrices: Dict[Weighting, np.ndarray] = {}

    @property
    def vocabulary(self):
        return self.stats.vocabulary

    def matrix(self, weighting: Weighting) -> np.ndarray:
        """Read-only (V, V) matrix of normalized vectors under weighting."""
        if weighting not in self._matrices:
            vocab = self.stats.vocabulary
            X = np.empty((len(vocab), len(vocab)), dtype=np.float64)
            # one row at a time, so the only (V, V) allocation is the cached matrix itself
            for i, word in enumerate(vocab):
                counts = build_vector(self.stats, word)
                X[i] = normalize(weight_vector(counts, weighting, self.stats.idf))
            X.setflags(write=False)
            self._matrices[weighting] = X
        return self._matrices[weighting]

    def vector(self, word: str, weighting: Weighting) -> np.ndarray:
        """Normalized vector for word; zero vector when word is not in the vocabulary."""
        if word in self.stats.vocabulary:
            return self.matrix(weighting)[self.stats.vocabulary.index(word)]
        vec = np.zeros(len(self.stats.vocabulary), dtype=np.float64)
        vec.setflags(write=False)
        return vec
