from distsim.distance import cosine, euclidean, l1
from distsim.rank import rank, rank_targets, top_k
from distsim.stats import CorpusStats, CorpusStatsBuilder, Vocabulary, build_stats, compute_idf
from distsim.text import DistanceMode, TargetSpec, Weighting, load_targets, tokenize
from distsim.vectors import OccurrenceSpace, build_vector, normalize, weight_vector

# Distributional word similarity from sentence co-occurrence counts, in NumPy.
# Build CorpusStats once per corpus, wrap it in an OccurrenceSpace, then rank targets.

__all__ = [
    "CorpusStats",
    "CorpusStatsBuilder",
    "DistanceMode",
    "OccurrenceSpace",
    "TargetSpec",
    "Vocabulary",
    "Weighting",
    "build_stats",
    "build_vector",
    "compute_idf",
    "cosine",
    "euclidean",
    "l1",
    "load_targets",
    "normalize",
    "rank",
    "rank_targets",
    "tokenize",
    "top_k",
    "weight_vector",
]
