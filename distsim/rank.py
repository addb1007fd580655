from typing import Callable, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from distsim.distance import DISTANCES, is_similarity
from distsim.text import DistanceMode, TargetSpec, Weighting
from distsim.vectors import OccurrenceSpace

# Ranking: score every candidate against the target, then select the top-k with a quickselect
# over the last-element pivot and quicksort the selected prefix. Partitions are three-way, so a
# block of equal scores is settled in one pass; equal scores keep vocabulary order.

Ranking = List[Tuple[str, float]]


def partition(items: list, lo: int, hi: int, key: Callable) -> Tuple[int, int]:
    """Three-way partition of items[lo..hi] around the key of items[hi].

    Returns:
        (lt, gt) such that items[lo:lt] < pivot, items[lt:gt + 1] == pivot and
        items[gt + 1:hi + 1] > pivot.
    """
    pivot = key(items[hi])
    lt, i, gt = lo, lo, hi
    while i <= gt:
        k = key(items[i])
        if k < pivot:
            items[lt], items[i] = items[i], items[lt]
            lt += 1
            i += 1
        elif k > pivot:
            items[i], items[gt] = items[gt], items[i]
            gt -= 1
        else:
            i += 1
    return lt, gt


def quickselect(items: list, k: int, key: Callable) -> None:
    """Rearrange items in place so that items[:k] hold k smallest keys (in any order)."""
    if k <= 0 or k >= len(items):
        return
    target = k - 1
    lo, hi = 0, len(items) - 1
    while lo < hi:
        lt, gt = partition(items, lo, hi, key)
        if target < lt:
            hi = lt - 1
        elif target > gt:
            lo = gt + 1
        else:
            return


def quicksort(items: list, key: Callable, lo: int = 0, hi: Optional[int] = None) -> None:
    """In-place quicksort of items[lo..hi] by key, iterative with the smaller side first."""
    if hi is None:
        hi = len(items) - 1
    stack = [(lo, hi)]
    while stack:
        lo, hi = stack.pop()
        if lo >= hi:
            continue
        lt, gt = partition(items, lo, hi, key)
        left, right = (lo, lt - 1), (gt + 1, hi)
        if lt - lo < hi - gt:
            stack.append(right)
            stack.append(left)
        else:
            stack.append(left)
            stack.append(right)


def _restore_tie_order(entries: list, key: Callable) -> None:
    """Within each run of equal keys in a sorted list, put entries back in insertion order."""
    start = 0
    for end in range(1, len(entries) + 1):
        if end == len(entries) or key(entries[end]) != key(entries[start]):
            if end - start > 1:
                entries[start:end] = sorted(entries[start:end], key=lambda e: e[2])
            start = end


def top_k(pairs: Sequence[Tuple[str, float]], k: int, largest: bool = False) -> Ranking:
    """Best k (label, score) pairs, best first.

    Selection runs on the score alone. When the k-th best score is shared by more candidates
    than there are free slots, the earliest of them in insertion order are kept.

    Args:
        pairs: Candidates in insertion order.
        k: Number of pairs to keep; fewer are returned if there are fewer candidates.
        largest: True when larger scores are better (similarities). Defaults to False.

    Returns:
        List of at most k (label, score) pairs; ties keep insertion order.
    """
    sign = -1.0 if largest else 1.0
    k = max(0, min(k, len(pairs)))
    if k == 0:
        return []
    entries = [(label, score, i) for i, (label, score) in enumerate(pairs)]

    def by_score(entry):
        return sign * entry[1]

    if k == len(entries):
        head = entries
    else:
        quickselect(entries, k, by_score)
        cut = by_score(entries[k - 1])
        head = [e for e in entries[:k] if by_score(e) < cut]
        # fill the remaining slots from the tied block, walking the candidates in insertion order
        for i, (label, score) in enumerate(pairs):
            if len(head) == k:
                break
            if sign * score == cut:
                head.append((label, score, i))
    quicksort(head, key=by_score)
    _restore_tie_order(head, by_score)
    return [(label, score) for label, score, _ in head]


def score_all(
    space: OccurrenceSpace,
    target: str,
    weighting: Weighting,
    distance: DistanceMode,
) -> np.ndarray:
    """Score the target against every vocabulary word; index i scores vocabulary[i]."""
    fn = DISTANCES[distance]
    target_vec = space.vector(target, weighting)
    return np.atleast_1d(fn(target_vec, space.matrix(weighting)))


def rank(
    space: OccurrenceSpace,
    target: str,
    weighting: Weighting,
    distance: DistanceMode,
    k: int = 10,
    exclude_self: bool = True,
) -> Ranking:
    """Top-k most similar vocabulary words to target, most similar first.

    Args:
        space: Occurrence vectors for the run.
        target: Target word (need not be in the vocabulary).
        weighting: TF or TFIDF.
        distance: L1 / EUCLIDEAN (smaller is closer) or COSINE (larger is closer).
        k: Maximum number of results. Defaults to 10.
        exclude_self: Leave the target out of its own candidates. Defaults to True.

    Returns:
        List of (word, score) of length min(k, number of candidates).
    """
    scores = score_all(space, target, weighting, distance)
    pairs = [
        (word, float(scores[i]))
        for i, word in enumerate(space.vocabulary)
        if not (exclude_self and word == target)
    ]
    return top_k(pairs, k, largest=is_similarity(distance))


def rank_targets(
    space: OccurrenceSpace,
    targets: Mapping[str, TargetSpec],
    k: int = 10,
    exclude_self: bool = True,
) -> Iterator[Tuple[TargetSpec, Ranking]]:
    """Yield (spec, ranking) for each target in the mapping's order."""
    for spec in targets.values():
        yield spec, rank(
            space, spec.word, spec.weighting, spec.distance, k=k, exclude_self=exclude_self
        )
