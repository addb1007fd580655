from typing import Callable, Dict, Union

import numpy as np

from distsim.text import DistanceMode

# Distance engine: L1 and Euclidean are distances (0 = identical), cosine is a similarity
# (1 = same direction, 0 = orthogonal or undefined). All work along the last axis, so a single
# vector can be scored against a (n, V) matrix of candidates in one call.

Score = Union[float, np.ndarray]


class ShapeMismatchError(ValueError):
    """Raised when vectors of different lengths are compared."""


def _check(a, b):
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.ndim == 0 or b.ndim == 0 or a.shape[-1] != b.shape[-1]:
        raise ShapeMismatchError(f"cannot compare vectors of shape {a.shape} and {b.shape}")
    return a, b


def _out(x: np.ndarray) -> Score:
    return float(x) if np.ndim(x) == 0 else x


def l1(a: np.ndarray, b: np.ndarray) -> Score:
    """Sum of absolute differences.

    Args:
        a: Vector of length V (or array with last axis V).
        b: Vector or matrix with last axis V.

    Returns:
        Float for two vectors, otherwise one distance per row.

    Raises:
        ShapeMismatchError: If the last-axis lengths differ.
    """
    a, b = _check(a, b)
    return _out(np.abs(a - b).sum(axis=-1))


def euclidean(a: np.ndarray, b: np.ndarray) -> Score:
    """Square root of the summed squared differences (see l1 for argument shapes)."""
    a, b = _check(a, b)
    return _out(np.sqrt(np.square(a - b).sum(axis=-1)))


def cosine(a: np.ndarray, b: np.ndarray) -> Score:
    """a . b / (|a| |b|); 0 wherever either norm is 0 (see l1 for argument shapes)."""
    a, b = _check(a, b)
    dot = (a * b).sum(axis=-1)
    denom = np.linalg.norm(a, axis=-1) * np.linalg.norm(b, axis=-1)
    safe = np.where(denom > 0, denom, 1.0)
    return _out(np.where(denom > 0, dot / safe, 0.0))


DISTANCES: Dict[DistanceMode, Callable[[np.ndarray, np.ndarray], Score]] = {
    DistanceMode.L1: l1,
    DistanceMode.EUCLIDEAN: euclidean,
    DistanceMode.COSINE: cosine,
}


def is_similarity(mode: DistanceMode) -> bool:
    """True when larger scores mean more similar (cosine); False for distances."""
    return mode is DistanceMode.COSINE
