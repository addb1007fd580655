import re
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, NamedTuple, Optional

# Input side of the pipeline: tokenizer/filter, stop-word list, target-specification file.
# Tokens are whole whitespace-separated words made only of ASCII letters, after lower-casing.

_ALPHA = re.compile(r"[a-z]+")


class Weighting(Enum):
    TF = "TF"
    TFIDF = "TFIDF"


class DistanceMode(Enum):
    L1 = "L1"
    EUCLIDEAN = "EUCLIDEAN"
    COSINE = "COSINE"


class TargetSpec(NamedTuple):
    word: str
    weighting: Weighting
    distance: DistanceMode


class TargetSpecError(ValueError):
    """Raised for a malformed line in the target-specification file."""


def tokenize(line: str, stopwords: Optional[Iterable[str]] = None) -> List[str]:
    """Lowercase, split on whitespace, keep purely alphabetic tokens that are not stop words.

    Args:
        line: Raw input line.
        stopwords: Lower-case stop words to drop. Defaults to None (drop nothing).

    Returns:
        List of token strings in sentence order.
    """
    stop = stopwords if stopwords is not None else ()
    return [t for t in line.lower().split() if _ALPHA.fullmatch(t) and t not in stop]


def read_lines(path: str) -> Iterator[str]:
    """Lazily yield the lines of a UTF-8 text file without trailing newlines."""
    with open(path, encoding="utf-8") as f:
        for line in f:
            yield line.rstrip("\r\n")


def load_stopwords(path: str) -> FrozenSet[str]:
    """Load a stop-word list (one word per line) as a lower-cased set; blank lines ignored."""
    return frozenset(w.strip().lower() for w in read_lines(path) if w.strip())


def _parse_enum(enum_cls, value: str, what: str, where: str):
    try:
        return enum_cls[value.upper()]
    except KeyError:
        choices = ", ".join(m.value for m in enum_cls)
        raise TargetSpecError(f"{where}: unknown {what} {value!r} (expected one of {choices})") from None


def parse_target_line(line: str, lineno: Optional[int] = None) -> TargetSpec:
    """Parse one `<word> <weighting> <distance>` record (tab or whitespace separated).

    Args:
        line: Raw record.
        lineno: 1-based line number used in error messages. Defaults to None.

    Returns:
        TargetSpec with the word lower-cased.

    Raises:
        TargetSpecError: If the record does not have exactly three fields or names an
            unknown weighting or distance.
    """
    where = f"line {lineno}" if lineno is not None else "target line"
    fields = line.split()
    if len(fields) != 3:
        raise TargetSpecError(
            f"{where}: expected '<word> <weighting> <distance>', got {line.strip()!r}"
        )
    word, weighting, distance = fields
    return TargetSpec(
        word.lower(),
        _parse_enum(Weighting, weighting, "weighting", where),
        _parse_enum(DistanceMode, distance, "distance", where),
    )


def parse_targets(lines: Iterable[str]) -> Dict[str, TargetSpec]:
    """Parse target records in order; blank and '#' lines skipped, first occurrence of a word wins."""
    targets: Dict[str, TargetSpec] = {}
    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        spec = parse_target_line(stripped, lineno)
        if spec.word not in targets:
            targets[spec.word] = spec
    return targets


def load_targets(path: str) -> Dict[str, TargetSpec]:
    """Read and parse a target-specification file."""
    return parse_targets(read_lines(path))
