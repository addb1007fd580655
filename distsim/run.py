import argparse
import sys
from typing import List, Optional

from distsim.rank import Ranking, rank_targets
from distsim.stats import build_stats_from_file
from distsim.text import TargetSpec, TargetSpecError, load_stopwords, load_targets
from distsim.vectors import OccurrenceSpace

# Entry point: python -m distsim.run --sentences corpus.txt --targets targets.txt [--stopwords s.txt]
# Prints, per target in input order, up to k "<word>\t<score>" lines (most similar first).
# With --headers each block is preceded by "SIM: <word> <WEIGHTING> <DISTANCE>" and followed
# by a blank line.


def format_ranking(
    spec: TargetSpec, ranking: Ranking, precision: int = 6, header: bool = False
) -> str:
    """Render one target's results, one "<word><TAB><score>" line per result."""
    lines = [f"SIM: {spec.word} {spec.weighting.value} {spec.distance.value}"] if header else []
    lines += [f"{word}\t{score:.{precision}f}" for word, score in ranking]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="distsim", description="Rank vocabulary words by distributional similarity"
    )
    ap.add_argument("--stopwords", type=str, default=None, help="Stop-word list, one per line")
    ap.add_argument("--sentences", type=str, required=True, help="Corpus, one sentence per line")
    ap.add_argument(
        "--targets",
        type=str,
        required=True,
        help="Lines of '<word> <TF|TFIDF> <L1|EUCLIDEAN|COSINE>'",
    )
    ap.add_argument(
        "--window",
        type=int,
        default=None,
        help="Context half-width in tokens; whole sentence when omitted",
    )
    ap.add_argument("-k", "--top-k", type=int, default=10)
    ap.add_argument(
        "--include-self", action="store_true", help="Keep the target in its own candidate list"
    )
    ap.add_argument("--precision", type=int, default=6, help="Decimal places for scores")
    ap.add_argument(
        "--headers",
        action="store_true",
        help="Precede each target's results with a SIM: line and follow them with a blank line",
    )
    ap.add_argument("--verbose", action="store_true", help="Print corpus statistics to stderr")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Build corpus statistics, rank every target, print results; returns the exit status."""
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.window is not None and args.window < 1:
        ap.error("--window must be a positive integer")
    if args.top_k < 0:
        ap.error("--top-k must be non-negative")

    try:
        stopwords = load_stopwords(args.stopwords) if args.stopwords else frozenset()
        targets = load_targets(args.targets)
        stats = build_stats_from_file(args.sentences, stopwords=stopwords, window=args.window)
    except (OSError, TargetSpecError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.verbose:
        s = stats.summary()
        print(
            f"Vocab size {s['vocab_size']}, sentences {s['n_sentences']}, "
            f"co-occurring pairs {s['n_pairs']}, targets {len(targets)}",
            file=sys.stderr,
        )

    space = OccurrenceSpace(stats)
    for spec, ranking in rank_targets(
        space, targets, k=args.top_k, exclude_self=not args.include_self
    ):
        if args.verbose and spec.word not in stats.vocabulary:
            print(f"warning: target '{spec.word}' does not occur in the corpus", file=sys.stderr)
        block = format_ranking(spec, ranking, args.precision, header=args.headers)
        if block:
            print(block, flush=True)
        if args.headers:
            print(flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
