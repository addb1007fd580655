import argparse
import json
import os
from typing import List

import numpy as np

from distsim.rank import rank_targets
from distsim.stats import build_stats_from_file
from distsim.text import Weighting, load_stopwords, load_targets
from distsim.vectors import OccurrenceSpace

# Figures for a run: one bar chart per target and a 2D PCA of target + neighbour vectors.
# Run: python -m distsim.visualize --sentences corpus.txt --targets targets.txt


def _pca2(X: np.ndarray) -> np.ndarray:
    """Project rows of X onto the first 2 principal components (NumPy SVD).

    Args:
        X: Array of shape (n_samples, n_features).

    Returns:
        Array of shape (n_samples, 2); missing components (tiny inputs) are zero.
    """
    X_centered = X - X.mean(axis=0)
    U, s, Vt = np.linalg.svd(X_centered, full_matrices=False)
    coords = np.zeros((X.shape[0], 2), dtype=np.float64)
    n = min(2, Vt.shape[0])
    coords[:, :n] = X_centered @ Vt[:n].T
    return coords


def main() -> None:
    """Rank every target, save rankings.json, bar charts and a PCA figure to save_dir."""
    ap = argparse.ArgumentParser()
    ap.add_argument("--save_dir", type=str, default="distsim/figures")
    ap.add_argument("--stopwords", type=str, default=None)
    ap.add_argument("--sentences", type=str, required=True)
    ap.add_argument("--targets", type=str, required=True)
    ap.add_argument("--window", type=int, default=None)
    ap.add_argument("-k", "--top-k", type=int, default=10)
    args = ap.parse_args()

    stopwords = load_stopwords(args.stopwords) if args.stopwords else frozenset()
    targets = load_targets(args.targets)
    stats = build_stats_from_file(args.sentences, stopwords=stopwords, window=args.window)
    space = OccurrenceSpace(stats)
    results = list(rank_targets(space, targets, k=args.top_k))

    os.makedirs(args.save_dir, exist_ok=True)
    with open(os.path.join(args.save_dir, "rankings.json"), "w") as f:
        json.dump(
            [
                {
                    "target": spec.word,
                    "weighting": spec.weighting.value,
                    "distance": spec.distance.value,
                    "ranking": [[w, s] for w, s in ranking],
                }
                for spec, ranking in results
            ],
            f,
            indent=1,
        )

    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib not installed; skipping figures. pip install matplotlib")
        return

    # One horizontal bar chart per target, most similar on top
    for spec, ranking in results:
        plt.figure(figsize=(6, 4))
        if not ranking:
            plt.text(0.5, 0.5, "No candidates", ha="center", va="center")
        else:
            words = [w for w, _ in ranking][::-1]
            scores = [s for _, s in ranking][::-1]
            plt.barh(words, scores, color="C0")
        plt.xlabel(spec.distance.value)
        plt.title(f"{spec.word} ({spec.weighting.value})")
        plt.tight_layout()
        path = os.path.join(args.save_dir, f"{spec.word}_ranking.png")
        plt.savefig(path, dpi=120)
        plt.close()
        print(f"Saved {path}")

    # PCA of the (TF-normalized) vectors of targets and their neighbours
    words: List[str] = []
    for spec, ranking in results:
        for w in [spec.word] + [w for w, _ in ranking]:
            if w in stats.vocabulary and w not in words:
                words.append(w)
    if len(words) < 2:
        print("Too few in-vocabulary words for a PCA plot")
        return
    X = np.stack([space.vector(w, Weighting.TF) for w in words])
    coords = _pca2(X)
    target_words = set(targets)
    plt.figure(figsize=(8, 6))
    colors = ["C3" if w in target_words else "C0" for w in words]
    plt.scatter(coords[:, 0], coords[:, 1], c=colors, alpha=0.7, s=20)
    for i, w in enumerate(words):
        plt.annotate(w, (coords[i, 0], coords[i, 1]), fontsize=7, alpha=0.9)
    plt.xlabel("PC1")
    plt.ylabel("PC2")
    plt.title("Occurrence vectors (PCA)")
    plt.tight_layout()
    pca_path = os.path.join(args.save_dir, "neighbours_pca.png")
    plt.savefig(pca_path, dpi=120)
    plt.close()
    print(f"Saved {pca_path}")


if __name__ == "__main__":
    main()
