"""Plain-text adjacency lines for downstream graph writers.

One line per vertex with 1-indexed neighbor ids:

    unweighted: <degree> <n1> <n2> ...
    weighted:   <degree> <total weight> <n1> <w1> <n2> <w2> ...
"""

from collections.abc import Iterable, Iterator

import numpy as np


def format_weight(value: float, decimals: int = 3) -> str:
    """Fixed-point with at most `decimals` places and no trailing zeros."""
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("", "-0"):
        text = "0"
    return text


class MetisLines:
    """Lazy, restartable sequence of adjacency lines, one per vertex."""

    def __init__(
        self,
        indptr: np.ndarray,
        indices: np.ndarray,
        weights: np.ndarray | None = None,
        decimals: int = 3,
    ) -> None:
        self._indptr = indptr
        self._indices = indices
        self._weights = weights
        self._decimals = decimals

    def __len__(self) -> int:
        return len(self._indptr) - 1

    def __iter__(self) -> Iterator[str]:
        for v in range(len(self)):
            yield self.line(v)

    def line(self, v: int) -> str:
        start, stop = int(self._indptr[v]), int(self._indptr[v + 1])
        neighbors = self._indices[start:stop] + 1
        parts = [str(stop - start)]
        if self._weights is None:
            parts.extend(str(int(u)) for u in neighbors)
        else:
            row_weights = self._weights[start:stop]
            parts.append(format_weight(float(row_weights.sum()), self._decimals))
            for u, w in zip(neighbors, row_weights):
                parts.append(str(int(u)))
                parts.append(format_weight(float(w), self._decimals))
        return " ".join(parts)


def ground_truth_lines(ground_truth: Iterable[frozenset[int]]) -> Iterator[str]:
    """One line per cluster listing its sorted 1-indexed members."""
    for members in ground_truth:
        yield " ".join(str(v + 1) for v in sorted(members))
