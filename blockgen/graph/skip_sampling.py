"""Geometric skip-sampling of Bernoulli trials.

Scanning indices start, start+1, ..., stop-1 and accepting each with
probability p is equivalent to jumping over a Geometric(p) number of
failures between successive acceptances. Work is proportional to the
number of accepted indices rather than to stop - start.
"""

from collections.abc import Iterator

import numpy as np


def next_gap(p: float, rng: np.random.Generator) -> int:
    """Number of failures before the next success of a Bernoulli(p) sequence."""
    # numpy's geometric counts trials (support starts at 1)
    return int(rng.geometric(p)) - 1


def skip_sample(
    start: int, stop: int, p: float, rng: np.random.Generator
) -> Iterator[int]:
    """Yield the accepted indices in [start, stop), each accepted with probability p.

    Args:
        start: First candidate index.
        stop: One past the last candidate index.
        p: Per-index acceptance probability in (0, 1].
        rng: numpy random Generator, borrowed for the duration of the scan.

    Yields:
        Accepted indices in increasing order.
    """
    if not 0 < p <= 1:
        raise ValueError(f"Acceptance probability must be in (0, 1], got {p}")
    position = start
    while position < stop:
        position += next_gap(p, rng)
        if position < stop:
            yield position
            position += 1
