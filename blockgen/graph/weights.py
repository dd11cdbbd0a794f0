"""Edge weights drawn from a two-component normal mixture.

Each component is centred on its mode with standard deviation mode / 4.
Intra-cluster ties draw from the mixture; background ties get a fixed
weight 1.5 standard deviations below the lower mode. In overlapping mode an
edge proposed by k clusters sums k independent draws.

Weights are assigned once per unordered edge, from the row of its larger
endpoint, and mirrored into the row of the smaller endpoint.
"""

import logging
from collections.abc import Callable

import numpy as np

from blockgen.config.generator import (
    BACKGROUND_WEIGHT_FACTOR,
    MIN_WEIGHT,
    WeightConfig,
)
from blockgen.graph.errors import InternalConsistencyError

log = logging.getLogger(__name__)


def sample_edge_weight(weights: WeightConfig, rng: np.random.Generator) -> float:
    """One draw from the bimodal weight mixture, floored at MIN_WEIGHT."""
    if rng.random() < weights.fraction_higher_weight:
        mode = weights.higher_weight_mode
    else:
        mode = weights.lower_weight_mode
    value = float(rng.normal(mode, mode / 4))
    if value < MIN_WEIGHT:
        value = MIN_WEIGHT
    return value


def background_weight(weights: WeightConfig) -> float:
    """Fixed weight for edges no cluster proposed.

    WeightConfig guarantees this is at least MIN_WEIGHT and below the lower mode.
    """
    return weights.lower_weight_mode * BACKGROUND_WEIGHT_FACTOR


def mirror_slot(indptr: np.ndarray, indices: np.ndarray, row: int, col: int) -> int:
    """Position of col inside row's sorted neighbor slice.

    Raises:
        InternalConsistencyError: If col is not a neighbor of row.
    """
    start, stop = int(indptr[row]), int(indptr[row + 1])
    offset = int(np.searchsorted(indices[start:stop], col))
    if offset >= stop - start or indices[start + offset] != col:
        raise InternalConsistencyError(
            f"Edge ({col}, {row}) has no mirrored slot in row {row}"
        )
    return start + offset


def _assign(
    indptr: np.ndarray,
    indices: np.ndarray,
    edge_weight: Callable[[int, int], float],
) -> np.ndarray:
    """Fill a weight array aligned with indices, one call per unordered edge."""
    out = np.zeros(len(indices), dtype=np.float64)
    for u in range(len(indptr) - 1):
        for slot in range(int(indptr[u]), int(indptr[u + 1])):
            v = int(indices[slot])
            if v >= u:
                # rows are sorted, the rest of this row is mirrored later
                break
            w = edge_weight(u, v)
            out[slot] = w
            out[mirror_slot(indptr, indices, v, u)] = w
    return out


def assign_disjoint_weights(
    indptr: np.ndarray,
    indices: np.ndarray,
    cluster_of: np.ndarray,
    weights: WeightConfig,
    rng: np.random.Generator,
) -> np.ndarray:
    """Weights for a disjoint-cluster graph.

    Args:
        indptr: CSR row pointers.
        indices: CSR neighbor ids, sorted within each row.
        cluster_of: Cluster id of every vertex.
        weights: Mixture parameters.
        rng: numpy random Generator for reproducibility.

    Returns:
        float64 array aligned with indices.
    """
    low = background_weight(weights)

    def edge_weight(u: int, v: int) -> float:
        if cluster_of[u] == cluster_of[v]:
            return sample_edge_weight(weights, rng)
        return low

    return _assign(indptr, indices, edge_weight)


def assign_overlapping_weights(
    indptr: np.ndarray,
    indices: np.ndarray,
    intersections: dict[tuple[int, int], int],
    weights: WeightConfig,
    rng: np.random.Generator,
) -> np.ndarray:
    """Weights for an overlapping-cluster graph.

    An edge proposed by k clusters gets the sum of k mixture draws; an edge
    no cluster proposed gets the background weight.

    Args:
        indptr: CSR row pointers.
        indices: CSR neighbor ids, sorted within each row.
        intersections: Proposal count per (smaller id, larger id) edge.
        weights: Mixture parameters.
        rng: numpy random Generator for reproducibility.

    Returns:
        float64 array aligned with indices.
    """
    low = background_weight(weights)

    def edge_weight(u: int, v: int) -> float:
        count = intersections.get((v, u), 0)  # v < u
        if count == 0:
            return low
        return sum(sample_edge_weight(weights, rng) for _ in range(count))

    return _assign(indptr, indices, edge_weight)


def intersection_histogram(
    indptr: np.ndarray,
    intersections: dict[tuple[int, int], int],
    max_count: int,
) -> np.ndarray:
    """Count of unordered edges by intersection count, index 0..max_count.

    Background edges (no cluster proposal) land in bin 0.
    """
    num_edges = int(indptr[-1]) // 2
    histogram = np.zeros(max_count + 1, dtype=np.int64)
    for count in intersections.values():
        histogram[min(count, max_count)] += 1
    histogram[0] = num_edges - len(intersections)
    return histogram
