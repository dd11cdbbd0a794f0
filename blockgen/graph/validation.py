"""Post-generation invariant checks.

Structural checks (edge count symmetry, sorted rows, no self-loops,
symmetric adjacency) must always hold; a failure is a sampler defect.
Per-cluster density checks compare realized against configured
probability and are statistical, so by default a deviation is only logged.
"""

import logging

import numpy as np
import scipy.sparse

from blockgen.graph.errors import InternalConsistencyError

log = logging.getLogger(__name__)


def check_structure(
    n: int, num_edges: int, indptr: np.ndarray, indices: np.ndarray
) -> list[str]:
    """Validate CSR arrays against undirected simple graph invariants.

    Checks (cheapest first):
    1. Stored neighbor entries == 2 * num_edges
    2. Rows strictly ascending (sorted, no duplicate neighbors)
    3. No self-loops
    4. Symmetric adjacency

    Returns:
        List of error strings (empty = valid graph).
    """
    errors: list[str] = []

    if 2 * num_edges != len(indices):
        errors.append(
            f"Edge count mismatch: {num_edges} edges but "
            f"{len(indices)} neighbor entries"
        )

    rows = np.repeat(np.arange(n), np.diff(indptr))
    same_row = rows[1:] == rows[:-1]
    if np.any(np.diff(indices)[same_row] <= 0):
        errors.append("Neighbor lists not strictly ascending")

    loops = int(np.count_nonzero(rows == indices))
    if loops:
        errors.append(f"Self-loops detected: {loops}")

    adj = scipy.sparse.csr_matrix(
        (np.ones(len(indices), dtype=np.int8), indices, indptr), shape=(n, n)
    )
    asymmetric = (adj != adj.T).nnz
    if asymmetric:
        errors.append(f"Adjacency not symmetric: {asymmetric} unmatched entries")

    return errors


def check_cluster_densities(
    target: tuple[float, ...] | list[float],
    realized: tuple[float, ...] | list[float],
    tolerance: float,
) -> list[str]:
    """List clusters whose realized edge density is not within tolerance of target."""
    errors: list[str] = []
    for cluster_id, (p, actual) in enumerate(zip(target, realized)):
        if abs(actual - p) >= tolerance:
            errors.append(
                f"Cluster {cluster_id}: assigned prob. {p:.4f}, "
                f"actual prob. {actual:.4f}"
            )
    return errors


def validate_generated(
    n: int,
    num_edges: int,
    indptr: np.ndarray,
    indices: np.ndarray,
    target_densities: tuple[float, ...],
    realized_densities: tuple[float, ...],
    tolerance: float = 0.1,
    strict_density: bool = False,
) -> None:
    """Run all checks on a freshly sampled graph.

    Raises:
        InternalConsistencyError: On any structural error, or on density
            deviations when strict_density is set.
    """
    errors = check_structure(n, num_edges, indptr, indices)
    if errors:
        raise InternalConsistencyError("; ".join(errors))

    density_errors = check_cluster_densities(
        target_densities, realized_densities, tolerance
    )
    if density_errors:
        if strict_density:
            raise InternalConsistencyError("; ".join(density_errors))
        for message in density_errors:
            log.warning("Density outside tolerance %.2f: %s", tolerance, message)
