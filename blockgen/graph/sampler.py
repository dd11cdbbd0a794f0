"""Skip-sampled edge generation into a deduplicating adjacency structure.

Each cluster is scanned as an ordered sequence of members; for every member
the later members are skip-sampled with the cluster's probability. A final
pass scans the whole vertex universe with the global probability. Edges
proposed more than once are stored once; in overlapping mode the number of
cluster proposals per stored edge is kept as its intersection count.
"""

import logging
from collections.abc import Sequence

import numpy as np

from blockgen.graph.skip_sampling import skip_sample

log = logging.getLogger(__name__)


class AdjacencyBuilder:
    """Scratch adjacency sets for an undirected simple graph under construction.

    Intersection counts are keyed by (smaller id, larger id) and only
    recorded for edges proposed by a cluster scan.
    """

    def __init__(self, num_nodes: int, track_intersections: bool = False) -> None:
        self.num_nodes = num_nodes
        self.track_intersections = track_intersections
        self.neighbor_sets: list[set[int]] = [set() for _ in range(num_nodes)]
        self.intersections: dict[tuple[int, int], int] = {}
        self.num_edges = 0

    def has_edge(self, u: int, v: int) -> bool:
        return v in self.neighbor_sets[u]

    def add_edge(self, u: int, v: int, from_cluster: bool = False) -> bool:
        """Insert the undirected edge (u, v) unless already present.

        Returns:
            True if the edge was new, False if it was a repeat proposal.
        """
        if u == v:
            raise ValueError(f"Self-loop proposed at vertex {u}")
        key = (u, v) if u < v else (v, u)
        is_new = v not in self.neighbor_sets[u]
        if is_new:
            self.neighbor_sets[u].add(v)
            self.neighbor_sets[v].add(u)
            self.num_edges += 1
        if from_cluster and self.track_intersections:
            self.intersections[key] = self.intersections.get(key, 0) + 1
        return is_new

    def intersection_count(self, u: int, v: int) -> int:
        key = (u, v) if u < v else (v, u)
        return self.intersections.get(key, 0)

    def to_csr(self) -> tuple[np.ndarray, np.ndarray]:
        """Freeze into CSR arrays with each row's neighbor ids sorted ascending.

        Returns:
            (indptr, indices) as int64 arrays.
        """
        degrees = np.fromiter(
            (len(s) for s in self.neighbor_sets),
            dtype=np.int64,
            count=self.num_nodes,
        )
        indptr = np.zeros(self.num_nodes + 1, dtype=np.int64)
        np.cumsum(degrees, out=indptr[1:])
        indices = np.empty(int(indptr[-1]), dtype=np.int64)
        for v, neighbors in enumerate(self.neighbor_sets):
            indices[indptr[v] : indptr[v + 1]] = sorted(neighbors)
        return indptr, indices


def sample_cluster_edges(
    builder: AdjacencyBuilder,
    members: Sequence[int] | np.ndarray,
    p: float,
    rng: np.random.Generator,
) -> tuple[int, int]:
    """Skip-sample the member pairs of one cluster with edge probability p.

    Args:
        builder: Adjacency under construction.
        members: Cluster members in scan order (a range or an id array).
        p: Edge probability inside this cluster.
        rng: numpy random Generator for reproducibility.

    Returns:
        (proposed, repeated): number of sampled pairs and how many of them
        were already present in the adjacency.
    """
    size = len(members)
    proposed = 0
    repeated = 0
    for i in range(size):
        u = int(members[i])
        for j in skip_sample(i + 1, size, p, rng):
            proposed += 1
            if not builder.add_edge(u, int(members[j]), from_cluster=True):
                repeated += 1
    return proposed, repeated


def sample_global_edges(
    builder: AdjacencyBuilder, p: float, rng: np.random.Generator
) -> int:
    """Skip-sample background edges over all vertex pairs.

    Pairs that already carry an intra-cluster edge are left as they are.

    Returns:
        Number of new edges added.
    """
    added = 0
    n = builder.num_nodes
    for u in range(n):
        for v in skip_sample(u + 1, n, p, rng):
            if not builder.has_edge(u, v):
                builder.add_edge(u, v)
                added += 1
    return added


def realized_density(num_edges: int, size: int) -> float:
    """Fraction of the size * (size - 1) / 2 pairs that carry an edge."""
    pairs = size * (size - 1) // 2
    return num_edges / pairs if pairs > 0 else 0.0
