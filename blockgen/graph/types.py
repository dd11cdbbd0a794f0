"""Graph data structures for block model generation output."""

from dataclasses import dataclass, field

import numpy as np
import scipy.sparse

from blockgen.graph.metis import MetisLines


@dataclass(frozen=True)
class Graph:
    """Immutable undirected simple graph in CSR form.

    Row v of (indptr, indices) lists the neighbors of v in ascending order;
    every edge appears in both endpoint rows. Uses frozen=True but omits
    slots=True since numpy arrays don't interact well with __slots__.
    """

    n: int  # number of vertices
    num_edges: int  # number of undirected edges
    indptr: np.ndarray  # int64 array of length n + 1
    indices: np.ndarray  # int64 array of length 2 * num_edges
    weights: np.ndarray | None = None  # float64, aligned with indices

    @property
    def is_weighted(self) -> bool:
        return self.weights is not None

    def neighbors(self, v: int) -> np.ndarray:
        return self.indices[self.indptr[v] : self.indptr[v + 1]]

    def neighbor_weights(self, v: int) -> np.ndarray:
        if self.weights is None:
            raise ValueError("Graph is unweighted")
        return self.weights[self.indptr[v] : self.indptr[v + 1]]

    def degree(self, v: int) -> int:
        return int(self.indptr[v + 1] - self.indptr[v])

    @property
    def adjacency(self) -> scipy.sparse.csr_matrix:
        """Symmetric sparse adjacency; data holds weights (1.0 when unweighted)."""
        data = (
            self.weights
            if self.weights is not None
            else np.ones(len(self.indices), dtype=np.float64)
        )
        return scipy.sparse.csr_matrix(
            (data, self.indices, self.indptr), shape=(self.n, self.n)
        )

    def iter_lines(self, decimals: int = 3) -> MetisLines:
        """Restartable per-vertex text lines with 1-indexed neighbor ids."""
        return MetisLines(self.indptr, self.indices, self.weights, decimals)


# One frozenset of vertex ids per cluster.
GroundTruth = tuple[frozenset[int], ...]


@dataclass(frozen=True)
class GraphAndGroundTruth:
    """A generated graph together with the clusters that produced it."""

    graph: Graph
    ground_truth: GroundTruth


@dataclass(frozen=True)
class GenerationStats:
    """Diagnostic counters from one generation run. Not part of the output contract."""

    num_nodes: int
    num_edges: int
    num_intra_cluster_edges: int  # cluster proposals, repeats included
    num_repeated_intra_cluster_edges: int
    num_global_edges: int
    global_probability: float
    cluster_sizes: tuple[int, ...]
    target_densities: tuple[float, ...]
    realized_densities: tuple[float, ...]
    intersection_histogram: tuple[int, ...] = field(default_factory=tuple)
    num_components: int = 0

    @property
    def fraction_global_edges(self) -> float:
        return self.num_global_edges / self.num_edges if self.num_edges else 0.0
