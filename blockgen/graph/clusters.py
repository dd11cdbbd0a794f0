"""Cluster size sampling and vertex-to-cluster assignment.

Disjoint mode lays clusters out as consecutive vertex-id ranges. Overlapping
mode (mixed membership) draws each cluster's members uniformly at random
from a vertex universe sized so that vertices belong to
``average_clusters_per_vertex`` clusters on average, capped at
``max_clusters_for_a_vertex`` memberships per vertex.
"""

import logging
import math

import numpy as np

from blockgen.config.generator import GeneratorConfig
from blockgen.graph.errors import MembershipSamplingError

log = logging.getLogger(__name__)


def sample_cluster_sizes(
    config: GeneratorConfig, rng: np.random.Generator
) -> np.ndarray:
    """Draw one size per cluster, uniform on [min_cluster_size, max_cluster_size).

    Returns:
        int64 array of shape (num_clusters,).
    """
    return rng.integers(
        config.min_cluster_size,
        config.max_cluster_size,
        size=config.num_clusters,
        dtype=np.int64,
    )


def assign_disjoint_clusters(sizes: np.ndarray) -> list[range]:
    """Partition [0, sum(sizes)) into consecutive ranges, one per cluster."""
    stops = np.cumsum(sizes)
    starts = stops - sizes
    return [range(int(a), int(b)) for a, b in zip(starts, stops)]


def overlapping_universe_size(
    sizes: np.ndarray, average_clusters_per_vertex: float
) -> int:
    """Number of vertices needed for the requested average membership."""
    return math.ceil(int(sizes.sum()) / average_clusters_per_vertex)


def assign_overlapping_clusters(
    sizes: np.ndarray,
    max_clusters_for_a_vertex: int,
    average_clusters_per_vertex: float,
    rng: np.random.Generator,
    max_membership_draws: int = 10_000,
) -> tuple[int, list[np.ndarray], list[set[int]]]:
    """Assign vertices to overlapping clusters by rejection sampling.

    For every member slot of every cluster, vertices are drawn uniformly
    until one is found that is not yet in the cluster and has spare
    membership capacity.

    Args:
        sizes: Sampled size of each cluster.
        max_clusters_for_a_vertex: Membership cap per vertex.
        average_clusters_per_vertex: Target mean memberships per vertex (> 1).
        rng: numpy random Generator for reproducibility.
        max_membership_draws: Rejection-sampling budget per member slot.

    Returns:
        (num_nodes, cluster_members, vertex_clusters) where cluster_members[k]
        is an int64 array of the distinct members of cluster k in draw order
        and vertex_clusters[v] is the set of clusters containing v.

    Raises:
        MembershipSamplingError: If the sizes cannot fit under the membership
            cap, or a slot exhausts its draw budget.
    """
    num_nodes = overlapping_universe_size(sizes, average_clusters_per_vertex)
    total_slots = int(sizes.sum())

    if total_slots > num_nodes * max_clusters_for_a_vertex:
        raise MembershipSamplingError(
            f"{total_slots} membership slots cannot fit into {num_nodes} vertices "
            f"with at most {max_clusters_for_a_vertex} clusters each"
        )
    largest = int(sizes.max())
    if largest > num_nodes:
        raise MembershipSamplingError(
            f"Cluster of size {largest} cannot be drawn from {num_nodes} vertices"
        )

    vertex_clusters: list[set[int]] = [set() for _ in range(num_nodes)]
    cluster_members: list[np.ndarray] = []

    for cluster_id, size in enumerate(sizes):
        members = np.empty(int(size), dtype=np.int64)
        for slot in range(int(size)):
            for _ in range(max_membership_draws):
                candidate = int(rng.integers(num_nodes))
                clusters = vertex_clusters[candidate]
                if (
                    cluster_id not in clusters
                    and len(clusters) < max_clusters_for_a_vertex
                ):
                    break
            else:
                raise MembershipSamplingError(
                    f"Cluster {cluster_id}: no eligible vertex for slot {slot} "
                    f"after {max_membership_draws} draws "
                    f"(num_nodes={num_nodes}, "
                    f"max_clusters_for_a_vertex={max_clusters_for_a_vertex})"
                )
            members[slot] = candidate
            clusters.add(cluster_id)
        cluster_members.append(members)

    log.debug(
        "Assigned %d membership slots across %d vertices and %d clusters",
        total_slots,
        num_nodes,
        len(cluster_members),
    )
    return num_nodes, cluster_members, vertex_clusters
