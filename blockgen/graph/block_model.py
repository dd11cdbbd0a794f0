"""Block model graph generation with disjoint or overlapping clusters.

Pipeline per call:
1. Derive the global edge probability from the configuration
2. Sample cluster sizes and assign vertices to clusters
3. Skip-sample intra-cluster edges, then global edges
4. Freeze the adjacency into sorted CSR arrays
5. Assign edge weights (weighted configs only)
6. Validate invariants, report diagnostics, return graph + ground truth

The random generator is borrowed from the caller and consumed in a fixed
order, so a fixed seed reproduces the output exactly.
"""

import logging
from collections.abc import Callable

import numpy as np
from scipy.sparse.csgraph import connected_components

from blockgen.config.generator import GeneratorConfig
from blockgen.graph.clusters import (
    assign_disjoint_clusters,
    assign_overlapping_clusters,
    sample_cluster_sizes,
)
from blockgen.graph.probability import global_probability, probability_inside_cluster
from blockgen.graph.sampler import (
    AdjacencyBuilder,
    realized_density,
    sample_cluster_edges,
    sample_global_edges,
)
from blockgen.graph.types import (
    GenerationStats,
    Graph,
    GraphAndGroundTruth,
)
from blockgen.graph.validation import validate_generated
from blockgen.graph.weights import (
    assign_disjoint_weights,
    assign_overlapping_weights,
    intersection_histogram,
)

log = logging.getLogger(__name__)

StatsCallback = Callable[[GenerationStats], None]


def _report(stats: GenerationStats, on_stats: StatsCallback | None) -> None:
    log.info(
        "Generated graph: nodes=%d, edges=%d, intra-cluster edges=%d, "
        "global edges=%d, fraction global edges=%.4f",
        stats.num_nodes,
        stats.num_edges,
        stats.num_intra_cluster_edges,
        stats.num_global_edges,
        stats.fraction_global_edges,
    )
    if stats.num_repeated_intra_cluster_edges:
        log.info(
            "Repeated intra-cluster edges: %d",
            stats.num_repeated_intra_cluster_edges,
        )
    if stats.intersection_histogram:
        log.info(
            "Histogram of intersection sizes: %s",
            ", ".join(
                f"{k} -> {c}" for k, c in enumerate(stats.intersection_histogram)
            ),
        )
    if on_stats is not None:
        on_stats(stats)


def _count_components(n: int, indptr: np.ndarray, indices: np.ndarray) -> int:
    graph = Graph(n=n, num_edges=len(indices) // 2, indptr=indptr, indices=indices)
    n_components, _ = connected_components(graph.adjacency, directed=False)
    return int(n_components)


def generate_disjoint(
    config: GeneratorConfig,
    rng: np.random.Generator,
    on_stats: StatsCallback | None = None,
) -> GraphAndGroundTruth:
    """Single-membership block model: clusters partition the vertex set.

    Args:
        config: Generator configuration.
        rng: numpy random Generator, borrowed for the whole run.
        on_stats: Optional callback receiving diagnostic counters.

    Returns:
        GraphAndGroundTruth with consecutive-id clusters.

    Raises:
        ConfigurationError: If the derived global probability is infeasible.
        InternalConsistencyError: If the sampled graph violates an invariant.
    """
    p_global = global_probability(config)

    sizes = sample_cluster_sizes(config, rng)
    clusters = assign_disjoint_clusters(sizes)
    num_nodes = int(sizes.sum())
    cluster_of = np.repeat(np.arange(config.num_clusters), sizes)

    builder = AdjacencyBuilder(num_nodes)
    targets: list[float] = []
    realized: list[float] = []
    num_intra = 0
    for members in clusters:
        p = probability_inside_cluster(config, len(members))
        proposed, _ = sample_cluster_edges(builder, members, p, rng)
        num_intra += proposed
        targets.append(p)
        realized.append(realized_density(proposed, len(members)))

    num_global = sample_global_edges(builder, p_global, rng)
    indptr, indices = builder.to_csr()
    num_edges = builder.num_edges
    del builder

    validate_generated(
        num_nodes,
        num_edges,
        indptr,
        indices,
        tuple(targets),
        tuple(realized),
        tolerance=config.density_tolerance,
        strict_density=config.strict_density,
    )

    weights = None
    if config.weighted:
        weights = assign_disjoint_weights(
            indptr, indices, cluster_of, config.weights, rng
        )

    graph = Graph(
        n=num_nodes,
        num_edges=num_edges,
        indptr=indptr,
        indices=indices,
        weights=weights,
    )
    ground_truth = tuple(frozenset(members) for members in clusters)

    _report(
        GenerationStats(
            num_nodes=num_nodes,
            num_edges=num_edges,
            num_intra_cluster_edges=num_intra,
            num_repeated_intra_cluster_edges=0,
            num_global_edges=num_global,
            global_probability=p_global,
            cluster_sizes=tuple(int(s) for s in sizes),
            target_densities=tuple(targets),
            realized_densities=tuple(realized),
            num_components=_count_components(num_nodes, indptr, indices),
        ),
        on_stats,
    )
    return GraphAndGroundTruth(graph=graph, ground_truth=ground_truth)


def generate_overlapping(
    config: GeneratorConfig,
    rng: np.random.Generator,
    on_stats: StatsCallback | None = None,
) -> GraphAndGroundTruth:
    """Mixed-membership block model: vertices may belong to several clusters.

    Edges proposed by more than one cluster are stored once and remember how
    many clusters proposed them; weighted graphs sum that many weight draws.

    Args:
        config: Generator configuration with config.overlap set.
        rng: numpy random Generator, borrowed for the whole run.
        on_stats: Optional callback receiving diagnostic counters.

    Returns:
        GraphAndGroundTruth with possibly overlapping clusters.

    Raises:
        ValueError: If config.overlap is None.
        ConfigurationError: If the derived global probability is infeasible.
        MembershipSamplingError: If cluster membership cannot be completed.
        InternalConsistencyError: If the sampled graph violates an invariant.
    """
    overlap = config.overlap
    if overlap is None:
        raise ValueError("generate_overlapping requires config.overlap")

    p_global = global_probability(config)

    sizes = sample_cluster_sizes(config, rng)
    num_nodes, cluster_members, _ = assign_overlapping_clusters(
        sizes,
        overlap.max_clusters_for_a_vertex,
        overlap.average_clusters_per_vertex,
        rng,
        max_membership_draws=overlap.max_membership_draws,
    )

    builder = AdjacencyBuilder(num_nodes, track_intersections=True)
    targets: list[float] = []
    realized: list[float] = []
    num_intra = 0
    num_repeated = 0
    for members in cluster_members:
        p = probability_inside_cluster(config, len(members))
        proposed, repeated = sample_cluster_edges(builder, members, p, rng)
        num_intra += proposed
        num_repeated += repeated
        targets.append(p)
        realized.append(realized_density(proposed, len(members)))

    num_global = sample_global_edges(builder, p_global, rng)
    indptr, indices = builder.to_csr()
    num_edges = builder.num_edges
    intersections = builder.intersections
    del builder

    validate_generated(
        num_nodes,
        num_edges,
        indptr,
        indices,
        tuple(targets),
        tuple(realized),
        tolerance=config.density_tolerance,
        strict_density=config.strict_density,
    )

    weights = None
    if config.weighted:
        weights = assign_overlapping_weights(
            indptr, indices, intersections, config.weights, rng
        )

    graph = Graph(
        n=num_nodes,
        num_edges=num_edges,
        indptr=indptr,
        indices=indices,
        weights=weights,
    )
    ground_truth = tuple(
        frozenset(int(v) for v in members) for members in cluster_members
    )

    histogram = intersection_histogram(
        indptr, intersections, overlap.max_clusters_for_a_vertex
    )
    _report(
        GenerationStats(
            num_nodes=num_nodes,
            num_edges=num_edges,
            num_intra_cluster_edges=num_intra,
            num_repeated_intra_cluster_edges=num_repeated,
            num_global_edges=num_global,
            global_probability=p_global,
            cluster_sizes=tuple(int(s) for s in sizes),
            target_densities=tuple(targets),
            realized_densities=tuple(realized),
            intersection_histogram=tuple(int(c) for c in histogram),
            num_components=_count_components(num_nodes, indptr, indices),
        ),
        on_stats,
    )
    return GraphAndGroundTruth(graph=graph, ground_truth=ground_truth)


def generate_graph(
    config: GeneratorConfig,
    rng: np.random.Generator | None = None,
    on_stats: StatsCallback | None = None,
) -> GraphAndGroundTruth:
    """Generate a block model graph in the mode selected by config.overlap.

    Args:
        config: Generator configuration.
        rng: Generator to draw from. Defaults to one seeded with config.seed.
        on_stats: Optional callback receiving diagnostic counters.

    Returns:
        GraphAndGroundTruth owned by the caller.
    """
    if rng is None:
        rng = np.random.default_rng(config.seed)
    if config.is_overlapping:
        return generate_overlapping(config, rng, on_stats)
    return generate_disjoint(config, rng, on_stats)
