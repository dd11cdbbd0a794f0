"""Expected-size calculations and edge probabilities for the block model.

The per-cluster edge probability falls linearly with cluster size:

    p(c) = p_min + (c_max - c) / (c_max - c_min) * (p_max - p_min)

Cluster sizes are treated as Uniform[c_min, c_max], which gives closed forms
for the expected vertex count and the expected number of intra-cluster edges.
The background probability is then solved so that, in expectation, the
requested fraction of all edges are global edges.
"""

import logging

from blockgen.config.generator import ConfigurationError, GeneratorConfig
from blockgen.graph.errors import InternalConsistencyError

log = logging.getLogger(__name__)


def expected_vertices(config: GeneratorConfig) -> float:
    """Mean vertex count: num_clusters * (min_cluster_size + max_cluster_size) / 2."""
    return config.num_clusters * (config.min_cluster_size + config.max_cluster_size) / 2


def _edge_integral_antiderivative(config: GeneratorConfig, c: float) -> float:
    """Antiderivative of p(c) * c * (c - 1) * delta_c with respect to c."""
    delta_p = config.max_prob_inside_cluster - config.min_prob_inside_cluster
    delta_c = config.max_cluster_size - config.min_cluster_size
    c_max = config.max_cluster_size
    # p(c) * delta_c = a - delta_p * c
    a = config.min_prob_inside_cluster * delta_c + c_max * delta_p
    return (a + delta_p) * c**3 / 3 - delta_p * c**4 / 4 - a * c**2 / 2


def expected_intra_cluster_edges(config: GeneratorConfig) -> float:
    """Expected number of intra-cluster edges over all clusters.

    Integrates p(c) * c * (c - 1) / 2 against the uniform cluster-size
    density. In overlapping mode, pairs shared by several clusters are
    counted once per cluster, so the estimate is an upper bound there.

    Raises:
        InternalConsistencyError: If the integral is not positive.
    """
    delta_c = config.max_cluster_size - config.min_cluster_size
    integral = _edge_integral_antiderivative(
        config, config.max_cluster_size
    ) - _edge_integral_antiderivative(config, config.min_cluster_size)
    if integral <= 0:
        raise InternalConsistencyError(
            f"Expected intra-cluster edge integral is {integral}, must be > 0"
        )
    return config.num_clusters * integral / (delta_c * delta_c) / 2


def probability_inside_cluster(config: GeneratorConfig, cluster_size: int) -> float:
    """Edge probability for a cluster of the given size.

    The smallest allowed cluster gets max_prob_inside_cluster, the largest
    gets min_prob_inside_cluster.
    """
    if not config.min_cluster_size <= cluster_size <= config.max_cluster_size:
        raise ValueError(
            f"cluster_size {cluster_size} outside "
            f"[{config.min_cluster_size}, {config.max_cluster_size}]"
        )
    span = config.max_cluster_size - config.min_cluster_size
    weight = (config.max_cluster_size - cluster_size) / span
    return config.min_prob_inside_cluster + weight * (
        config.max_prob_inside_cluster - config.min_prob_inside_cluster
    )


def global_probability(config: GeneratorConfig) -> float:
    """Per-pair probability of a background edge.

    Solves f = G / (G + I) for G, the expected number of global edges, and
    spreads G over the n * (n - 1) / 2 vertex pairs.

    Raises:
        ConfigurationError: If the solved probability is not in (0, 1).
    """
    f = config.fraction_global_edges
    n = expected_vertices(config)
    intra = expected_intra_cluster_edges(config)
    p = f * intra * 2 / ((1.0 - f) * n * (n - 1))
    if not 0 < p < 1:
        raise ConfigurationError(
            f"fraction_global_edges={f} requires a global edge probability "
            f"of {p:.4f}, which is not in (0, 1)"
        )
    log.debug(
        "Global probability %.6f (expected vertices=%.1f, intra edges=%.1f)",
        p,
        n,
        intra,
    )
    return p
