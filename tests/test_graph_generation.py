"""Tests for block model graph generation, validation and determinism."""

from dataclasses import replace
from unittest.mock import patch

import numpy as np
import pytest

from blockgen.config import (
    ANCHOR_CONFIG,
    ConfigurationError,
    GeneratorConfig,
    OverlapConfig,
)
from blockgen.graph.block_model import (
    generate_disjoint,
    generate_graph,
    generate_overlapping,
)
from blockgen.graph.errors import InternalConsistencyError
from blockgen.graph.sampler import AdjacencyBuilder, sample_cluster_edges
from blockgen.graph.types import GenerationStats, Graph, GraphAndGroundTruth
from blockgen.graph.validation import (
    check_cluster_densities,
    check_structure,
    validate_generated,
)

# Cluster sizes are drawn from the half-open range [min, max), so
# min_cluster_size=10, max_cluster_size=11 pins every cluster at 10 vertices
# (min=9 would also allow size 9).
SCENARIO_CONFIG = GeneratorConfig(
    num_clusters=3,
    fraction_global_edges=0.1,
    min_prob_inside_cluster=0.3,
    max_prob_inside_cluster=0.7,
    min_cluster_size=10,
    max_cluster_size=11,
    seed=7,
)

OVERLAP_CONFIG = replace(
    ANCHOR_CONFIG,
    overlap=OverlapConfig(max_clusters_for_a_vertex=3, average_clusters_per_vertex=1.5),
)


def assert_simple_undirected(graph: Graph) -> None:
    assert len(graph.indices) == 2 * graph.num_edges
    for v in range(graph.n):
        nbrs = graph.neighbors(v)
        assert np.all(np.diff(nbrs) > 0), f"Row {v} not strictly ascending"
        assert v not in nbrs, f"Self-loop at {v}"
    adj = graph.adjacency
    assert (adj != adj.T).nnz == 0
    assert adj.diagonal().sum() == 0


@pytest.fixture(scope="module")
def disjoint_result() -> GraphAndGroundTruth:
    return generate_disjoint(ANCHOR_CONFIG, np.random.default_rng(ANCHOR_CONFIG.seed))


@pytest.fixture(scope="module")
def overlapping_result() -> GraphAndGroundTruth:
    return generate_overlapping(OVERLAP_CONFIG, np.random.default_rng(OVERLAP_CONFIG.seed))


class TestDisjointGeneration:
    """Single-membership block model."""

    def test_graph_is_simple_and_undirected(self, disjoint_result):
        assert_simple_undirected(disjoint_result.graph)

    def test_ground_truth_partitions_vertices(self, disjoint_result):
        graph, clusters = disjoint_result.graph, disjoint_result.ground_truth
        assert len(clusters) == ANCHOR_CONFIG.num_clusters
        assert sum(len(c) for c in clusters) == graph.n
        assert frozenset().union(*clusters) == frozenset(range(graph.n))

    def test_clusters_are_contiguous(self, disjoint_result):
        start = 0
        for members in disjoint_result.ground_truth:
            assert sorted(members) == list(range(start, start + len(members)))
            start += len(members)

    def test_cluster_sizes_in_range(self, disjoint_result):
        for members in disjoint_result.ground_truth:
            assert ANCHOR_CONFIG.min_cluster_size <= len(members)
            assert len(members) < ANCHOR_CONFIG.max_cluster_size

    def test_unweighted_by_default(self, disjoint_result):
        assert disjoint_result.graph.weights is None
        assert not disjoint_result.graph.is_weighted

    def test_intra_cluster_edges_dominate(self, disjoint_result):
        graph, clusters = disjoint_result.graph, disjoint_result.ground_truth
        cluster_of = np.empty(graph.n, dtype=np.int64)
        for k, members in enumerate(clusters):
            cluster_of[list(members)] = k
        rows = np.repeat(np.arange(graph.n), np.diff(graph.indptr))
        inter = np.count_nonzero(cluster_of[rows] != cluster_of[graph.indices]) // 2
        assert inter / graph.num_edges < 0.3


class TestScenario:
    """Three clusters of exactly ten vertices."""

    def test_vertex_count_and_clusters(self):
        result = generate_graph(SCENARIO_CONFIG)
        assert result.graph.n == 30
        assert [len(c) for c in result.ground_truth] == [10, 10, 10]
        assert_simple_undirected(result.graph)

    def test_edge_count_reproducible(self):
        a = generate_graph(SCENARIO_CONFIG, np.random.default_rng(123))
        b = generate_graph(SCENARIO_CONFIG, np.random.default_rng(123))
        assert a.graph.num_edges == b.graph.num_edges
        assert np.array_equal(a.graph.indices, b.graph.indices)
        assert a.ground_truth == b.ground_truth


class TestOverlappingGeneration:
    """Mixed-membership block model."""

    def test_graph_is_simple_and_undirected(self, overlapping_result):
        assert_simple_undirected(overlapping_result.graph)

    def test_membership_bounded(self, overlapping_result):
        counts = np.zeros(overlapping_result.graph.n, dtype=np.int64)
        for members in overlapping_result.ground_truth:
            counts[list(members)] += 1
        assert counts.max() <= OVERLAP_CONFIG.overlap.max_clusters_for_a_vertex

    def test_cluster_sizes_match_sampled_sizes(self):
        captured: list[GenerationStats] = []
        result = generate_overlapping(
            OVERLAP_CONFIG, np.random.default_rng(3), on_stats=captured.append
        )
        assert len(captured) == 1
        assert tuple(len(c) for c in result.ground_truth) == captured[0].cluster_sizes

    def test_universe_size(self, overlapping_result):
        total = sum(len(c) for c in overlapping_result.ground_truth)
        assert overlapping_result.graph.n == int(np.ceil(total / 1.5))

    def test_repeated_proposals_counted(self):
        captured: list[GenerationStats] = []
        result = generate_overlapping(
            OVERLAP_CONFIG, np.random.default_rng(11), on_stats=captured.append
        )
        stats = captured[0]
        histogram = stats.intersection_histogram
        assert len(histogram) == OVERLAP_CONFIG.overlap.max_clusters_for_a_vertex + 1
        assert sum(histogram) == result.graph.num_edges
        # every proposal beyond the first for an edge is a repeat
        proposals = sum(k * c for k, c in enumerate(histogram))
        assert proposals == stats.num_intra_cluster_edges
        assert stats.num_repeated_intra_cluster_edges == proposals - sum(histogram[1:])

    def test_requires_overlap_config(self):
        with pytest.raises(ValueError, match="overlap"):
            generate_overlapping(ANCHOR_CONFIG, np.random.default_rng(0))

    def test_dispatch_on_overlap(self):
        a = generate_graph(OVERLAP_CONFIG, np.random.default_rng(9))
        b = generate_overlapping(OVERLAP_CONFIG, np.random.default_rng(9))
        assert np.array_equal(a.graph.indices, b.graph.indices)


class TestDeterminism:
    """Fixed seed and config give byte-identical output."""

    @pytest.mark.parametrize("config", [ANCHOR_CONFIG, OVERLAP_CONFIG])
    def test_same_seed_same_graph(self, config):
        g1 = generate_graph(config, np.random.default_rng(config.seed))
        g2 = generate_graph(config, np.random.default_rng(config.seed))
        assert np.array_equal(g1.graph.indptr, g2.graph.indptr)
        assert np.array_equal(g1.graph.indices, g2.graph.indices)
        assert g1.ground_truth == g2.ground_truth

    def test_default_rng_uses_config_seed(self):
        g1 = generate_graph(ANCHOR_CONFIG)
        g2 = generate_graph(ANCHOR_CONFIG, np.random.default_rng(ANCHOR_CONFIG.seed))
        assert np.array_equal(g1.graph.indices, g2.graph.indices)

    def test_different_seed_different_graph(self):
        g1 = generate_graph(ANCHOR_CONFIG, np.random.default_rng(1))
        g2 = generate_graph(ANCHOR_CONFIG, np.random.default_rng(2))
        assert not (
            len(g1.graph.indices) == len(g2.graph.indices)
            and np.array_equal(g1.graph.indices, g2.graph.indices)
        )


class TestClusterDensity:
    """Realized intra-cluster density tracks the configured probability."""

    def test_mean_density_within_tolerance_over_trials(self):
        rng = np.random.default_rng(42)
        for p in (0.1, 0.5, 0.9):
            densities = []
            for _ in range(20):
                builder = AdjacencyBuilder(40)
                proposed, repeated = sample_cluster_edges(builder, range(40), p, rng)
                assert repeated == 0
                densities.append(proposed / (40 * 39 / 2))
            assert abs(np.mean(densities) - p) < 0.1

    def test_stats_report_densities(self):
        captured: list[GenerationStats] = []
        generate_disjoint(
            ANCHOR_CONFIG, np.random.default_rng(0), on_stats=captured.append
        )
        stats = captured[0]
        assert len(stats.realized_densities) == ANCHOR_CONFIG.num_clusters
        deviations = np.abs(
            np.array(stats.realized_densities) - np.array(stats.target_densities)
        )
        assert deviations.mean() < 0.1
        assert 0 < stats.fraction_global_edges < 1


class TestValidation:
    """Invariant checks and the all-or-nothing failure policy."""

    def test_structure_accepts_valid_graph(self):
        indptr = np.array([0, 1, 3, 4])
        indices = np.array([1, 0, 2, 1])
        assert check_structure(3, 2, indptr, indices) == []

    def test_structure_detects_asymmetry(self):
        indptr = np.array([0, 1, 2, 2])
        indices = np.array([1, 2])
        errors = check_structure(3, 1, indptr, indices)
        assert any("not symmetric" in e for e in errors)

    def test_structure_detects_edge_count_mismatch(self):
        indptr = np.array([0, 1, 2])
        indices = np.array([1, 0])
        errors = check_structure(2, 2, indptr, indices)
        assert any("Edge count mismatch" in e for e in errors)

    def test_structure_detects_self_loop_and_order(self):
        indptr = np.array([0, 2, 3])
        indices = np.array([1, 0, 0])
        errors = check_structure(2, 1, indptr, indices)
        assert any("Self-loops" in e for e in errors)
        assert any("ascending" in e for e in errors)

    def test_density_check(self):
        errors = check_cluster_densities((0.5, 0.5), (0.55, 0.75), 0.1)
        assert len(errors) == 1 and errors[0].startswith("Cluster 1")

    def test_density_deviation_warns_by_default(self, caplog):
        indptr = np.array([0, 1, 2])
        indices = np.array([1, 0])
        validate_generated(indptr=indptr, indices=indices, n=2, num_edges=1,
                           target_densities=(0.5,), realized_densities=(0.9,))
        assert "Density outside tolerance" in caplog.text

    def test_density_deviation_raises_when_strict(self):
        indptr = np.array([0, 1, 2])
        indices = np.array([1, 0])
        with pytest.raises(InternalConsistencyError, match="Cluster 0"):
            validate_generated(
                2, 1, indptr, indices, (0.5,), (0.9,), strict_density=True
            )

    def test_validation_failure_aborts_generation(self):
        with patch(
            "blockgen.graph.block_model.validate_generated",
            side_effect=InternalConsistencyError("Simulated failure"),
        ):
            with pytest.raises(InternalConsistencyError, match="Simulated"):
                generate_graph(ANCHOR_CONFIG)

    def test_infeasible_global_probability_fails_before_sampling(self):
        cfg = GeneratorConfig(
            num_clusters=1,
            fraction_global_edges=0.99,
            min_prob_inside_cluster=0.5,
            max_prob_inside_cluster=0.9,
            min_cluster_size=3,
            max_cluster_size=4,
        )

        class NoDrawRng:
            def __getattr__(self, name):
                raise AssertionError(f"rng.{name} used before validation")

        with pytest.raises(ConfigurationError):
            generate_graph(cfg, NoDrawRng())
