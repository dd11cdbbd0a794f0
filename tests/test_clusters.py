"""Tests for cluster size sampling and vertex assignment."""

import numpy as np
import pytest

from blockgen.config import ANCHOR_CONFIG, GeneratorConfig
from blockgen.graph.clusters import (
    assign_disjoint_clusters,
    assign_overlapping_clusters,
    overlapping_universe_size,
    sample_cluster_sizes,
)
from blockgen.graph.errors import MembershipSamplingError


class ZeroRng:
    """Deterministic stand-in that always draws vertex 0."""

    def integers(self, *args, **kwargs) -> int:
        return 0


class TestClusterSizes:
    def test_sizes_in_half_open_range(self):
        rng = np.random.default_rng(42)
        sizes = sample_cluster_sizes(ANCHOR_CONFIG, rng)
        assert sizes.shape == (ANCHOR_CONFIG.num_clusters,)
        assert sizes.min() >= ANCHOR_CONFIG.min_cluster_size
        assert sizes.max() < ANCHOR_CONFIG.max_cluster_size

    def test_unit_range_gives_fixed_size(self):
        cfg = GeneratorConfig(num_clusters=5, min_cluster_size=10, max_cluster_size=11)
        sizes = sample_cluster_sizes(cfg, np.random.default_rng(0))
        assert sizes.tolist() == [10] * 5


class TestDisjointAssignment:
    def test_contiguous_partition(self):
        clusters = assign_disjoint_clusters(np.array([3, 5, 4]))
        assert clusters == [range(0, 3), range(3, 8), range(8, 12)]

    def test_partition_covers_all_vertices_once(self):
        sizes = sample_cluster_sizes(ANCHOR_CONFIG, np.random.default_rng(1))
        clusters = assign_disjoint_clusters(sizes)
        flat = [v for c in clusters for v in c]
        assert flat == list(range(int(sizes.sum())))


class TestOverlappingAssignment:
    def test_universe_size_rounds_up(self):
        assert overlapping_universe_size(np.array([10, 11]), 2.0) == 11

    def test_memberships_bounded_and_sizes_exact(self):
        rng = np.random.default_rng(42)
        sizes = np.array([30, 25, 40, 35, 20])
        num_nodes, members, vertex_clusters = assign_overlapping_clusters(
            sizes, 3, 1.5, rng
        )
        assert num_nodes == overlapping_universe_size(sizes, 1.5)
        for k, m in enumerate(members):
            assert len(m) == sizes[k]
            assert len(set(m.tolist())) == sizes[k]
            assert m.min() >= 0 and m.max() < num_nodes
        assert max(len(c) for c in vertex_clusters) <= 3
        for v, clusters in enumerate(vertex_clusters):
            for k in clusters:
                assert v in members[k]

    def test_deterministic_for_seed(self):
        sizes = np.array([15, 15, 15])
        a = assign_overlapping_clusters(sizes, 2, 1.5, np.random.default_rng(5))
        b = assign_overlapping_clusters(sizes, 2, 1.5, np.random.default_rng(5))
        assert all(np.array_equal(x, y) for x, y in zip(a[1], b[1]))

    def test_infeasible_capacity_fails_fast(self):
        with pytest.raises(MembershipSamplingError, match="cannot fit"):
            assign_overlapping_clusters(
                np.array([10, 10]), 1, 1.5, np.random.default_rng(0)
            )

    def test_cluster_larger_than_universe_fails_fast(self):
        with pytest.raises(MembershipSamplingError, match="cannot be drawn"):
            assign_overlapping_clusters(
                np.array([10, 3]), 5, 4.0, np.random.default_rng(0)
            )

    def test_draw_budget_exhaustion(self):
        with pytest.raises(MembershipSamplingError, match="after 50 draws"):
            assign_overlapping_clusters(
                np.array([5, 5, 5]), 2, 1.5, ZeroRng(), max_membership_draws=50
            )
