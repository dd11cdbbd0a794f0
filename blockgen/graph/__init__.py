"""Block model graph generation with ground-truth clusters."""

from blockgen.graph.block_model import (
    generate_disjoint,
    generate_graph,
    generate_overlapping,
)
from blockgen.graph.clusters import (
    assign_disjoint_clusters,
    assign_overlapping_clusters,
    sample_cluster_sizes,
)
from blockgen.graph.errors import (
    GraphGenerationError,
    InternalConsistencyError,
    MembershipSamplingError,
)
from blockgen.graph.metis import MetisLines, format_weight, ground_truth_lines
from blockgen.graph.probability import (
    expected_intra_cluster_edges,
    expected_vertices,
    global_probability,
    probability_inside_cluster,
)
from blockgen.graph.sampler import (
    AdjacencyBuilder,
    sample_cluster_edges,
    sample_global_edges,
)
from blockgen.graph.skip_sampling import next_gap, skip_sample
from blockgen.graph.types import (
    GenerationStats,
    Graph,
    GraphAndGroundTruth,
    GroundTruth,
)
from blockgen.graph.validation import (
    check_cluster_densities,
    check_structure,
    validate_generated,
)
from blockgen.graph.weights import (
    MIN_WEIGHT,
    background_weight,
    sample_edge_weight,
)

__all__ = [
    "AdjacencyBuilder",
    "GenerationStats",
    "Graph",
    "GraphAndGroundTruth",
    "GraphGenerationError",
    "GroundTruth",
    "InternalConsistencyError",
    "MIN_WEIGHT",
    "MembershipSamplingError",
    "MetisLines",
    "assign_disjoint_clusters",
    "assign_overlapping_clusters",
    "background_weight",
    "check_cluster_densities",
    "check_structure",
    "expected_intra_cluster_edges",
    "expected_vertices",
    "format_weight",
    "generate_disjoint",
    "generate_graph",
    "generate_overlapping",
    "global_probability",
    "ground_truth_lines",
    "next_gap",
    "probability_inside_cluster",
    "sample_cluster_edges",
    "sample_cluster_sizes",
    "sample_edge_weight",
    "sample_global_edges",
    "skip_sample",
    "validate_generated",
]
