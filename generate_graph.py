#!/usr/bin/env python3
"""Entry point for generating block model benchmark graphs.

Chains generation and output into a single executable command:
config loading -> graph generation -> adjacency lines -> ground truth.

Usage:
    python generate_graph.py 10 0.1 0.1 0.3 20 50 > graph.txt
    python generate_graph.py --config config.json --output graph.txt
    python generate_graph.py --config config.json --overlapping 3 1.5 --weighted
    python generate_graph.py --config config.json --dry-run
"""

import argparse
import logging
import sys
import time
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path

from dacite import DaciteError

from blockgen.config import (
    ANCHOR_CONFIG,
    ConfigurationError,
    GeneratorConfig,
    OverlapConfig,
    WeightConfig,
    config_from_json,
    full_config_hash,
    model_config_hash,
)
from blockgen.graph import GraphGenerationError, ground_truth_lines

log = logging.getLogger(__name__)

POSITIONAL_FIELDS = (
    ("num_clusters", int),
    ("fraction_global_edges", float),
    ("min_prob_inside_cluster", float),
    ("max_prob_inside_cluster", float),
    ("min_cluster_size", int),
    ("max_cluster_size", int),
)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time to stderr."""
    print(f"=== {name} ===", file=sys.stderr)
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.1f}s", file=sys.stderr)
    log.info("Completed: %s in %.1fs", name, elapsed)


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the config file, positional parameters and flags into one config.

    Raises:
        ConfigurationError: If the merged parameters are invalid.
    """
    if args.config is not None:
        config = config_from_json(Path(args.config).read_text())
    else:
        config = ANCHOR_CONFIG

    if args.params:
        if len(args.params) != len(POSITIONAL_FIELDS):
            raise ConfigurationError(
                f"Expected {len(POSITIONAL_FIELDS)} positional parameters "
                f"({', '.join(name for name, _ in POSITIONAL_FIELDS)}), "
                f"got {len(args.params)}"
            )
        overrides = {
            name: cast(value)
            for (name, cast), value in zip(POSITIONAL_FIELDS, args.params)
        }
        config = replace(config, **overrides)

    if args.seed is not None:
        config = replace(config, seed=args.seed)
    if args.weighted and not config.weighted:
        config = replace(
            config, weighted=True, weights=config.weights or WeightConfig()
        )
    if args.overlapping is not None:
        max_clusters, average = args.overlapping
        config = replace(
            config,
            overlap=OverlapConfig(
                max_clusters_for_a_vertex=int(max_clusters),
                average_clusters_per_vertex=float(average),
            ),
        )
    return config


def describe(config: GeneratorConfig) -> None:
    """Print a config summary to stderr."""
    err = sys.stderr
    print(f"Config hash: {full_config_hash(config)}", file=err)
    print(f"Model hash:  {model_config_hash(config)}", file=err)
    print(
        f"Clusters:    {config.num_clusters} of size "
        f"[{config.min_cluster_size}, {config.max_cluster_size}), "
        f"p_inside=[{config.min_prob_inside_cluster}, "
        f"{config.max_prob_inside_cluster}]",
        file=err,
    )
    print(f"Global:      fraction={config.fraction_global_edges}", file=err)
    if config.overlap is not None:
        print(
            f"Overlap:     max_clusters_for_a_vertex="
            f"{config.overlap.max_clusters_for_a_vertex}, average="
            f"{config.overlap.average_clusters_per_vertex}",
            file=err,
        )
    if config.weights is not None and config.weighted:
        print(
            f"Weights:     higher={config.weights.higher_weight_mode}, "
            f"lower={config.weights.lower_weight_mode}, "
            f"fraction_higher={config.weights.fraction_higher_weight}",
            file=err,
        )
    print(f"Seed:        {config.seed}", file=err)


def run(config: GeneratorConfig, output: str | None, ground_truth: str | None) -> None:
    """Generate one graph and write its adjacency lines and ground truth."""
    from blockgen.graph import generate_graph
    from blockgen.reproducibility import graph_fingerprint, make_rng

    with stage_timer("Graph Generation"):
        result = generate_graph(config, make_rng(config.seed))
        log.info("Fingerprint: %s", graph_fingerprint(result))

    with stage_timer("Write Graph"):
        lines = result.graph.iter_lines()
        if output is None:
            for line in lines:
                print(line)
        else:
            with open(output, "w") as f:
                for line in lines:
                    f.write(line + "\n")
            log.info("Graph written to %s", output)

    if ground_truth is not None:
        with stage_timer("Write Ground Truth"):
            with open(ground_truth, "w") as f:
                for line in ground_truth_lines(result.ground_truth):
                    f.write(line + "\n")
            log.info("Ground truth written to %s", ground_truth)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate a block model graph with ground-truth clusters"
    )
    parser.add_argument(
        "params",
        nargs="*",
        metavar="PARAM",
        help=(
            "Optional positional overrides: numClusters fractionGlobalEdges "
            "minProbInsideCluster maxProbInsideCluster minClusterSize "
            "maxClusterSize"
        ),
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to generator config JSON file",
    )
    parser.add_argument("--seed", type=int, default=None, help="Override seed")
    parser.add_argument(
        "--overlapping",
        nargs=2,
        metavar=("MAX_CLUSTERS", "AVERAGE"),
        default=None,
        help="Generate overlapping clusters with the given membership cap and mean",
    )
    parser.add_argument(
        "--weighted",
        action="store_true",
        help="Attach bimodal edge weights (default modes unless set in config)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Adjacency output path (default: stdout)",
    )
    parser.add_argument(
        "--ground-truth",
        type=str,
        default=None,
        help="Write one line of 1-indexed member ids per cluster to this path",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and print the config without generating",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config is not None and not Path(args.config).exists():
        print(f"Error: config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    try:
        config = build_config(args)
    except (ValueError, DaciteError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    describe(config)

    if args.dry_run:
        print("\n[dry-run] Config validated successfully. Exiting.", file=sys.stderr)
        return

    try:
        run(config, args.output, args.ground_truth)
    except (ConfigurationError, GraphGenerationError):
        log.exception("Generation failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
