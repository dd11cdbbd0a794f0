"""Reproducibility infrastructure: seeded generators and determinism checks."""

from blockgen.reproducibility.seed import (
    graph_fingerprint,
    make_rng,
    verify_generation_determinism,
)

__all__ = [
    "graph_fingerprint",
    "make_rng",
    "verify_generation_determinism",
]
