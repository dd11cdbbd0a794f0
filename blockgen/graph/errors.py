"""Exceptions raised while generating block model graphs."""


class GraphGenerationError(Exception):
    """Raised when a graph cannot be generated from the given configuration."""


class InternalConsistencyError(GraphGenerationError):
    """Raised when a generated structure violates a sampler invariant.

    Symmetry mismatches, a non-positive expected-edge integral or a missing
    mirrored weight slot all point at a sampler or parameter defect.
    """


class MembershipSamplingError(GraphGenerationError):
    """Raised when overlapping cluster membership cannot be completed."""
