"""Generator configuration dataclasses — all frozen and slotted for immutability."""

from dataclasses import dataclass


class ConfigurationError(ValueError):
    """Raised when generator parameters are out of bounds or inconsistent."""


MIN_WEIGHT = 0.01  # floor for sampled edge weights
# Background weight sits 1.5 standard deviations (mode / 4) below the lower mode.
BACKGROUND_WEIGHT_FACTOR = 1 - 1.5 / 4


@dataclass(frozen=True, slots=True)
class WeightConfig:
    """Bimodal edge weight parameters (mixture of two normals, std = mode / 4)."""

    higher_weight_mode: float = 0.2
    lower_weight_mode: float = 0.05
    fraction_higher_weight: float = 0.2  # share of draws from the higher mode

    def __post_init__(self) -> None:
        if self.lower_weight_mode <= 0:
            raise ConfigurationError(
                f"lower_weight_mode must be > 0, got {self.lower_weight_mode}"
            )
        if self.higher_weight_mode <= 0:
            raise ConfigurationError(
                f"higher_weight_mode must be > 0, got {self.higher_weight_mode}"
            )
        if self.fraction_higher_weight <= 0:
            raise ConfigurationError(
                f"fraction_higher_weight must be > 0, "
                f"got {self.fraction_higher_weight}"
            )
        if self.higher_weight_mode <= self.lower_weight_mode:
            raise ConfigurationError(
                f"higher_weight_mode ({self.higher_weight_mode}) must be > "
                f"lower_weight_mode ({self.lower_weight_mode})"
            )
        if self.lower_weight_mode * BACKGROUND_WEIGHT_FACTOR < MIN_WEIGHT:
            raise ConfigurationError(
                f"lower_weight_mode ({self.lower_weight_mode}) puts the background "
                f"weight below the minimum weight {MIN_WEIGHT}; it must be "
                f">= {MIN_WEIGHT / BACKGROUND_WEIGHT_FACTOR}"
            )


@dataclass(frozen=True, slots=True)
class OverlapConfig:
    """Mixed-membership parameters. Presence on the config selects overlapping mode."""

    max_clusters_for_a_vertex: int = 3
    average_clusters_per_vertex: float = 1.5
    max_membership_draws: int = 10_000  # per cluster slot before giving up

    def __post_init__(self) -> None:
        if self.max_clusters_for_a_vertex < 1:
            raise ConfigurationError(
                f"max_clusters_for_a_vertex must be >= 1, "
                f"got {self.max_clusters_for_a_vertex}"
            )
        if self.average_clusters_per_vertex <= 1.0:
            raise ConfigurationError(
                f"average_clusters_per_vertex must be > 1.0, "
                f"got {self.average_clusters_per_vertex}"
            )
        if self.average_clusters_per_vertex > self.max_clusters_for_a_vertex:
            raise ConfigurationError(
                f"average_clusters_per_vertex ({self.average_clusters_per_vertex}) "
                f"cannot exceed max_clusters_for_a_vertex "
                f"({self.max_clusters_for_a_vertex})"
            )
        if self.max_membership_draws < 1:
            raise ConfigurationError(
                f"max_membership_draws must be >= 1, "
                f"got {self.max_membership_draws}"
            )


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Top-level block model configuration.

    All fields are frozen and typed. Bounds are checked in __post_init__
    so an invalid configuration fails before any random draw is made.
    """

    num_clusters: int = 10
    fraction_global_edges: float = 0.1
    min_prob_inside_cluster: float = 0.1
    max_prob_inside_cluster: float = 0.3
    min_cluster_size: int = 20
    max_cluster_size: int = 50
    weighted: bool = False
    weights: WeightConfig | None = None
    overlap: OverlapConfig | None = None  # None = disjoint clusters
    density_tolerance: float = 0.1
    strict_density: bool = False  # raise instead of warn on density drift
    seed: int = 42
    description: str = ""

    def __post_init__(self) -> None:
        if self.num_clusters < 1:
            raise ConfigurationError(
                f"num_clusters must be >= 1, got {self.num_clusters}"
            )
        if not 0 < self.fraction_global_edges < 1:
            raise ConfigurationError(
                f"fraction_global_edges must be in (0, 1), "
                f"got {self.fraction_global_edges}"
            )
        for name in ("min_prob_inside_cluster", "max_prob_inside_cluster"):
            value = getattr(self, name)
            if not 0 < value < 1:
                raise ConfigurationError(f"{name} must be in (0, 1), got {value}")
        if self.max_prob_inside_cluster <= self.min_prob_inside_cluster:
            raise ConfigurationError(
                f"max_prob_inside_cluster ({self.max_prob_inside_cluster}) must be "
                f"> min_prob_inside_cluster ({self.min_prob_inside_cluster})"
            )
        for name in ("min_cluster_size", "max_cluster_size"):
            value = getattr(self, name)
            if value <= 2:
                raise ConfigurationError(f"{name} must be > 2, got {value}")
        if self.max_cluster_size <= self.min_cluster_size:
            raise ConfigurationError(
                f"max_cluster_size ({self.max_cluster_size}) must be "
                f"> min_cluster_size ({self.min_cluster_size})"
            )
        if self.weighted and self.weights is None:
            raise ConfigurationError(
                "weighted=True requires weight parameters (weights=WeightConfig(...))"
            )
        if not 0 < self.density_tolerance <= 1:
            raise ConfigurationError(
                f"density_tolerance must be in (0, 1], got {self.density_tolerance}"
            )

    @property
    def is_overlapping(self) -> bool:
        return self.overlap is not None
