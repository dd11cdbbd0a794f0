"""Anchor configuration — single source of truth for default generator parameters."""

from blockgen.config.generator import GeneratorConfig, WeightConfig

# Anchor config: 10 disjoint clusters of 20-49 vertices, intra-cluster
# probability 0.1-0.3, 10% global edges, seed=42.
ANCHOR_CONFIG = GeneratorConfig()

# Weighted variant using the weight modes of the reference command-line driver.
WEIGHTED_ANCHOR_CONFIG = GeneratorConfig(
    weighted=True,
    weights=WeightConfig(
        higher_weight_mode=0.2,
        lower_weight_mode=0.05,
        fraction_higher_weight=0.2,
    ),
)
