"""Generator configuration system with frozen, hashable, serializable dataclasses."""

from blockgen.config.generator import (
    ConfigurationError,
    GeneratorConfig,
    OverlapConfig,
    WeightConfig,
)
from blockgen.config.defaults import ANCHOR_CONFIG, WEIGHTED_ANCHOR_CONFIG
from blockgen.config.hashing import config_hash, model_config_hash, full_config_hash
from blockgen.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "ConfigurationError",
    "GeneratorConfig",
    "OverlapConfig",
    "WeightConfig",
    "ANCHOR_CONFIG",
    "WEIGHTED_ANCHOR_CONFIG",
    "config_hash",
    "model_config_hash",
    "full_config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
