"""Short, stable identifiers for generator configurations.

A config is flattened with dataclasses.asdict, dumped as compact JSON with
sorted keys and digested with SHA-256. Nested WeightConfig / OverlapConfig
blocks (or their absence, as null) are part of the digest.
"""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from blockgen.config.generator import GeneratorConfig

HASH_LENGTH = 16

# Fields that label a run without changing the random graph model.
RUN_ONLY_FIELDS = ("seed", "description")


def config_hash(config: Any, exclude: tuple[str, ...] = ()) -> str:
    """First HASH_LENGTH hex characters of the SHA-256 of a config.

    ``exclude`` names top-level fields left out of the digest.
    """
    fields = {k: v for k, v in asdict(config).items() if k not in exclude}
    serialized = json.dumps(fields, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def model_config_hash(config: GeneratorConfig) -> str:
    """Hash of the block model parameters only.

    Two configs differing only in seed or description sample the same
    random graph model, so they share this hash.
    """
    return config_hash(config, exclude=RUN_ONLY_FIELDS)


def full_config_hash(config: GeneratorConfig) -> str:
    """Hash identifying one concrete run, seed included."""
    return config_hash(config)
