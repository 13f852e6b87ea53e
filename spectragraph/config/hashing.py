"""Short, stable identifiers for analysis configurations."""

import hashlib
import json
from dataclasses import asdict, is_dataclass
from typing import Any

# Top-level AnalysisConfig fields that only annotate a run
LABEL_FIELDS = ("description", "tags")


def _canonical_json(payload: dict[str, Any]) -> bytes:
    return json.dumps(
        payload, sort_keys=True, ensure_ascii=True, separators=(",", ":")
    ).encode("utf-8")


def config_hash(config: Any, exclude_fields: tuple[str, ...] = ()) -> str:
    """SHA-256 of a config dataclass, truncated to 16 hex characters.

    Args:
        config: AnalysisConfig or any of its sub-configs.
        exclude_fields: Top-level field names left out of the digest.

    Raises:
        TypeError: If config is not a dataclass instance.
    """
    if not is_dataclass(config) or isinstance(config, type):
        raise TypeError(f"Expected a config dataclass, got {type(config).__name__}")
    payload = {k: v for k, v in asdict(config).items() if k not in exclude_fields}
    return hashlib.sha256(_canonical_json(payload)).hexdigest()[:16]


def analysis_hash(config: Any) -> str:
    """Hash of the parameters that affect results.

    Configs that differ only in description or tags share this hash, so
    reports from relabelled runs can be matched up.
    """
    return config_hash(config, exclude_fields=LABEL_FIELDS)
