"""Reading and writing analysis configs as JSON."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dacite import from_dict, Config as DaciteConfig

from spectragraph.config.analysis import AnalysisConfig

log = logging.getLogger(__name__)

# Unknown keys and mistyped values are errors; JSON lists become tuples (tags).
_DACITE_CONFIG = DaciteConfig(cast=[tuple], check_types=True, strict=True)


def config_to_dict(config: AnalysisConfig) -> dict[str, Any]:
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> AnalysisConfig:
    """Build an AnalysisConfig from nested dicts; missing keys take defaults.

    Raises:
        dacite.DaciteError: On unknown keys or wrongly typed values.
        ValueError: If the values fail AnalysisConfig validation.
    """
    return from_dict(data_class=AnalysisConfig, data=d, config=_DACITE_CONFIG)


def config_to_json(config: AnalysisConfig) -> str:
    """Pretty JSON with sorted keys, stable across runs."""
    return json.dumps(config_to_dict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> AnalysisConfig:
    return config_from_dict(json.loads(json_str))


def load_config(path: str | Path) -> AnalysisConfig:
    """Read an AnalysisConfig from a JSON file."""
    path = Path(path)
    config = config_from_json(path.read_text())
    log.info("Config loaded from %s", path)
    return config


def save_config(config: AnalysisConfig, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config_to_json(config) + "\n")
    log.info("Config written to %s", path)
