"""Tests for the analysis configuration system."""

import json
import re

import pytest
from dacite import DaciteError
from dataclasses import FrozenInstanceError, replace

from spectragraph.config import (
    AnalysisConfig,
    ClusteringConfig,
    NumericsConfig,
    RelevanceConfig,
    DEFAULT_CONFIG,
    analysis_hash,
    config_hash,
    config_from_dict,
    config_to_dict,
    config_to_json,
    config_from_json,
    load_config,
    save_config,
)


class TestDefaultConfig:
    """DEFAULT_CONFIG has the documented values."""

    def test_default_config_values(self):
        assert DEFAULT_CONFIG.numerics.eigenvalue_error == 1e-10
        assert DEFAULT_CONFIG.numerics.max_power_iterations == 20
        assert DEFAULT_CONFIG.relevance.enabled
        assert DEFAULT_CONFIG.relevance.categories == 5
        assert DEFAULT_CONFIG.clustering.method == "greedy"
        assert DEFAULT_CONFIG.clustering.exact_max_vertices == 12
        assert DEFAULT_CONFIG.shortest_paths_source == 0
        assert DEFAULT_CONFIG.tags == ()


class TestConfigImmutability:
    """Frozen dataclasses prevent mutation."""

    def test_config_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_CONFIG.description = "changed"  # type: ignore[misc]

    def test_numerics_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_CONFIG.numerics.max_power_iterations = 5  # type: ignore[misc]


class TestConfigRoundTrip:
    """JSON serialization round-trip preserves identity."""

    def test_config_round_trip_hash(self):
        restored = config_from_json(config_to_json(DEFAULT_CONFIG))
        assert config_hash(DEFAULT_CONFIG) == config_hash(restored)
        assert restored == DEFAULT_CONFIG

    def test_tags_restored_as_tuple(self):
        cfg = replace(DEFAULT_CONFIG, tags=("karate", "small"))
        restored = config_from_json(config_to_json(cfg))
        assert restored.tags == ("karate", "small")

    def test_dict_round_trip(self):
        cfg = replace(
            DEFAULT_CONFIG,
            clustering=ClusteringConfig(method="exact", exact_max_vertices=8),
            shortest_paths_source=None,
        )
        assert config_from_dict(config_to_dict(cfg)) == cfg

    def test_partial_json_uses_defaults(self):
        restored = config_from_json('{"clustering": {"method": "exact"}}')
        assert restored.clustering.method == "exact"
        assert restored.relevance == RelevanceConfig()


class TestConfigHashing:
    """Hashing behavior for analysis identity."""

    def test_config_hash_deterministic(self):
        assert config_hash(DEFAULT_CONFIG) == config_hash(AnalysisConfig())

    def test_config_hash_is_hex_string(self):
        h = analysis_hash(DEFAULT_CONFIG)
        assert len(h) == 16
        assert re.match(r"^[0-9a-f]{16}$", h)

    def test_analysis_hash_ignores_labels(self):
        cfg2 = replace(DEFAULT_CONFIG, description="run 2", tags=("x",))
        assert analysis_hash(DEFAULT_CONFIG) == analysis_hash(cfg2)
        assert config_hash(DEFAULT_CONFIG) != config_hash(cfg2)

    def test_different_configs_different_hash(self):
        cfg2 = replace(DEFAULT_CONFIG, relevance=RelevanceConfig(categories=3))
        assert analysis_hash(DEFAULT_CONFIG) != analysis_hash(cfg2)

    def test_sub_config_hash(self):
        assert config_hash(NumericsConfig()) == config_hash(DEFAULT_CONFIG.numerics)


class TestConfigValidation:
    """Cross-parameter validation catches invalid configs."""

    def test_validation_eigenvalue_error(self):
        with pytest.raises(ValueError, match="eigenvalue_error"):
            AnalysisConfig(numerics=NumericsConfig(eigenvalue_error=0.0))

    def test_validation_max_power_iterations(self):
        with pytest.raises(ValueError, match="max_power_iterations"):
            AnalysisConfig(numerics=NumericsConfig(max_power_iterations=0))

    def test_validation_categories(self):
        with pytest.raises(ValueError, match="categories"):
            AnalysisConfig(relevance=RelevanceConfig(categories=0))

    def test_validation_clustering_method(self):
        with pytest.raises(ValueError, match="clustering method"):
            AnalysisConfig(clustering=ClusteringConfig(method="spectral"))

    def test_validation_source(self):
        with pytest.raises(ValueError, match="shortest_paths_source"):
            AnalysisConfig(shortest_paths_source=-1)

    def test_valid_config_passes(self):
        cfg = AnalysisConfig(clustering=ClusteringConfig(method="exact"))
        assert cfg.clustering.method == "exact"


class TestSerializationStrict:
    """Strict mode rejects unknown keys and wrong types."""

    def test_serialization_strict_rejects_extra_keys(self):
        data = json.loads(config_to_json(DEFAULT_CONFIG))
        data["unknown_field"] = "sneaky"
        with pytest.raises(DaciteError):
            config_from_json(json.dumps(data))

    def test_wrong_type_rejected(self):
        data = json.loads(config_to_json(DEFAULT_CONFIG))
        data["relevance"]["categories"] = "five"
        with pytest.raises(DaciteError):
            config_from_json(json.dumps(data))


class TestConfigFiles:
    """load_config / save_config on disk."""

    def test_save_then_load(self, tmp_path):
        cfg = replace(DEFAULT_CONFIG, description="karate club", tags=("small",))
        path = tmp_path / "nested" / "config.json"
        save_config(cfg, path)
        assert load_config(path) == cfg

    def test_load_rejects_invalid_values(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"relevance": {"categories": 0}}')
        with pytest.raises(ValueError, match="categories"):
            load_config(path)

    def test_hash_rejects_non_dataclass(self):
        with pytest.raises(TypeError):
            config_hash({"numerics": {}})
