"""
Unit tests for make_parallel.project_config module.

Tests:
- Configuration dataclasses
- JSON serialization/deserialization
- Config file loading
- Config merging and application to global constants
"""

import json
import logging
import tempfile
from pathlib import Path

import pytest

from make_parallel import config as cfg
from make_parallel.project_config import (
    CONFIG_FILENAME,
    CalculatorConfig,
    ExtractionConfig,
    LoggingConfig,
    ProjectConfig,
    apply_config_to_globals,
    create_sample_config,
    find_config_file,
    load_config,
    merge_configs,
)


class TestSectionDefaults:
    """Tests for section dataclass defaults."""

    def test_calculator_defaults_match_constants(self):
        config = CalculatorConfig()
        assert config.parallel_tolerance_rad == cfg.PARALLEL_TOLERANCE_RAD
        assert config.parallel_check_tolerance_deg == cfg.PARALLEL_CHECK_TOLERANCE_DEG

    def test_extraction_defaults(self):
        config = ExtractionConfig()
        assert config.mep_categories == list(cfg.MEP_CATEGORY_NAMES)
        assert config.curve_midpoint_parameter == 0.5

    def test_mep_categories_not_shared(self):
        """Each config owns its own category list."""
        a = ExtractionConfig()
        b = ExtractionConfig()
        a.mep_categories.append("OST_Walls")
        assert "OST_Walls" not in b.mep_categories

    def test_logging_defaults(self):
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.json_file is None


class TestProjectConfig:
    """Tests for ProjectConfig serialization."""

    def test_to_dict(self):
        data = ProjectConfig().to_dict()
        assert set(data) == {"calculator", "extraction", "logging"}
        assert data["calculator"]["parallel_tolerance_rad"] == 0.001

    def test_from_dict_partial(self):
        """Missing sections keep their defaults."""
        config = ProjectConfig.from_dict({"calculator": {"parallel_tolerance_rad": 0.01}})
        assert config.calculator.parallel_tolerance_rad == 0.01
        assert config.calculator.parallel_check_tolerance_deg == 0.1
        assert config.logging.level == "INFO"

    def test_unknown_keys_ignored(self):
        config = ProjectConfig.from_dict({
            "calculator": {"bogus": 1},
            "rendering": {"format": "A3"},
        })
        assert not hasattr(config.calculator, "bogus")

    def test_unknown_mep_category_rejected(self):
        with pytest.raises(ValueError, match="OST_Bogus"):
            ProjectConfig.from_dict({"extraction": {"mep_categories": ["OST_PipeCurves", "OST_Bogus"]}})

    def test_from_json(self):
        config = ProjectConfig.from_json('{"logging": {"level": "debug"}}')
        assert config.log_level == logging.DEBUG

    def test_invalid_level_defaults_to_info(self):
        config = ProjectConfig.from_dict({"logging": {"level": "chatty"}})
        assert config.log_level == logging.INFO


class TestFindConfigFile:
    """Tests for config file discovery."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "team.json"
        path.write_text("{}", encoding="utf-8")
        assert find_config_file(explicit_config=path) == path

    def test_next_to_model(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("{}", encoding="utf-8")
        found = find_config_file(model_path=tmp_path / "model.json")
        assert found == tmp_path / CONFIG_FILENAME

    def test_missing_explicit_path_falls_through(self, tmp_path):
        found = find_config_file(explicit_config=tmp_path / "absent.json")
        # May find one in the current or home directory
        assert found is None or found.name == CONFIG_FILENAME


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_from_explicit_file(self):
        """Test loading from explicit config file."""
        with tempfile.NamedTemporaryFile(suffix='.json', delete=False, mode='w') as f:
            json.dump({'calculator': {'parallel_tolerance_rad': 0.002}}, f)
            temp_path = f.name

        try:
            config = load_config(explicit_config=temp_path)
            assert config.calculator.parallel_tolerance_rad == 0.002
        finally:
            Path(temp_path).unlink(missing_ok=True)

    def test_load_invalid_json_returns_defaults(self, tmp_path):
        """Invalid JSON falls back to defaults with an error log."""
        path = tmp_path / "broken.json"
        path.write_text('not valid json {{{', encoding='utf-8')

        config = load_config(explicit_config=path)

        assert config.calculator.parallel_tolerance_rad == 0.001

    def test_invalid_category_returns_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"extraction": {"mep_categories": ["OST_Nope"]}}), encoding='utf-8')

        config = load_config(explicit_config=path)

        assert config.extraction.mep_categories == list(cfg.MEP_CATEGORY_NAMES)


class TestMergeConfigs:
    """Tests for merge_configs function."""

    def test_override_non_default_values(self):
        base = ProjectConfig()
        override = ProjectConfig()
        override.calculator.parallel_tolerance_rad = 0.05

        merged = merge_configs(base, override)

        assert merged.calculator.parallel_tolerance_rad == 0.05

    def test_default_values_not_overridden(self):
        base = ProjectConfig()
        base.logging.level = "WARNING"
        override = ProjectConfig()

        merged = merge_configs(base, override)

        assert merged.logging.level == "WARNING"

    def test_inputs_untouched(self):
        base = ProjectConfig()
        override = ProjectConfig()
        override.extraction.mep_categories = ["OST_PipeCurves"]

        merge_configs(base, override)

        assert base.extraction.mep_categories == list(cfg.MEP_CATEGORY_NAMES)


class TestApplyConfigToGlobals:
    """Tests for apply_config_to_globals."""

    def test_constants_overwritten(self):
        config = ProjectConfig()
        config.calculator.parallel_tolerance_rad = 0.02
        config.calculator.parallel_check_tolerance_deg = 1.5
        config.extraction.mep_categories = ["OST_DuctCurves"]
        config.extraction.curve_midpoint_parameter = 0.25

        apply_config_to_globals(config)

        assert cfg.PARALLEL_TOLERANCE_RAD == 0.02
        assert cfg.PARALLEL_CHECK_TOLERANCE_DEG == 1.5
        assert cfg.MEP_CATEGORY_NAMES == ("OST_DuctCurves",)
        assert cfg.CURVE_MIDPOINT_PARAMETER == 0.25


class TestCreateSampleConfig:
    """Tests for create_sample_config function."""

    def test_sample_loads_back(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        create_sample_config(path)

        data = json.loads(path.read_text(encoding='utf-8'))
        assert '_comment' in data
        assert '_comment' in data['calculator']

        config = ProjectConfig.load(path)
        assert config.calculator.parallel_tolerance_rad == 0.001


class TestConfigRoundTrip:
    """Integration test for config serialization round-trip."""

    def test_full_roundtrip(self, tmp_path):
        original = ProjectConfig()
        original.calculator.parallel_tolerance_rad = 0.004
        original.extraction.mep_categories = ["OST_PipeCurves", "OST_Conduit"]
        original.logging.level = "DEBUG"
        original.logging.json_file = "run.log.json"

        path = tmp_path / "config.json"
        original.save(path)
        loaded = ProjectConfig.load(path)

        assert loaded.calculator.parallel_tolerance_rad == 0.004
        assert loaded.extraction.mep_categories == ["OST_PipeCurves", "OST_Conduit"]
        assert loaded.logging.level == "DEBUG"
        assert loaded.logging.json_file == "run.log.json"
