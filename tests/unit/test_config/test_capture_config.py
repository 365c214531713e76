"""
Unit tests for capture configuration loading and validation.

Tests the [capture] table validation, the sampling floor, environment
overrides and the configuration singleton.
"""

import tomllib

import pytest
import toml

from proccapture.config import (
    apply_env_overrides,
    clamp_sample_millis,
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    load_toml_file,
    set_config_path,
    validate_capture_config,
)
from proccapture.models import CaptureConfig
from proccapture.validation import ValidationError


@pytest.mark.unit
class TestCaptureConfigValidation:
    """Test cases for validate_capture_config."""

    def test_validate_success(self, sample_capture_data):
        config = validate_capture_config(sample_capture_data)

        assert config.sample_millis == 120
        assert config.enumeration_workers == 2
        assert config.windows_batch_size == 40
        assert config.windows_query_timeout == 5.0
        assert config.sample_duration == pytest.approx(0.12)

    def test_defaults_for_empty_table(self):
        config = validate_capture_config({})

        assert config == CaptureConfig()
        assert config.sample_millis == 300

    def test_low_sample_millis_is_clamped(self, sample_capture_data, caplog):
        sample_capture_data["sample_millis"] = 10

        config = validate_capture_config(sample_capture_data)

        assert config.sample_millis == 50
        assert "too low" in caplog.text

    def test_negative_sample_millis_rejected(self, sample_capture_data):
        sample_capture_data["sample_millis"] = -5

        with pytest.raises(ValidationError) as exc_info:
            validate_capture_config(sample_capture_data)

        assert "sample_millis" in str(exc_info.value)

    def test_batch_size_above_limit_rejected(self, sample_capture_data):
        sample_capture_data["windows_batch_size"] = 41

        with pytest.raises(ValidationError) as exc_info:
            validate_capture_config(sample_capture_data)

        assert "windows_batch_size" in str(exc_info.value)

    def test_zero_workers_rejected(self, sample_capture_data):
        sample_capture_data["enumeration_workers"] = 0

        with pytest.raises(ValidationError):
            validate_capture_config(sample_capture_data)

    def test_string_values_from_environment_are_accepted(self):
        config = validate_capture_config(
            {"sample_millis": "75", "windows_query_timeout_seconds": "2.5"}
        )

        assert config.sample_millis == 75
        assert config.windows_query_timeout == 2.5


@pytest.mark.unit
class TestClampSampleMillis:
    """Test cases for the sampling floor."""

    @pytest.mark.parametrize("millis,expected", [(0, 50), (49, 50), (50, 50), (51, 51), (300, 300)])
    def test_clamp(self, millis, expected):
        assert clamp_sample_millis(millis) == expected


@pytest.mark.unit
class TestEnvOverrides:
    """Test cases for PROCCAPTURE_* overrides."""

    KEYS = {"sample_millis": "SAMPLE_MILLIS", "enumeration_workers": "ENUMERATION_WORKERS"}

    def test_override_applied(self):
        merged = apply_env_overrides(
            {"sample_millis": 300}, self.KEYS, environ={"PROCCAPTURE_SAMPLE_MILLIS": " 500 "}
        )

        assert merged == {"sample_millis": "500"}

    def test_blank_value_ignored(self):
        section = {"sample_millis": 300}

        merged = apply_env_overrides(section, self.KEYS, environ={"PROCCAPTURE_SAMPLE_MILLIS": "  "})

        assert merged == {"sample_millis": 300}
        assert merged is not section

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("PROCCAPTURE_ENUMERATION_WORKERS", "8")

        merged = apply_env_overrides({}, self.KEYS)

        assert merged == {"enumeration_workers": "8"}


@pytest.mark.unit
class TestConfigManager:
    """Test cases for the configuration singleton."""

    def test_get_config_from_custom_path(self, config_file):
        set_config_path(config_file)

        config = get_config()

        assert config.sample_millis == 120
        assert config.enumeration_workers == 2
        assert is_config_loaded()
        assert get_config_info()["config_path"] == str(config_file)

    def test_get_config_is_cached(self, config_file):
        set_config_path(config_file)

        assert get_config() is get_config()
        clear_config_cache()
        assert not is_config_loaded()

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("PROCCAPTURE_SAMPLE_MILLIS", "20")
        set_config_path(config_file)

        assert get_config().sample_millis == 50

    def test_default_config_loads(self):
        config = get_config()

        assert config.sample_millis == 300
        assert config.windows_batch_size == 40

    def test_missing_file_raises(self, temp_dir):
        set_config_path(temp_dir / "missing.toml")

        with pytest.raises(FileNotFoundError):
            get_config()

    def test_invalid_values_raise(self, temp_dir):
        path = temp_dir / "config.toml"
        with open(path, "w") as f:
            toml.dump({"capture": {"enumeration_workers": 0}}, f)
        set_config_path(path)

        with pytest.raises(ValidationError):
            get_config()

    def test_malformed_toml_raises(self, temp_dir):
        path = temp_dir / "broken.toml"
        path.write_text("[capture\nsample_millis = ")

        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml_file(path)
