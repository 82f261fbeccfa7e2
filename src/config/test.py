"""Tests for configuration management."""

import logging

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("UISCHEMA_MAX_DEPTH", raising=False)
        result = get_environment(EnvVar.UISCHEMA_MAX_DEPTH)
        assert result == 100

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("UISCHEMA_MAX_DEPTH", "12")
        result = get_environment(EnvVar.UISCHEMA_MAX_DEPTH, override=40)
        assert result == 40

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("UISCHEMA_STREAM_OVERLAP", "128")
        result = get_environment(EnvVar.UISCHEMA_STREAM_OVERLAP)
        assert result == 128
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("UISCHEMA_SIMILARITY_HIGH", "0.85")
        result = get_environment(EnvVar.UISCHEMA_SIMILARITY_HIGH)
        assert result == pytest.approx(0.85)
        assert isinstance(result, float)

    @pytest.mark.unit
    def test_float_defaults(self, monkeypatch):
        """Similarity thresholds default to 0.6 and 0.8."""
        monkeypatch.delenv("UISCHEMA_SIMILARITY_MEDIUM", raising=False)
        monkeypatch.delenv("UISCHEMA_SIMILARITY_HIGH", raising=False)
        assert get_environment(EnvVar.UISCHEMA_SIMILARITY_MEDIUM) == 0.6
        assert get_environment(EnvVar.UISCHEMA_SIMILARITY_HIGH) == 0.8

    @pytest.mark.unit
    def test_bool_type_conversion_true(self, monkeypatch):
        """Boolean type conversion for true values."""
        for value in ("true", "1", "yes", "TRUE", "Yes"):
            monkeypatch.setenv("UISCHEMA_STRICT", value)
            assert get_environment(EnvVar.UISCHEMA_STRICT) is True

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("UISCHEMA_STRICT", value)
            assert get_environment(EnvVar.UISCHEMA_STRICT) is False

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("UISCHEMA_DEFAULT_VERSION", "2.0")
        result = get_environment(EnvVar.UISCHEMA_DEFAULT_VERSION)
        assert result == "2.0"

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("UISCHEMA_MAX_DEPTH", "deep")
        assert get_environment(EnvVar.UISCHEMA_MAX_DEPTH) == 100

    @pytest.mark.unit
    def test_invalid_float_returns_default(self, monkeypatch):
        """Invalid float value returns default."""
        monkeypatch.setenv("UISCHEMA_SIMILARITY_MEDIUM", "lots")
        assert get_environment(EnvVar.UISCHEMA_SIMILARITY_MEDIUM) == 0.6


class TestConvertValue:
    """Tests for raw string conversion."""

    @pytest.mark.unit
    def test_none_returns_default(self):
        assert _convert_value(None, int, 7) == 7

    @pytest.mark.unit
    def test_unrecognized_bool_returns_default(self):
        assert _convert_value("maybe", bool, False) is False

    @pytest.mark.unit
    def test_unknown_type_passthrough(self):
        assert _convert_value("raw", bytes, None) == "raw"


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.UISCHEMA_STREAM_OVERLAP)
        assert isinstance(info, EnvConfig)
        assert info.name == "UISCHEMA_STREAM_OVERLAP"
        assert info.default == 64
        assert info.var_type is int
        assert info.category == "streaming"

    @pytest.mark.unit
    def test_description_present(self):
        """Every variable carries a description."""
        for var in EnvVar:
            assert get_environment_info(var).description


class TestGetLogLevel:
    """Tests for log level resolution."""

    @pytest.mark.unit
    def test_default_is_info(self, monkeypatch):
        monkeypatch.delenv("UISCHEMA_LOG_LEVEL", raising=False)
        assert get_log_level() == logging.INFO

    @pytest.mark.unit
    def test_env_value_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("UISCHEMA_LOG_LEVEL", "debug")
        assert get_log_level() == logging.DEBUG

    @pytest.mark.unit
    def test_unknown_level_falls_back(self):
        assert get_log_level("CHATTY") == logging.INFO


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)
        assert all(isinstance(v, EnvVar) for v in result)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        fixer_vars = list_environment_variables("fixer")
        assert EnvVar.UISCHEMA_SIMILARITY_HIGH in fixer_vars
        assert EnvVar.UISCHEMA_DEFAULT_VERSION in fixer_vars
        assert EnvVar.UISCHEMA_STREAM_OVERLAP not in fixer_vars

    @pytest.mark.unit
    def test_unknown_category_empty(self):
        assert list_environment_variables("docker") == []
