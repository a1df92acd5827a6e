# Path: cpms/tests/unit/test_config_loader.py
"""
Unit Tests for ConfigLoader

Tests the configuration loading functionality including:
- Environment variable parsing
- Type conversion methods
- Singleton pattern
- Default value handling
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[3]))


class TestConfigLoaderBasics:
    """Test basic ConfigLoader functionality."""

    def test_singleton_pattern(self, mock_env_vars, reset_singletons):
        """ConfigLoader should return same instance."""
        from cpms.config_loader import ConfigLoader

        config1 = ConfigLoader()
        config2 = ConfigLoader()

        assert config1 is config2

    def test_get_returns_value(self, mock_env_vars, reset_singletons):
        """get() should return configured value."""
        from cpms.config_loader import ConfigLoader

        config = ConfigLoader()
        assert config.get('environment') == 'test'

    def test_get_returns_default_for_missing(self, mock_env_vars, reset_singletons):
        """get() should return default for missing keys."""
        from cpms.config_loader import ConfigLoader

        config = ConfigLoader()
        assert config.get('nonexistent_key', 'default_value') == 'default_value'
        assert config.get('nonexistent_key') is None

    def test_reset_rereads_environment(self, reset_singletons):
        """reset() makes the next instance read the environment again."""
        from cpms.config_loader import ConfigLoader

        with patch.dict(os.environ, {'CPMS_ENVIRONMENT': 'first'}):
            assert ConfigLoader().get('environment') == 'first'

        ConfigLoader.reset()
        with patch.dict(os.environ, {'CPMS_ENVIRONMENT': 'second'}):
            assert ConfigLoader().get('environment') == 'second'


class TestConfigLoaderTypeConversion:
    """Test type conversion methods."""

    def test_get_int_converts_string(self, mock_env_vars, reset_singletons):
        """Integer values should be converted from string."""
        from cpms.config_loader import ConfigLoader

        config = ConfigLoader()
        assert config.get('pattern_top_k') == 4
        assert config.get('pattern_max_repairs') == 6
        assert config.get('json_indent') == 4

    def test_get_float_converts_string(self, mock_env_vars, reset_singletons):
        from cpms.config_loader import ConfigLoader

        config = ConfigLoader()
        assert config.get('swap_epsilon') == 0.001

    def test_get_bool_converts(self, mock_env_vars, reset_singletons):
        """Boolean strings should be converted."""
        from cpms.config_loader import ConfigLoader

        config = ConfigLoader()
        assert config.get('debug') is True
        assert config.get('log_console') is False

    def test_malformed_int_uses_default(self, reset_singletons):
        """Malformed numbers fall back to defaults."""
        from cpms.config_loader import ConfigLoader
        from cpms.constants import DEFAULT_PATTERN_TOP_K

        with patch.dict(os.environ, {'CPMS_PATTERN_TOP_K': 'seven'}):
            assert ConfigLoader().get('pattern_top_k') == DEFAULT_PATTERN_TOP_K

    def test_get_path(self, reset_singletons, tmp_path):
        from cpms.config_loader import ConfigLoader

        with patch.dict(os.environ, {'CPMS_DICTIONARY_DIR': str(tmp_path)}):
            path = ConfigLoader().get('dictionary_dir')

        assert isinstance(path, Path)
        assert path == tmp_path


class TestConfigLoaderDefaults:
    """Test defaults when nothing is configured."""

    def test_defaults(self, reset_singletons):
        from cpms.config_loader import ConfigLoader
        from cpms.constants import (
            DEFAULT_DECISION_TOP_K,
            DEFAULT_MAX_REPAIRS,
            DEFAULT_PATTERN_TOP_K,
        )

        with patch.dict(os.environ):
            for key in [k for k in os.environ if k.startswith('CPMS_')]:
                del os.environ[key]
            config = ConfigLoader()

        assert config.get('pattern_top_k') == DEFAULT_PATTERN_TOP_K
        assert config.get('pattern_max_repairs') == DEFAULT_MAX_REPAIRS
        assert config.get('decision_top_k') == DEFAULT_DECISION_TOP_K
        assert config.get('output_format') == 'json'
        assert config.get('compile_documents') is True

    def test_empty_path_is_none(self, reset_singletons):
        """Empty path variables count as unset."""
        from cpms.config_loader import ConfigLoader

        with patch.dict(os.environ, {'CPMS_LOG_DIR': '', 'CPMS_DICTIONARY_DIR': ''}):
            config = ConfigLoader()

        assert config.get('log_dir') is None
        assert config.get('dictionary_dir') is None
