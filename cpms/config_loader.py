# Path: cpms/config_loader.py
"""
Configuration Loader for cpms (Concept/Pattern Matching System)

Loads configuration from environment variables, after reading a .env
file at the project root when one exists. Singleton pattern ensures
consistent configuration across all components.

No value is required: every key has a default so the library works
without any configuration.
"""

import os
from typing import Optional, Any
from pathlib import Path
from dotenv import load_dotenv

from cpms.constants import (
    DEFAULT_PATTERN_TOP_K,
    DEFAULT_MAX_REPAIRS,
    DEFAULT_DECISION_TOP_K,
    DEFAULT_SWAP_EPSILON,
    DEFAULT_JSON_INDENT,
    OutputFormat,
)


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================

DEFAULT_ENVIRONMENT: str = 'development'
DEFAULT_LOG_LEVEL: str = 'INFO'


class ConfigLoader:
    """
    Singleton configuration loader for cpms.

    Loads configuration from environment variables with type conversion
    and defaults. Malformed numbers fall back to their defaults.

    Example:
        config = ConfigLoader()
        top_k = config.get('pattern_top_k')      # int
        dictionary = config.get('dictionary_dir')  # Path or None
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern. Loads .env and reads
        every key on first instantiation.
        """
        if ConfigLoader._initialized:
            return

        # cpms/config_loader.py -> .env is in the project root
        env_path = Path(__file__).resolve().parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path, interpolate=True)

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Forget the singleton so the next ConfigLoader() re-reads the environment."""
        cls._instance = None
        cls._initialized = False

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load all configuration from environment.

        Returns:
            Dictionary of configuration values with proper types
        """
        config = {
            # ================================================================
            # ENVIRONMENT & DEBUG
            # ================================================================
            'environment': self._get_env('CPMS_ENVIRONMENT', DEFAULT_ENVIRONMENT),
            'debug': self._get_bool('CPMS_DEBUG', False),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_dir': self._get_path('CPMS_LOG_DIR'),
            'log_level': self._get_env('CPMS_LOG_LEVEL', DEFAULT_LOG_LEVEL),
            'log_console': self._get_bool('CPMS_LOG_CONSOLE', True),

            # ================================================================
            # DOCUMENTS
            # ================================================================
            'dictionary_dir': self._get_path('CPMS_DICTIONARY_DIR'),
            'compile_documents': self._get_bool('CPMS_COMPILE_DOCUMENTS', True),

            # ================================================================
            # MATCHING DEFAULTS
            # ================================================================
            'pattern_top_k': self._get_int('CPMS_PATTERN_TOP_K', DEFAULT_PATTERN_TOP_K),
            'pattern_max_repairs': self._get_int(
                'CPMS_PATTERN_MAX_REPAIRS', DEFAULT_MAX_REPAIRS
            ),
            'decision_top_k': self._get_int('CPMS_DECISION_TOP_K', DEFAULT_DECISION_TOP_K),
            'swap_epsilon': self._get_float('CPMS_SWAP_EPSILON', DEFAULT_SWAP_EPSILON),

            # ================================================================
            # OUTPUT CONFIGURATION
            # ================================================================
            'output_format': self._get_env('CPMS_OUTPUT_FORMAT', OutputFormat.JSON.value),
            'json_indent': self._get_int('CPMS_JSON_INDENT', DEFAULT_JSON_INDENT),
        }

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def _get_path(self, key: str) -> Optional[Path]:
        """
        Get path from environment variable.

        Args:
            key: Environment variable name

        Returns:
            Path object or None when unset or empty
        """
        value = os.getenv(key)
        if not value:
            return None

        # Handle variable interpolation
        if '${' in value:
            value = os.path.expandvars(value)

        return Path(value).expanduser()

    def _get_env(self, key: str, default: str = '') -> str:
        """Get string environment variable."""
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable."""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable."""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            return default

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    def __repr__(self) -> str:
        return (
            f"ConfigLoader("
            f"environment={self._config.get('environment')}, "
            f"dictionary_dir={self._config.get('dictionary_dir')})"
        )


__all__ = ['ConfigLoader']
