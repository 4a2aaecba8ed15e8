"""
Configuration Loader

Loads and validates configuration from YAML files with environment variable substitution.
"""

import copy
import yaml
import os
from pathlib import Path
from typing import Dict, Any, Optional
import re
import logging

from .errors import ConfigError


POLLER_SECTION = 'cloudwatch_logs'

POLLER_DEFAULTS = {
    'interval': 60,
    'max_history': None,
    'region': 'us-east-1',
    'checkpoint_dir': None,
    'codec': 'plain',
    'tags': [],
    'add_field': {},
    'codec_options': {},
}

OBSOLETE_OPTIONS = {
    'sincedb_path': "Checkpoint location is always computed from the log group name; use 'checkpoint_dir' to move it",
}


class ConfigLoader:
    """
    Loads configuration from YAML files with environment variable support.

    Supports:
    - Environment variable substitution ${VAR_NAME}
    - Defaults for the cloudwatch_logs section
    - Validation
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_path: Path to configuration file (optional when the
                configuration is built from command line options only)
        """
        self.config_path = Path(config_path) if config_path else None
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config: Dict[str, Any] = {}

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.

        Returns:
            Configuration dictionary
        """
        if self.config_path is None:
            self.config = {}
            return self.config

        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                content = f.read()

            # Substitute environment variables
            content = self._substituteEnvVars(content)

            self.config = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(self.config, dict):
            raise ConfigError(f"Configuration root in {self.config_path} must be a mapping")

        self.logger.info(f"Configuration loaded from {self.config_path}")
        return self.config

    def _substituteEnvVars(self, content: str) -> str:
        """
        Substitute environment variables in format ${VAR_NAME}.

        Args:
            content: File content with variables

        Returns:
            Content with substituted values
        """
        pattern = r'\$\{([^}]+)\}'

        def replacer(match):
            var_name = match.group(1)
            value = os.environ.get(var_name)
            if value is None:
                self.logger.warning(f"Environment variable not found: {var_name}")
                return match.group(0)  # Keep original if not found
            return value

        return re.sub(pattern, replacer, content)

    def applyOverrides(self, **overrides: Any) -> Dict[str, Any]:
        # Command line values win over the file; None means "not given"
        section = self.config.setdefault(POLLER_SECTION, {})
        for key, value in overrides.items():
            if value is not None:
                section[key] = value
        return self.config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def validate(self) -> Dict[str, Any]:
        """
        Validate the cloudwatch_logs section and fill in defaults.

        Returns:
            The validated cloudwatch_logs section

        Raises:
            ConfigError: If a required option is missing or a value is invalid
        """
        section = self.config.get(POLLER_SECTION)
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise ConfigError(f"'{POLLER_SECTION}' must be a mapping")

        for option, reason in OBSOLETE_OPTIONS.items():
            if option in section:
                raise ConfigError(f"Option '{option}' is obsolete: {reason}")

        for option, default in POLLER_DEFAULTS.items():
            if section.get(option) is None:
                section[option] = copy.deepcopy(default)

        logGroup = section.get('log_group')
        if isinstance(logGroup, str):
            logGroup = [logGroup]
        if not logGroup or not isinstance(logGroup, list) \
                or not all(isinstance(name, str) and name.strip() for name in logGroup):
            raise ConfigError("'log_group' is required and must be a group name or a list of group names")
        section['log_group'] = [name.strip() for name in logGroup]

        section['interval'] = self._number(section, 'interval')
        if section['interval'] <= 0:
            raise ConfigError("'interval' must be greater than zero")

        if section['max_history'] is not None:
            section['max_history'] = self._number(section, 'max_history')
            if section['max_history'] < 0:
                raise ConfigError("'max_history' must not be negative")

        if not isinstance(section['tags'], list):
            raise ConfigError("'tags' must be a list")
        if not isinstance(section['add_field'], dict):
            raise ConfigError("'add_field' must be a mapping")
        if not isinstance(section['codec_options'], dict):
            raise ConfigError("'codec_options' must be a mapping")

        self.config[POLLER_SECTION] = section
        return section

    @staticmethod
    def _number(section: Dict[str, Any], option: str) -> float:
        value = section[option]
        if isinstance(value, bool):
            raise ConfigError(f"'{option}' must be a number, got {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{option}' must be a number, got {value!r}")
