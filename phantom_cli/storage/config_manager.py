"""
Manages loading and validation of the installer configuration.

Settings are layered, later sources winning: the optional INI file, then
``PHANTOM_CLI_*`` environment variables, then command-line options.
"""

import configparser
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from phantom_cli.exceptions import ConfigurationError
from phantom_cli.models.config import InstallConfig

log = logging.getLogger(__name__)

ENV_PREFIX = "PHANTOM_CLI_"


class ConfigManager:
    """Handles all operations related to the installer's INI config file."""

    def __init__(self, config_file_path: Path, environ: Mapping[str, str] | None = None):
        self.config_file_path = config_file_path
        self._environ = os.environ if environ is None else environ

    def load_config(self, cli_options: dict[str, Any] | None = None) -> InstallConfig:
        """
        Loads configuration from the INI file and environment, applies CLI
        overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated InstallConfig object.

        Raises:
            ConfigurationError: If the config file cannot be parsed or validation
            fails.
        """
        settings: dict[str, Any] = {}

        if self.config_file_path.is_file():
            settings.update(self._get_config_as_dict())
        else:
            log.debug(
                f"No configuration file at '{self.config_file_path}', using defaults."
            )

        settings.update(self._get_env_overrides())

        if cli_options:
            settings.update(
                {key: value for key, value in cli_options.items() if value is not None}
            )

        try:
            return InstallConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the known keys of the 'DEFAULT' section of the INI file."""
        parser = configparser.ConfigParser()
        try:
            parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        section = parser["DEFAULT"]
        known_keys = InstallConfig.get_ini_keys()
        for key in section:
            if key not in known_keys:
                log.warning(
                    f"Ignoring unknown key '{key}' in '{self.config_file_path}'."
                )
        return {key: section[key] for key in known_keys if key in section}

    def _get_env_overrides(self) -> dict[str, Any]:
        """Collects ``PHANTOM_CLI_<KEY>`` variables for the known config keys."""
        overrides = {}
        for key in InstallConfig.get_ini_keys():
            value = self._environ.get(f"{ENV_PREFIX}{key.upper()}")
            if value:
                overrides[key] = value
        return overrides
