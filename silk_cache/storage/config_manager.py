"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from silk_cache.exceptions import ConfigurationError
from silk_cache.models.config import CacheConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the cache's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, cli_options: dict[str, Any] | None = None) -> CacheConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.
        A missing file is not an error; defaults are used.

        Args:
            cli_options: A dictionary of options provided via the command line.
            Options set to None are ignored.

        Returns:
            A validated CacheConfig object.

        Raises:
            ConfigurationError: If the config file is invalid or validation fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e

            if self._migrate_if_needed():
                log.info(
                    "[yellow]Configuration file was updated with new default values."
                    "[/yellow]"
                )
            config_from_file = self._get_config_as_dict()
        else:
            log.debug(f"No configuration file at '{self.config_file_path}'.")

        if cli_options:
            config_from_file.update(
                {k: v for k, v in cli_options.items() if v is not None}
            )

        try:
            return CacheConfig(**config_from_file)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any] | None = None) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save; missing keys use defaults.
        """
        settings = settings or {}
        config = configparser.ConfigParser()
        config["DEFAULT"] = {}
        defaults = CacheConfig()

        for key in sorted(CacheConfig.get_ini_keys()):
            value = settings.get(key, getattr(defaults, key))
            config["DEFAULT"][key] = self._format_value(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        try:
            return {
                "cache_name": section.get("cache_name", ""),
                "cache_dir": section.get("cache_dir", ""),
                "atomic_commit": section.getboolean("atomic_commit", False),
                "pickle_protocol": section.getint(
                    "pickle_protocol", CacheConfig().pickle_protocol
                ),
            }
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = CacheConfig()
        needs_saving = False
        config_section = self._parser["DEFAULT"]

        for key in sorted(CacheConfig.get_ini_keys()):
            if key not in config_section:
                config_section[key] = self._format_value(getattr(defaults, key))
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
