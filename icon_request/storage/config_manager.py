"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from icon_request.exceptions import ConfigurationError
from icon_request.models.config import DEFAULT_EMAIL_SUBJECT, RequestConfig

log = logging.getLogger(__name__)


def default_cache_folder(config_dir: Path) -> Path:
    return config_dir / "cache"


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> RequestConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.
                Options set to None are ignored.

        Returns:
            A validated RequestConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or validation
            fails.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'icon-request init' first."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if self._migrate_if_needed():
            log.info(
                "[yellow]Configuration file was updated with new default values."
                "[/yellow]"
            )

        config_from_file = self._get_config_as_dict()

        # Override with CLI options
        if cli_options:
            config_from_file.update(
                {k: v for k, v in cli_options.items() if v is not None}
            )

        try:
            return RequestConfig(**config_from_file)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save.
        """
        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {}

        defaults = self._defaults()
        for key in sorted(RequestConfig.get_ini_keys()):
            value = settings.get(key, defaults.get(key))
            if isinstance(value, bool):
                config["DEFAULT"][key] = "true" if value else "false"
            elif value is not None:
                # configparser needs newlines escaped to keep multi-line text
                config["DEFAULT"][key] = str(value).replace("\n", "\\n")
            else:
                config["DEFAULT"][key] = ""

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _defaults(self) -> dict[str, Any]:
        return {
            "cache_folder": str(default_cache_folder(self.config_file_path.parent)),
            "email_subject": DEFAULT_EMAIL_SUBJECT,
            "include_device_info": True,
            "json_manifest": True,
        }

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        defaults = self._defaults()

        def text(key: str) -> str | None:
            value = section.get(key, "")
            return value.replace("\\n", "\n") if value else None

        try:
            include_device_info = section.getboolean("include_device_info", True)
            json_manifest = section.getboolean("json_manifest", True)
        except ValueError as e:
            raise ConfigurationError(f"Invalid boolean in configuration: {e}") from e

        return {
            "email_recipient": text("email_recipient"),
            "api_key": text("api_key"),
            "api_host": text("api_host"),
            "cache_folder": section.get("cache_folder", "") or defaults["cache_folder"],
            "email_subject": text("email_subject") or DEFAULT_EMAIL_SUBJECT,
            "email_header": text("email_header"),
            "email_footer": text("email_footer"),
            "include_device_info": include_device_info,
            "json_manifest": json_manifest,
        }

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = self._defaults()
        needs_saving = False

        config_section = self._parser["DEFAULT"]

        for key in sorted(RequestConfig.get_ini_keys()):
            if key not in config_section:
                default_value = defaults.get(key)
                if isinstance(default_value, bool):
                    config_section[key] = "true" if default_value else "false"
                elif default_value is None:
                    config_section[key] = ""
                else:
                    config_section[key] = str(default_value)

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
