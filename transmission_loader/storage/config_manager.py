"""
Manages loading and validation of the YAML configuration file.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from transmission_loader.exceptions import ConfigurationError
from transmission_loader.models.config import LoaderConfig

log = logging.getLogger(__name__)

BOOL_TAG = "tag:yaml.org,2002:bool"


class ConfigLoader(yaml.SafeLoader):
    """
    SafeLoader that only reads ``true``/``false`` as booleans (YAML 1.2), so group
    names like ``no`` or ``on`` stay text.
    """


ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ConfigLoader.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class ConfigManager:
    """Handles all operations related to the application's YAML config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path

    def load_config(self, cli_options: dict[str, Any] | None = None) -> LoaderConfig:
        """
        Loads configuration from the YAML file, applies CLI overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated LoaderConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or validation
            fails.
        """
        config_from_file = self._read_yaml()

        # Override with CLI options
        if cli_options:
            config_from_file.update(
                {key: value for key, value in cli_options.items() if value is not None}
            )

        try:
            return LoaderConfig(
                **config_from_file, config_path=str(self.config_file_path)
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e
        except TypeError as e:
            raise ConfigurationError(f"Configuration is malformed: {e}") from e

    def _read_yaml(self) -> dict[str, Any]:
        """Parses the config file into a dictionary."""
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'."
            )

        try:
            with open(self.config_file_path, "r", encoding="utf-8") as f:
                data = yaml.load(f, Loader=ConfigLoader)  # noqa: S506
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration file must contain a mapping with at least a 'root' key."
            )
        log.debug(f"Loaded configuration from {self.config_file_path}")
        return data
