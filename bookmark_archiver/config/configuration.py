"""
Configuration facade used by the CLI.

Wraps ConfigurationManager and turns its failures into ConfigurationError
so the CLI can report them like any other fatal error.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from ..utils.error_handler import ConfigurationError
from .pydantic_config import BookmarkConfig, ConfigurationManager, format_config_error


class Configuration:
    """Loaded, validated settings for one invocation."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Optional path to user configuration file (TOML/JSON)

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        try:
            self._manager = ConfigurationManager(config_path)
        except FileNotFoundError as e:
            raise ConfigurationError(format_config_error(e)) from e
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        self._config = self._manager.config

    @property
    def config(self) -> BookmarkConfig:
        """Get the underlying Pydantic configuration."""
        return self._config

    @property
    def source(self) -> Optional[Path]:
        """The configuration file that was read, if any."""
        return self._manager.source

    def update_from_args(self, args: Dict[str, Any]) -> None:
        """
        Update configuration from command-line arguments.

        Args:
            args: Dictionary of validated arguments
        """
        try:
            self._manager.update_from_cli_args(args)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        self._config = self._manager.config

    @property
    def store_path(self) -> Path:
        return self._config.storage.path

    def get_fetcher_settings(self) -> Dict[str, Any]:
        """Keyword arguments for PageFetcher."""
        network = self._config.network
        return {
            "timeout": network.timeout,
            "max_retries": network.max_retries,
            "retry_after_grace": network.retry_after_grace,
            "max_redirects": network.max_redirects,
            "user_agent": network.user_agent,
        }

    def get_availability_settings(self) -> Dict[str, Any]:
        """Keyword arguments for AvailabilityChecker."""
        archive = self._config.archive
        return {"endpoint": archive.availability_url, "timeout": archive.timeout}
