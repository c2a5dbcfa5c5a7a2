"""
Pydantic-based configuration system for the bookmark archiver.

Settings come, lowest precedence first, from built-in defaults, a TOML or
JSON configuration file, environment variables and command-line flags.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator


def default_store_path() -> Path:
    """The backing file used when nothing else is configured: $HOME/.bookmark."""
    return Path.home() / ".bookmark"


class StorageConfig(BaseModel):
    """Location of the backing file."""

    path: Path = Field(
        default_factory=default_store_path,
        description="Bookmark file, one URL per line",
    )

    @field_validator("path", mode="before")
    @classmethod
    def expand_path(cls, v):
        """Expand ~ in configured paths."""
        if isinstance(v, str):
            v = Path(v)
        if isinstance(v, Path):
            return v.expanduser()
        return v


class NetworkConfig(BaseModel):
    """Page fetch settings."""

    timeout: int = Field(
        default=20,
        ge=1,
        le=300,
        description="Total seconds allowed per fetch attempt",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries allowed after the initial attempt",
    )
    retry_after_grace: int = Field(
        default=60,
        ge=0,
        le=3600,
        description="Seconds to wait past a Retry-After instant",
    )
    max_redirects: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Redirect hops followed by the fetch loop",
    )
    user_agent: str = Field(
        default="bookmark-archiver/1.0.0",
        min_length=1,
        description="User-Agent header for page fetches",
    )


class ArchiveConfig(BaseModel):
    """Wayback availability check settings."""

    availability_url: str = Field(
        default="http://archive.org/wayback/available",
        description="Wayback availability JSON endpoint",
    )
    timeout: int = Field(default=20, ge=1, le=300)

    @field_validator("availability_url")
    @classmethod
    def validate_availability_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("availability_url must be an http(s) URL")
        return v


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_file: Optional[Path] = None

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class BookmarkConfig(BaseModel):
    """Main configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


ENV_STORE_PATH = "BOOKMARK_FILE"
ENV_LOG_LEVEL = "BOOKMARK_LOG_LEVEL"


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[BookmarkConfig] = None
        self.source: Optional[Path] = None
        self._load_configuration(config_path)

    @staticmethod
    def _get_default_config_paths() -> List[Path]:
        """Get list of default configuration file paths to try."""
        home = Path.home()
        return [
            home / ".config" / "bookmark" / "config.toml",
            home / ".config" / "bookmark" / "config.json",
            home / ".bookmark.toml",
        ]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))
            self.source = Path(config_path)
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    self.source = path
                    break

        self._load_overrides_from_env(config_data)

        try:
            self._config = BookmarkConfig(**config_data)
        except ValidationError as e:
            raise ValueError(format_config_error(e)) from e

    @staticmethod
    def _load_config_file(config_path: Path) -> Dict:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(
                2, "Configuration file not found", str(config_path)
            )

        try:
            if config_path.suffix.lower() == ".toml":
                return toml.load(config_path)
            elif config_path.suffix.lower() == ".json":
                with open(config_path, "r", encoding="utf-8") as f:
                    return json.load(f)
            else:
                raise ValueError(
                    f"Unsupported configuration file format: {config_path.suffix}"
                )
        except (OSError, ValueError, toml.TomlDecodeError) as e:
            raise ValueError(f"Failed to load configuration from {config_path}: {e}")

    @staticmethod
    def _load_overrides_from_env(config_data: Dict) -> None:
        """Apply environment variable overrides on top of file settings."""
        store_path = os.getenv(ENV_STORE_PATH)
        if store_path:
            config_data.setdefault("storage", {})["path"] = store_path

        log_level = os.getenv(ENV_LOG_LEVEL)
        if log_level:
            config_data.setdefault("logging", {})["level"] = log_level

    def update_from_cli_args(self, args: Dict) -> None:
        """Update configuration from command-line arguments."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")

        config_dict = self._config.model_dump()

        if args.get("store_path"):
            config_dict["storage"]["path"] = args["store_path"]

        try:
            self._config = BookmarkConfig(**config_dict)
        except ValidationError as e:
            raise ValueError(format_config_error(e)) from e

    @property
    def config(self) -> BookmarkConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config


class ConfigurationErrorFormatter:
    """Formats Pydantic validation errors into user-friendly messages."""

    @staticmethod
    def format_validation_error(error: ValidationError) -> str:
        """
        Convert Pydantic ValidationError into a user-friendly error message.

        Args:
            error: Pydantic ValidationError instance

        Returns:
            Formatted error message, one line per problem
        """
        lines = ["invalid configuration:"]
        for detail in error.errors():
            location = ConfigurationErrorFormatter._format_error_location(
                detail["loc"]
            )
            lines.append(
                ConfigurationErrorFormatter._format_by_error_type(location, detail)
            )
        return "\n".join(lines)

    @staticmethod
    def _format_error_location(location: tuple) -> str:
        """Format the error location path."""
        if not location:
            return "configuration"
        return ".".join(str(part) for part in location)

    @staticmethod
    def _format_by_error_type(location: str, detail: dict) -> str:
        """Format error message based on Pydantic error type."""
        error_type = detail["type"]
        input_value = detail.get("input", "N/A")
        ctx = detail.get("ctx", {})

        if error_type == "missing":
            return f"  {location}: required field is missing"

        if error_type in ("greater_than_equal", "less_than_equal"):
            operator = ">=" if error_type == "greater_than_equal" else "<="
            limit = ctx.get("ge", ctx.get("le", "limit"))
            return f"  {location}: value must be {operator} {limit} (got: {input_value})"

        if error_type == "literal_error":
            expected = ctx.get("expected", "a valid option")
            return f"  {location}: must be one of {expected} (got: {input_value})"

        msg = detail.get("msg", "invalid value")
        return f"  {location}: {msg} (got: {input_value})"


def format_config_error(error: Exception) -> str:
    """
    Format any configuration-related error into a user-friendly message.

    Args:
        error: Exception that occurred during configuration

    Returns:
        Formatted error message
    """
    if isinstance(error, ValidationError):
        return ConfigurationErrorFormatter.format_validation_error(error)

    if isinstance(error, FileNotFoundError):
        return f"configuration file not found: {error.filename}"

    return f"configuration error: {error}"
