"""Configuration loading for the bookmark archiver."""

from .configuration import Configuration
from .pydantic_config import BookmarkConfig, ConfigurationManager

__all__ = ["BookmarkConfig", "Configuration", "ConfigurationManager"]
