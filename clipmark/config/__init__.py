"""Configuration management for clipmark."""

from .settings import Settings
from .types import ExportConfig, KeyBindings, PathConfig, ToolConfig

__all__ = ["Settings", "ExportConfig", "KeyBindings", "PathConfig", "ToolConfig"]
