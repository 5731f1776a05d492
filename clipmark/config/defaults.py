"""Default configuration values for clipmark."""
import tempfile
from pathlib import Path

from .types import ExportConfig, KeyBindings, PathConfig, ToolConfig

DIAGNOSTIC_LOG_NAME = "clipmark_export_error.log"


def get_default_tool_config() -> ToolConfig:
    """Get default tool configuration."""
    return ToolConfig(
        ffmpeg=None,  # Searched for on first export
        ffprobe=None,
        probe_timeout=5.0,
        resolve_timeout=5.0,
    )


def get_default_export_config() -> ExportConfig:
    """Get default export configuration."""
    return ExportConfig(
        diagnostic_log=Path(tempfile.gettempdir()) / DIAGNOSTIC_LOG_NAME,
        max_workers=2,
    )


def get_default_key_bindings() -> KeyBindings:
    return KeyBindings()


def get_default_path_config() -> PathConfig:
    """Get default path configuration."""
    return PathConfig(log_dir=Path.home() / "clipmark_logs")
