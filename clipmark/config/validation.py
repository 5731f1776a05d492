"""Validation functions for clipmark configuration."""
from ..exceptions import ConfigError
from .types import ExportConfig, KeyBindings, PathConfig, ToolConfig


def validate_tool_config(config: ToolConfig) -> None:
    """Validate tool configuration."""
    if config.probe_timeout <= 0:
        raise ConfigError(f"Probe timeout must be positive: {config.probe_timeout}", module="config")
    if config.resolve_timeout <= 0:
        raise ConfigError(f"Resolve timeout must be positive: {config.resolve_timeout}", module="config")
    for name in ("ffmpeg", "ffprobe"):
        value = getattr(config, name)
        if value is not None and not value.strip():
            raise ConfigError(f"Configured {name} path must not be blank", module="config")


def validate_export_config(config: ExportConfig) -> None:
    """Validate export configuration."""
    if not config.profiles:
        raise ConfigError("At least one encoder profile must be configured", module="config")
    for profile_id in config.profiles:
        if not isinstance(profile_id, str) or not profile_id.strip():
            raise ConfigError(f"Invalid profile identifier: {profile_id!r}", module="config")
    if len(set(config.profiles)) != len(config.profiles):
        raise ConfigError(f"Duplicate encoder profiles: {', '.join(config.profiles)}", module="config")
    if config.max_workers < 1:
        raise ConfigError(f"Export worker count must be at least 1: {config.max_workers}", module="config")


def validate_key_bindings(config: KeyBindings) -> None:
    """Validate key bindings."""
    keys = config.all_keys()
    for action, key in keys.items():
        if not key or not key.strip():
            raise ConfigError(f"No key bound to {action}", module="config")
    seen = {}
    for action, key in keys.items():
        if key in seen:
            raise ConfigError(f"Key {key} bound to both {seen[key]} and {action}", module="config")
        seen[key] = action


def validate_path_config(config: PathConfig) -> None:
    """Validate path configuration."""
    if config.log_dir.exists() and not config.log_dir.is_dir():
        raise ConfigError(f"Log directory '{config.log_dir}' is not a directory", module="config")
