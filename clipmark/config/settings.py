"""Main settings class for clipmark configuration."""
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..exceptions import ConfigError
from ..profiles import ProfileCatalog, catalog_from_ids
from .types import ExportConfig, KeyBindings, PathConfig, ToolConfig
from .validation import (
    validate_export_config, validate_key_bindings,
    validate_path_config, validate_tool_config,
)
from .defaults import (
    get_default_export_config, get_default_key_bindings,
    get_default_path_config, get_default_tool_config,
)

ENV_PREFIX = "CLIPMARK_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(ENV_PREFIX + name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got {value!r}", module="config")


@dataclass
class Settings:
    """Main configuration class for clipmark."""
    tools: ToolConfig
    export: ExportConfig
    keys: KeyBindings
    paths: PathConfig
    log_level: str = "INFO"

    @classmethod
    def from_environment(
        cls,
        env: Optional[Mapping[str, str]] = None,
        ffmpeg: Optional[str] = None,
        ffprobe: Optional[str] = None,
        profiles: Optional[Sequence[str]] = None,
        log_level: Optional[str] = None,
    ) -> "Settings":
        """Create settings from environment variables and optional overrides."""
        env = os.environ if env is None else env

        tools = get_default_tool_config()
        export = get_default_export_config()
        keys = get_default_key_bindings()
        paths = get_default_path_config()

        tools.ffmpeg = ffmpeg or env.get(ENV_PREFIX + "FFMPEG") or tools.ffmpeg
        tools.ffprobe = ffprobe or env.get(ENV_PREFIX + "FFPROBE") or tools.ffprobe
        tools.probe_timeout = _parse_float(env, "PROBE_TIMEOUT", tools.probe_timeout)

        if profiles is None and env.get(ENV_PREFIX + "PROFILES"):
            profiles = env[ENV_PREFIX + "PROFILES"].split(",")
        if profiles is not None:
            export.profiles = tuple(p.strip() for p in profiles if p.strip())
        if env.get(ENV_PREFIX + "DIAGNOSTIC_LOG"):
            export.diagnostic_log = Path(env[ENV_PREFIX + "DIAGNOSTIC_LOG"])

        for f in fields(keys):
            value = env.get(f"{ENV_PREFIX}KEY_{f.name.upper()}")
            if value:
                setattr(keys, f.name, value)

        if env.get(ENV_PREFIX + "LOG_DIR"):
            paths = PathConfig(log_dir=Path(env[ENV_PREFIX + "LOG_DIR"]))

        settings = cls(
            tools=tools,
            export=export,
            keys=keys,
            paths=paths,
            log_level=(log_level or env.get(ENV_PREFIX + "LOG_LEVEL") or "INFO").upper(),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Validate all configuration settings."""
        validate_tool_config(self.tools)
        validate_export_config(self.export)
        validate_key_bindings(self.keys)
        validate_path_config(self.paths)
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}", module="config")

    def build_catalog(self) -> ProfileCatalog:
        """Profile catalog in configured order."""
        return catalog_from_ids(self.export.profiles)
