"""Type definitions for clipmark configuration."""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..profiles import DEFAULT_PROFILES


@dataclass
class ToolConfig:
    """Locations and limits for the external tools."""
    ffmpeg: Optional[str] = None
    ffprobe: Optional[str] = None
    probe_timeout: float = 5.0  # Seconds
    resolve_timeout: float = 5.0  # Seconds per candidate


@dataclass
class ExportConfig:
    """Configuration for clip exports."""
    profiles: Tuple[str, ...] = tuple(p.id for p in DEFAULT_PROFILES)
    diagnostic_log: Optional[Path] = None
    max_workers: int = 2

    def __post_init__(self) -> None:
        if isinstance(self.diagnostic_log, str):
            self.diagnostic_log = Path(self.diagnostic_log)


@dataclass
class KeyBindings:
    """mpv key names for each clip mode command."""
    toggle: str = "C"
    set_start: str = "1"
    set_end: str = "2"
    previous_profile: str = "LEFT"
    next_profile: str = "RIGHT"
    export: str = "e"

    def mode_keys(self) -> Dict[str, str]:
        """Keys bound only while clip mode is engaged, by action name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "toggle"}

    def all_keys(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class PathConfig:
    """Configuration for log locations."""
    log_dir: Path = field(default_factory=lambda: Path.home() / "clipmark_logs")

    def __post_init__(self) -> None:
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)
