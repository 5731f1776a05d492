"""Export outcome types

Every export resolves to exactly one of these values. They are consumed
by the presentation layer and by logging; none of them touch the session.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class ExportOutcome:
    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class ExportSuccess(ExportOutcome):
    output_path: Path

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ProcessFailed(ExportOutcome):
    """ffmpeg ran but exited with a non-zero status."""
    exit_code: int
    args: List[str] = field(default_factory=list)
    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True)
class LaunchFailed(ExportOutcome):
    """ffmpeg could not be found or started."""
    reason: str


@dataclass(frozen=True)
class ValidationFailed(ExportOutcome):
    """The export request was rejected before anything was launched."""
    reason: str
