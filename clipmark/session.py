"""Clip mode session state

Responsibilities:
- Track whether clip mode is engaged
- Hold the start/end marks and the selected encoder profile
- Guard every mutation so nothing changes while the mode is off
- Produce immutable export snapshots and the on-screen status text

All methods are expected to be called from the player's event thread;
the playback position is passed in rather than read from the player.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .profiles import EncoderProfile, ProfileCatalog
from .utils import format_hms

logger = logging.getLogger(__name__)

UNSET_MARK = "--:--:--"


class DisplayAction(Enum):
    """What the presentation layer should do after a state change."""
    NONE = auto()
    REFRESH = auto()
    CLEAR = auto()


class Direction(Enum):
    PREVIOUS = -1
    NEXT = 1


@dataclass(frozen=True)
class ExportRequest:
    """Snapshot of the session taken when export is invoked."""
    source_path: Optional[str]
    start: Optional[float]
    end: Optional[float]
    profile: EncoderProfile


class SessionState:
    """
    Two-state machine (inactive/active) for clip mode.

    Only ``toggle`` moves between the states. ``set_start``, ``set_end``
    and ``cycle_profile`` are no-ops while inactive, so a stray key event
    can never touch the marks or the profile selection.
    """

    def __init__(self, catalog: Optional[ProfileCatalog] = None):
        self.catalog = catalog or ProfileCatalog()
        self.active = False
        self.start: Optional[float] = None
        self.end: Optional[float] = None
        self.profile_index = 0
        self.source_path: Optional[str] = None

    @property
    def profile(self) -> EncoderProfile:
        return self.catalog.at(self.profile_index)

    def toggle(self, source_path: Optional[str] = None) -> DisplayAction:
        """
        Engage or leave clip mode.

        Entering resets both marks and the profile selection and records
        ``source_path``. Leaving keeps the stored values; they are reset
        on the next entry anyway.
        """
        self.active = not self.active
        if self.active:
            self.start = None
            self.end = None
            self.profile_index = 0
            self.source_path = source_path
            logger.info("Clip mode enabled for: %s", source_path)
            return DisplayAction.REFRESH
        logger.info("Clip mode disabled")
        return DisplayAction.CLEAR

    def set_start(self, now_seconds: float) -> DisplayAction:
        if not self.active:
            return DisplayAction.NONE
        self.start = now_seconds
        logger.info("Clip start set: %s", now_seconds)
        return DisplayAction.REFRESH

    def set_end(self, now_seconds: float) -> DisplayAction:
        if not self.active:
            return DisplayAction.NONE
        self.end = now_seconds
        logger.info("Clip end set: %s", now_seconds)
        return DisplayAction.REFRESH

    def cycle_profile(self, direction: Direction) -> DisplayAction:
        """Select the previous or next profile, wrapping at either end."""
        if not self.active:
            return DisplayAction.NONE
        self.profile_index = (self.profile_index + direction.value) % len(self.catalog)
        logger.info("Selected encoder: %s", self.profile.id)
        return DisplayAction.REFRESH

    def snapshot_for_export(self, source_path: Optional[str] = None) -> Optional[ExportRequest]:
        """
        Build an ExportRequest from the current fields.

        Marks are not validated here. ``source_path`` is used only when no
        path was recorded on entering the mode.
        """
        if not self.active:
            return None
        if self.source_path is None and source_path is not None:
            self.source_path = source_path
        return ExportRequest(
            source_path=self.source_path,
            start=self.start,
            end=self.end,
            profile=self.profile,
        )

    def status_text(self) -> str:
        """Profile label and marks, one per line, as shown on screen."""
        if not self.active:
            return ""
        start = format_hms(self.start) if self.start is not None else UNSET_MARK
        end = format_hms(self.end) if self.end is not None else UNSET_MARK
        return f"{self.profile.label}\nstart: {start}\nend: {end}"
