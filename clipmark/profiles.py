"""Encoder profile catalog

Responsibilities:
- Define the encoder profiles offered while clip mode is engaged
- Keep the catalog ordered and non-empty
- Resolve profile selection by index with wraparound
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

STREAM_COPY = "copy"


@dataclass(frozen=True)
class EncoderProfile:
    """
    A named encoder configuration.

    Attributes:
        id: ffmpeg video encoder name, or ``copy`` for stream copy
        label: Human readable name shown on screen
        options: Extra encoder arguments, in the order they are passed
    """
    id: str
    label: str
    options: Tuple[str, ...] = ()

    @property
    def is_stream_copy(self) -> bool:
        return self.id == STREAM_COPY


DEFAULT_PROFILES: Tuple[EncoderProfile, ...] = (
    EncoderProfile(STREAM_COPY, "copy (no re-encode)"),
    EncoderProfile("libx264", "libx264 (x264)", ("-preset", "medium", "-crf", "18")),
    EncoderProfile("h264_nvenc", "h264_nvenc (NVENC)", ("-rc", "vbr", "-cq", "18", "-preset", "p4")),
    EncoderProfile("h264_videotoolbox", "h264_videotoolbox (VideoToolbox - Apple)", ("-profile:v", "high")),
    EncoderProfile("libx265", "libx265 (x265)", ("-preset", "medium", "-crf", "22", "-tag:v", "hvc1")),
    EncoderProfile("hevc_nvenc", "hevc_nvenc (NVENC)", ("-rc", "vbr", "-cq", "22", "-preset", "p4", "-tag:v", "hvc1")),
)


class ProfileCatalog:
    """Fixed, ordered, non-empty sequence of encoder profiles."""

    def __init__(self, profiles: Iterable[EncoderProfile] = DEFAULT_PROFILES):
        self._profiles = tuple(profiles)
        if not self._profiles:
            raise ConfigError("Encoder profile catalog must not be empty", module="profiles")

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[EncoderProfile]:
        return iter(self._profiles)

    def __repr__(self) -> str:
        return f"ProfileCatalog({[p.id for p in self._profiles]!r})"

    def at(self, index: int) -> EncoderProfile:
        """Return the profile at ``index``, wrapping around the catalog length."""
        return self._profiles[index % len(self._profiles)]

    def index_of(self, profile_id: str) -> Optional[int]:
        for i, profile in enumerate(self._profiles):
            if profile.id == profile_id:
                return i
        return None

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self._profiles)


def catalog_from_ids(ids: Iterable[str]) -> ProfileCatalog:
    """
    Build a catalog from profile identifiers.

    Identifiers matching a default profile reuse its label and options;
    any other identifier becomes a bare profile with no extra options.

    Raises:
        ConfigError: If no identifiers are given
    """
    known = {p.id: p for p in DEFAULT_PROFILES}
    profiles = []
    for profile_id in ids:
        profile_id = profile_id.strip()
        if not profile_id:
            continue
        if profile_id in known:
            profiles.append(known[profile_id])
        else:
            logger.debug("Using bare profile for encoder %s", profile_id)
            profiles.append(EncoderProfile(profile_id, profile_id))
    return ProfileCatalog(profiles)
