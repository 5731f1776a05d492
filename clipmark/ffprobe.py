"""ffprobe command execution utilities

Responsibilities:
- Query single stream properties in ffprobe's plain-text form
- Map tool failures to MetadataError
- Offer a best-effort video codec probe that never raises
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from .exceptions import LaunchError, MetadataError, ProcessError
from .utils import run_cmd

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0


def get_stream_property(
    path: Union[str, Path],
    property_name: str,
    stream_type: str = "video",
    stream_index: int = 0,
    executable: str = "ffprobe",
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> str:
    """
    Get a single stream property as text.

    Args:
        path: Path to media file
        property_name: Name of the stream entry to fetch (e.g. codec_name)
        stream_type: Type of stream ("video", "audio" or "subtitle")
        stream_index: Stream index (default 0)
        executable: ffprobe executable to invoke
        timeout: Seconds to wait for ffprobe

    Raises:
        MetadataError: If the property cannot be retrieved
    """
    type_prefix = stream_type[0]  # v for video, a for audio, s for subtitle
    cmd = [
        executable, "-v", "error",
        "-select_streams", f"{type_prefix}:{stream_index}",
        "-show_entries", f"stream={property_name}",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]
    try:
        result = run_cmd(cmd, timeout=timeout)
    except OSError as e:
        raise MetadataError(f"Could not run {executable}: {e}", property_name) from e
    except subprocess.TimeoutExpired as e:
        raise MetadataError(f"{executable} timed out after {timeout}s", property_name) from e
    except ProcessError as e:
        raise MetadataError(f"Could not get {property_name}: {e.output.strip()}", property_name) from e
    except ValueError as e:
        # Includes UnicodeDecodeError
        raise MetadataError(f"Unreadable output from {executable}: {e}", property_name) from e

    # Only the first line matters when a stream reports several values
    lines = result.stdout.strip().splitlines()
    value = lines[0].strip() if lines else ""
    if not value or value.lower() in ("n/a", "unknown"):
        raise MetadataError(f"No valid value found for {property_name}", property_name)
    return value


class ProbeClient:
    """Looks up source properties through ffprobe."""

    def __init__(self, resolver=None, timeout: float = DEFAULT_PROBE_TIMEOUT):
        self.resolver = resolver
        self.timeout = timeout

    def _executable(self) -> str:
        if self.resolver is None:
            return "ffprobe"
        return self.resolver.resolve()

    def probe_video_codec(self, path: Union[str, Path]) -> Optional[str]:
        """Return the first video stream's codec name, or None on any failure."""
        try:
            codec = get_stream_property(
                path, "codec_name", "video",
                executable=self._executable(),
                timeout=self.timeout,
            )
        except (LaunchError, MetadataError) as e:
            logger.debug("Video codec probe failed for %s: %s", path, e)
            return None
        logger.debug("Probed video codec for %s: %s", path, codec)
        return codec
