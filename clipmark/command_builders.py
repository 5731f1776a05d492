"""Helper functions for building ffmpeg commands"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import InvalidRangeError, UnsupportedEncoderError
from .profiles import STREAM_COPY
from .session import ExportRequest

log = logging.getLogger(__name__)

AUDIO_ENCODER = "aac"
AUDIO_BITRATE = "192k"

# Stream copies of these codecs get tagged hvc1 so MP4 players accept them
HEVC_CODEC_NAMES = ("hevc", "h265", "h.265")
HEVC_TAG = ["-tag:v", "hvc1"]

SUPPORTED_VIDEO_ENCODERS = frozenset({
    "libx264", "libx265", "libsvtav1", "libaom-av1", "libvpx-vp9",
    "h264_nvenc", "hevc_nvenc", "av1_nvenc",
    "h264_qsv", "hevc_qsv", "av1_qsv",
    "h264_amf", "hevc_amf",
    "h264_vaapi", "hevc_vaapi",
    "h264_videotoolbox", "hevc_videotoolbox",
})


def is_hevc(codec: Optional[str]) -> bool:
    """True if a probed codec name identifies HEVC/H.265."""
    if not codec:
        return False
    codec = codec.lower()
    return any(name in codec for name in HEVC_CODEC_NAMES)


def build_export_command(
    request: ExportRequest,
    output_file: Union[str, Path],
    probed_codec: Optional[str] = None,
    executable: str = "ffmpeg",
) -> List[str]:
    """
    Build the ffmpeg command for exporting a clip.

    The seek goes before the input so ffmpeg seeks by keyframe index
    instead of decoding up to the start mark.

    Args:
        request: Export snapshot holding source, marks and profile
        output_file: Path of the clip to write
        probed_codec: Source video codec, or None if probing failed
        executable: ffmpeg executable to invoke

    Returns:
        Argument vector for the encoder process

    Raises:
        InvalidRangeError: If both marks are set and end is not after start
        UnsupportedEncoderError: If the profile names an unknown encoder
    """
    duration = None
    if request.start is not None and request.end is not None:
        if request.end <= request.start:
            raise InvalidRangeError("End must be after start")
        duration = request.end - request.start

    cmd = [executable, "-hide_banner", "-loglevel", "error", "-y"]
    if request.start is not None:
        cmd.extend(["-ss", f"{request.start:.6f}"])
    cmd.extend(["-i", str(request.source_path)])
    if duration is not None:
        cmd.extend(["-t", f"{duration:.6f}"])

    profile = request.profile
    if profile.id == STREAM_COPY:
        cmd.extend(["-c:v", "copy"])
        if is_hevc(probed_codec):
            cmd.extend(HEVC_TAG)
        cmd.extend(["-c:a", "copy"])
    elif profile.id in SUPPORTED_VIDEO_ENCODERS:
        cmd.extend(["-c:v", profile.id])
        cmd.extend(profile.options)
        cmd.extend(["-c:a", AUDIO_ENCODER, "-b:a", AUDIO_BITRATE])
    else:
        raise UnsupportedEncoderError(profile.id)

    cmd.append(str(output_file))
    log.debug("Built export command: %s", cmd)
    return cmd
