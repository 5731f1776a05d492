"""Path handling utilities for clipmark."""
import math
import os
import re
from pathlib import Path

from .session import ExportRequest

CLIP_INFIX = "_clip_"
OUTPUT_EXTENSION = ".mp4"
PLACEHOLDER = "_"

# Characters rejected by Windows, macOS or Linux filesystems
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists and is writable, creating it if needed.

    Args:
        path: The directory path to check/create

    Returns:
        The resolved path

    Raises:
        ValueError: If the path exists but is not a directory or not writable
                  or cannot be created
    """
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValueError(f"Cannot create directory '{path}': {e}")
    elif not path.is_dir():
        raise ValueError(f"Path exists but is not a directory: {path}")
    elif not os.access(path, os.W_OK):
        raise ValueError(f"Directory exists but is not writable: {path}")

    return path.resolve()


def format_mark(seconds: float) -> str:
    """Render a mark as whole, non-negative seconds for use in filenames."""
    return str(max(0, math.floor(seconds)))


def sanitize_filename(name: str, placeholder: str = PLACEHOLDER) -> str:
    """Replace characters that are illegal in common filesystems.

    Applying it twice yields the same result as applying it once.
    """
    return _ILLEGAL_CHARS.sub(placeholder, name)


def build_output_path(request: ExportRequest) -> Path:
    """Resolve the clip path next to the source file.

    The name is ``<base>_clip_<start>-<end>_<profile><ext>``.
    Both marks and the source path must be set.
    """
    source = Path(request.source_path)
    name = (
        f"{source.stem}{CLIP_INFIX}"
        f"{format_mark(request.start)}-{format_mark(request.end)}"
        f"_{request.profile.id}{OUTPUT_EXTENSION}"
    )
    return source.parent / sanitize_filename(name)
