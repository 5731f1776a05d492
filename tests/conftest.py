import os
import sys

import pytest

# Ensure the project root is on sys.path so the package is importable without
# an editable install.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from clipmark.config import Settings  # noqa: E402
from clipmark.session import SessionState  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the caller's environment."""
    env = {
        "CLIPMARK_FFMPEG": "/opt/ffmpeg/bin/ffmpeg",
        "CLIPMARK_FFPROBE": "/opt/ffmpeg/bin/ffprobe",
        "CLIPMARK_LOG_DIR": str(tmp_path / "logs"),
        "CLIPMARK_DIAGNOSTIC_LOG": str(tmp_path / "clipmark_export_error.log"),
    }
    return Settings.from_environment(env=env)


@pytest.fixture
def active_state(settings):
    """An engaged session on movie.mkv."""
    state = SessionState(settings.build_catalog())
    state.toggle("/media/movies/movie.mkv")
    return state
