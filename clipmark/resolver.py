"""External tool location

Finds the ffmpeg/ffprobe executables once per session. A configured
path always wins; otherwise a fixed list of common install locations is
tried in order by running each candidate with ``-version``.
"""

import logging
import shutil
import subprocess
import threading
from typing import List, Optional, Sequence

from .exceptions import LaunchError, ProcessError
from .utils import run_cmd

logger = logging.getLogger(__name__)

INSTALL_DIRS = (
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/usr/bin",
    "/opt/local/bin",
    "/snap/bin",
)
WINDOWS_INSTALL_DIR = "C:\\ffmpeg\\bin"


def default_candidates(name: str) -> List[str]:
    """Ordered locations to try for a tool called ``name``."""
    candidates = []
    on_path = shutil.which(name)
    if on_path:
        candidates.append(on_path)
    candidates.append(name)
    candidates.extend(f"{directory}/{name}" for directory in INSTALL_DIRS)
    candidates.append(f"{WINDOWS_INSTALL_DIR}\\{name}.exe")
    # Keep first occurrence only
    return list(dict.fromkeys(candidates))


class ExecutableResolver:
    """
    Resolve and cache the location of an external tool.

    The first successful resolution is kept for the lifetime of the
    resolver. Failures are not cached, so a later export can still find a
    tool installed in the meantime.
    """

    def __init__(
        self,
        name: str,
        configured: Optional[str] = None,
        candidates: Optional[Sequence[str]] = None,
        timeout: float = 5.0,
    ):
        self.name = name
        self.configured = configured
        self.candidates = list(candidates) if candidates is not None else None
        self.timeout = timeout
        self._resolved: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def resolved(self) -> Optional[str]:
        return self._resolved

    def _works(self, candidate: str) -> bool:
        try:
            run_cmd([candidate, "-version"], timeout=self.timeout)
        except (OSError, subprocess.TimeoutExpired, ProcessError) as e:
            logger.debug("%s candidate %s rejected: %s", self.name, candidate, e)
            return False
        return True

    def resolve(self) -> str:
        """
        Return the executable path.

        Raises:
            LaunchError: If no candidate could be run
        """
        with self._lock:
            if self._resolved is not None:
                return self._resolved
            if self.configured:
                logger.debug("Using configured %s: %s", self.name, self.configured)
                self._resolved = self.configured
                return self._resolved

            candidates = self.candidates if self.candidates is not None else default_candidates(self.name)
            for candidate in candidates:
                if self._works(candidate):
                    logger.info("Found %s at %s", self.name, candidate)
                    self._resolved = candidate
                    return self._resolved

        raise LaunchError(
            f"Could not find {self.name}; tried {', '.join(candidates)}",
            module="resolver",
        )
