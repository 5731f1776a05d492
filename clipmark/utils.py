"""Utility functions for clipmark"""

import logging
import subprocess
from datetime import datetime
from typing import List, Optional

from .exceptions import ProcessError

logger = logging.getLogger(__name__)


def run_cmd(cmd: List[str], timeout: Optional[float] = None,
            check: bool = True) -> subprocess.CompletedProcess:
    """
    Run a short-lived command and capture its output.

    Args:
        cmd: Argument vector, executed without a shell
        timeout: Seconds to wait before giving up
        check: Raise ProcessError on a non-zero exit status

    Raises:
        OSError: If the executable cannot be started
        subprocess.TimeoutExpired: If the command outlives ``timeout``
        ProcessError: If ``check`` is set and the command fails
    """
    logger.debug("Running command: %s", " ".join(cmd))
    result = subprocess.run(
        cmd,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
    )
    if result.stdout:
        logger.debug("Command stdout: %s", result.stdout.strip())
    if result.stderr:
        logger.debug("Command stderr: %s", result.stderr.strip())
    if check and result.returncode != 0:
        raise ProcessError(
            f"Command exited with status {result.returncode}: {cmd[0]}",
            exit_code=result.returncode,
            output=result.stderr,
            module="utils",
        )
    return result


def get_timestamp() -> str:
    """Get current timestamp in YYYYMMDD_HHMMSS format"""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def format_hms(seconds: float) -> str:
    """Format seconds for display as HH:MM:SS, rounded to the nearest second"""
    s = max(0, int(seconds + 0.5))
    return f"{s // 3600:02d}:{(s % 3600) // 60:02d}:{s % 60:02d}"
