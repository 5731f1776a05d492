"""Clip export orchestration

Responsibilities:
- Snapshot the session and reject incomplete requests up front
- Locate ffmpeg, probe the source when stream copying, build the command
- Launch ffmpeg and wait for it on a worker thread
- Record failed runs in the diagnostic log

``ExportCoordinator.export`` returns a Future that resolves to an
ExportOutcome. Requests rejected before launch come back as futures
that are already done.
"""

import logging
import subprocess
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional

from .command_builders import build_export_command
from .config import Settings
from .exceptions import LaunchError, MissingMarkError, ValidationError
from .ffprobe import ProbeClient
from .outcomes import (
    ExportOutcome, ExportSuccess, LaunchFailed,
    ProcessFailed, ValidationFailed,
)
from .paths import build_output_path
from .resolver import ExecutableResolver
from .session import ExportRequest, SessionState
from .utils import get_timestamp

logger = logging.getLogger(__name__)


def _done(outcome: ExportOutcome) -> "Future[ExportOutcome]":
    future: "Future[ExportOutcome]" = Future()
    future.set_result(outcome)
    return future


def check_marks(request: ExportRequest) -> None:
    """
    Raises:
        MissingMarkError: If the source or either mark is missing
    """
    if not request.source_path:
        raise MissingMarkError("No input file to export", module="coordinator")
    if request.start is None:
        raise MissingMarkError("Start time not set", module="coordinator")
    if request.end is None:
        raise MissingMarkError("End time not set", module="coordinator")


def write_diagnostic_log(path: Path, outcome: ProcessFailed) -> None:
    """Overwrite the diagnostic log with the failed command and its result."""
    lines = [
        f"clipmark export failure at {get_timestamp()}",
        f"exit code: {outcome.exit_code}",
        "",
        "arguments:",
        *(f"  {arg}" for arg in outcome.args),
        "",
        "stdout:",
        outcome.stdout.rstrip(),
        "",
        "stderr:",
        outcome.stderr.rstrip(),
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")


class ExportCoordinator:
    """Runs clip exports in the background."""

    def __init__(
        self,
        settings: Settings,
        ffmpeg_resolver: Optional[ExecutableResolver] = None,
        probe_client: Optional[ProbeClient] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.settings = settings
        self.ffmpeg_resolver = ffmpeg_resolver or ExecutableResolver(
            "ffmpeg",
            configured=settings.tools.ffmpeg,
            timeout=settings.tools.resolve_timeout,
        )
        self.probe_client = probe_client or ProbeClient(
            ExecutableResolver(
                "ffprobe",
                configured=settings.tools.ffprobe,
                timeout=settings.tools.resolve_timeout,
            ),
            timeout=settings.tools.probe_timeout,
        )
        self.executor = executor or ThreadPoolExecutor(
            max_workers=settings.export.max_workers,
            thread_name_prefix="clipmark-export",
        )

    @property
    def diagnostic_log(self) -> Optional[Path]:
        return self.settings.export.diagnostic_log

    def export(
        self,
        state: SessionState,
        source_resolver: Optional[Callable[[], Optional[str]]] = None,
    ) -> "Optional[Future[ExportOutcome]]":
        """
        Export the clip currently marked in ``state``.

        Args:
            state: Session to snapshot
            source_resolver: Called for the media path when none was
                recorded on entering clip mode

        Returns:
            None when clip mode is off, otherwise a Future of the outcome
        """
        if not state.active:
            return None

        current_source = None
        if state.source_path is None and source_resolver is not None:
            current_source = source_resolver()
        request = state.snapshot_for_export(current_source)

        try:
            check_marks(request)
        except ValidationError as e:
            logger.info("Export rejected: %s", e.reason)
            return _done(ValidationFailed(e.reason))

        output_path = build_output_path(request)

        try:
            ffmpeg = self.ffmpeg_resolver.resolve()
        except LaunchError as e:
            logger.error("Export failed: %s", e.message)
            return _done(LaunchFailed(e.message))

        probed_codec = None
        if request.profile.is_stream_copy:
            probed_codec = self.probe_client.probe_video_codec(request.source_path)

        try:
            cmd = build_export_command(request, output_path, probed_codec, executable=ffmpeg)
        except ValidationError as e:
            logger.info("Export rejected: %s", e.reason)
            return _done(ValidationFailed(e.reason))

        logger.info("Starting clip export: %s", output_path)
        logger.debug("Export command: %s", " ".join(cmd))
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error("Could not start %s: %s", ffmpeg, e)
            return _done(LaunchFailed(f"Could not start {ffmpeg}: {e}"))

        return self.executor.submit(self._wait, process, cmd, output_path)

    def _wait(self, process: subprocess.Popen, cmd: List[str], output_path: Path) -> ExportOutcome:
        try:
            stdout, stderr = process.communicate()
        except Exception as e:
            # The process did launch; report it as a failed run
            logger.exception("Lost track of export process for %s", output_path)
            if process.poll() is None:
                process.kill()
                process.wait()
            outcome = ProcessFailed(
                exit_code=process.returncode if process.returncode is not None else -1,
                args=list(cmd),
                stderr=f"{type(e).__name__}: {e}",
            )
            self._record_failure(outcome)
            return outcome

        if process.returncode == 0:
            logger.info("Export finished: %s", output_path)
            return ExportSuccess(output_path)

        outcome = ProcessFailed(
            exit_code=process.returncode,
            args=list(cmd),
            stdout=stdout or "",
            stderr=stderr or "",
        )
        logger.error("Export failed with exit code %s: %s", process.returncode, output_path)
        self._record_failure(outcome)
        return outcome

    def _record_failure(self, outcome: ProcessFailed) -> None:
        if self.diagnostic_log is None:
            return
        try:
            write_diagnostic_log(self.diagnostic_log, outcome)
            logger.info("Wrote export diagnostics to %s", self.diagnostic_log)
        except OSError as e:
            logger.debug("Could not write diagnostic log %s: %s", self.diagnostic_log, e)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting exports; with ``wait`` block until running ones finish."""
        self.executor.shutdown(wait=wait)
