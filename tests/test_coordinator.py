"""Tests for export orchestration"""
import sys
from pathlib import Path

import pytest

from clipmark.coordinator import ExportCoordinator
from clipmark.exceptions import LaunchError
from clipmark.outcomes import ExportSuccess, LaunchFailed, ProcessFailed, ValidationFailed
from clipmark.resolver import ExecutableResolver
from clipmark.session import Direction, SessionState

SOURCE = "/media/movies/movie.mkv"


@pytest.fixture
def probe_client(mocker):
    client = mocker.MagicMock()
    client.probe_video_codec.return_value = "hevc"
    return client


@pytest.fixture
def ffmpeg_resolver(mocker):
    resolver = mocker.MagicMock()
    resolver.resolve.return_value = "/opt/ffmpeg/bin/ffmpeg"
    return resolver


@pytest.fixture
def coordinator(settings, ffmpeg_resolver, probe_client):
    coordinator = ExportCoordinator(settings, ffmpeg_resolver=ffmpeg_resolver, probe_client=probe_client)
    yield coordinator
    coordinator.shutdown()


@pytest.fixture
def popen(mocker):
    process = mocker.MagicMock()
    process.communicate.return_value = ("", "")
    process.returncode = 0
    return mocker.patch("clipmark.coordinator.subprocess.Popen", return_value=process)


def _select(state, profile_id):
    while state.profile.id != profile_id:
        state.cycle_profile(Direction.NEXT)


def test_inactive_is_noop(settings, coordinator, popen, probe_client):
    state = SessionState(settings.build_catalog())
    assert coordinator.export(state) is None
    popen.assert_not_called()
    probe_client.probe_video_codec.assert_not_called()


def test_stream_copy_export(active_state, coordinator, popen, probe_client):
    active_state.set_start(65.0)
    active_state.set_end(125.4)

    outcome = coordinator.export(active_state).result(timeout=5)

    assert outcome == ExportSuccess(Path("/media/movies/movie_clip_65-125_copy.mp4"))
    probe_client.probe_video_codec.assert_called_once_with(SOURCE)
    cmd = popen.call_args[0][0]
    assert cmd[0] == "/opt/ffmpeg/bin/ffmpeg"
    assert cmd[cmd.index("-ss") + 1] == "65.000000"
    assert cmd.index("-ss") < cmd.index("-i")
    assert cmd[cmd.index("-t") + 1] == "60.400000"
    assert cmd[cmd.index("-c:v") + 1] == "copy"
    assert cmd[cmd.index("-tag:v") + 1] == "hvc1"
    assert cmd[cmd.index("-c:a") + 1] == "copy"
    assert cmd[-1] == "/media/movies/movie_clip_65-125_copy.mp4"


def test_missing_marks_rejected_without_side_effects(active_state, coordinator, popen,
                                                       probe_client, ffmpeg_resolver, mocker):
    build = mocker.patch("clipmark.coordinator.build_export_command")
    _select(active_state, "libx264")

    future = coordinator.export(active_state)

    assert future.done()
    assert future.result() == ValidationFailed("Start time not set")
    probe_client.probe_video_codec.assert_not_called()
    build.assert_not_called()
    popen.assert_not_called()


def test_missing_end_mark(active_state, coordinator, popen):
    active_state.set_start(10.0)
    assert coordinator.export(active_state).result() == ValidationFailed("End time not set")


def test_missing_source(settings, coordinator, popen):
    state = SessionState(settings.build_catalog())
    state.toggle(None)
    state.set_start(1.0)
    state.set_end(2.0)
    outcome = coordinator.export(state, source_resolver=lambda: None).result()
    assert outcome == ValidationFailed("No input file to export")


def test_source_resolved_at_export_time(settings, coordinator, popen):
    state = SessionState(settings.build_catalog())
    state.toggle(None)
    state.set_start(1.0)
    state.set_end(2.0)
    outcome = coordinator.export(state, source_resolver=lambda: SOURCE).result(timeout=5)
    assert outcome == ExportSuccess(Path("/media/movies/movie_clip_1-2_copy.mp4"))


def test_invalid_range(active_state, coordinator, popen):
    active_state.set_start(30.0)
    active_state.set_end(30.0)
    outcome = coordinator.export(active_state).result()
    assert outcome == ValidationFailed("End must be after start")
    popen.assert_not_called()


def test_reencode_skips_probe(active_state, coordinator, popen, probe_client):
    _select(active_state, "libx264")
    active_state.set_start(0.0)
    active_state.set_end(5.0)
    outcome = coordinator.export(active_state).result(timeout=5)
    assert outcome.ok
    probe_client.probe_video_codec.assert_not_called()
    cmd = popen.call_args[0][0]
    assert cmd[cmd.index("-c:a") + 1] == "aac"


def test_ffmpeg_not_found(active_state, coordinator, popen, ffmpeg_resolver):
    ffmpeg_resolver.resolve.side_effect = LaunchError("Could not find ffmpeg", module="resolver")
    active_state.set_start(0.0)
    active_state.set_end(5.0)
    outcome = coordinator.export(active_state).result()
    assert isinstance(outcome, LaunchFailed)
    popen.assert_not_called()


def test_spawn_failure(active_state, coordinator, popen):
    popen.side_effect = PermissionError("not executable")
    active_state.set_start(0.0)
    active_state.set_end(5.0)
    outcome = coordinator.export(active_state).result()
    assert isinstance(outcome, LaunchFailed)
    assert "not executable" in outcome.reason


def test_process_failure_writes_diagnostic_log(active_state, coordinator, popen, settings):
    popen.return_value.returncode = 1
    popen.return_value.communicate.return_value = ("", "Invalid data found when processing input")
    settings.export.diagnostic_log.write_text("stale record")
    active_state.set_start(65.0)
    active_state.set_end(125.4)

    outcome = coordinator.export(active_state).result(timeout=5)

    assert isinstance(outcome, ProcessFailed)
    assert outcome.exit_code == 1
    assert outcome.args == popen.call_args[0][0]
    log_text = settings.export.diagnostic_log.read_text()
    assert "stale record" not in log_text
    assert "exit code: 1" in log_text
    assert "  -ss" in log_text
    assert "  /media/movies/movie_clip_65-125_copy.mp4" in log_text
    assert "Invalid data found when processing input" in log_text


def test_diagnostic_log_failure_is_not_raised(active_state, coordinator, popen, settings, tmp_path):
    popen.return_value.returncode = 1
    settings.export.diagnostic_log = tmp_path / "missing_dir" / "error.log"
    active_state.set_start(0.0)
    active_state.set_end(5.0)
    outcome = coordinator.export(active_state).result(timeout=5)
    assert isinstance(outcome, ProcessFailed)
    assert not settings.export.diagnostic_log.exists()


def test_concurrent_exports_are_independent(active_state, coordinator, popen):
    active_state.set_start(0.0)
    active_state.set_end(5.0)
    first = coordinator.export(active_state)
    active_state.set_end(8.0)
    second = coordinator.export(active_state)
    assert first.result(timeout=5).output_path.name == "movie_clip_0-5_copy.mp4"
    assert second.result(timeout=5).output_path.name == "movie_clip_0-8_copy.mp4"
    assert popen.call_count == 2


def test_lost_process_still_fails_cleanly(active_state, coordinator, popen, settings):
    process = popen.return_value
    process.communicate.side_effect = ValueError("I/O operation on closed file")
    process.poll.return_value = None
    process.returncode = -9
    active_state.set_start(0.0)
    active_state.set_end(5.0)

    outcome = coordinator.export(active_state).result(timeout=5)

    assert isinstance(outcome, ProcessFailed)
    assert outcome.exit_code == -9
    assert "closed file" in outcome.stderr
    process.kill.assert_called_once()
    assert "closed file" in settings.export.diagnostic_log.read_text()


def _write_script(path, body):
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(0o755)
    return path


@pytest.fixture
def script_coordinator(settings, probe_client, tmp_path):
    built = []

    def factory(body):
        ffmpeg = _write_script(tmp_path / "ffmpeg", body)
        resolver = ExecutableResolver("ffmpeg", configured=str(ffmpeg))
        coordinator = ExportCoordinator(settings, ffmpeg_resolver=resolver, probe_client=probe_client)
        built.append(coordinator)
        return coordinator

    yield factory
    for coordinator in built:
        coordinator.shutdown()


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
def test_real_process_success(active_state, script_coordinator):
    coordinator = script_coordinator("echo encoding\nexit 0\n")
    active_state.set_start(65.0)
    active_state.set_end(125.4)

    outcome = coordinator.export(active_state).result(timeout=10)

    assert outcome == ExportSuccess(Path("/media/movies/movie_clip_65-125_copy.mp4"))


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
def test_real_process_undecodable_stderr(active_state, script_coordinator, settings):
    coordinator = script_coordinator("printf 'bad \\377\\376 name\\n' >&2\nexit 1\n")
    active_state.set_start(0.0)
    active_state.set_end(5.0)

    outcome = coordinator.export(active_state).result(timeout=10)

    assert isinstance(outcome, ProcessFailed)
    assert outcome.exit_code == 1
    assert "bad" in outcome.stderr
    assert "�" in outcome.stderr
    log_text = settings.export.diagnostic_log.read_text(encoding="utf-8")
    assert "exit code: 1" in log_text
    assert "bad" in log_text
