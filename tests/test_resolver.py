"""Unit tests for executable resolution"""

import subprocess
import unittest
from unittest.mock import patch

from clipmark.exceptions import LaunchError
from clipmark.resolver import ExecutableResolver, default_candidates


def _completed(returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout="", stderr="")


class TestExecutableResolver(unittest.TestCase):
    @patch("clipmark.utils.subprocess.run")
    def test_configured_path_wins(self, mock_run):
        resolver = ExecutableResolver("ffmpeg", configured="/opt/ffmpeg/ffmpeg", candidates=["ffmpeg"])
        self.assertEqual(resolver.resolve(), "/opt/ffmpeg/ffmpeg")
        mock_run.assert_not_called()

    @patch("clipmark.utils.subprocess.run")
    def test_first_working_candidate(self, mock_run):
        mock_run.side_effect = [FileNotFoundError("a"), _completed(1), _completed(0)]
        resolver = ExecutableResolver("ffmpeg", candidates=["/a/ffmpeg", "/b/ffmpeg", "/c/ffmpeg"])
        self.assertEqual(resolver.resolve(), "/c/ffmpeg")
        self.assertEqual(mock_run.call_args[0][0], ["/c/ffmpeg", "-version"])

    @patch("clipmark.utils.subprocess.run")
    def test_result_is_cached(self, mock_run):
        mock_run.return_value = _completed(0)
        resolver = ExecutableResolver("ffmpeg", candidates=["/a/ffmpeg", "/b/ffmpeg"])
        resolver.resolve()
        resolver.resolve()
        self.assertEqual(mock_run.call_count, 1)
        self.assertEqual(resolver.resolved, "/a/ffmpeg")

    @patch("clipmark.utils.subprocess.run")
    def test_none_found(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="ffmpeg", timeout=5)
        resolver = ExecutableResolver("ffmpeg", candidates=["/a/ffmpeg"])
        with self.assertRaises(LaunchError):
            resolver.resolve()
        self.assertIsNone(resolver.resolved)

    @patch("clipmark.resolver.shutil.which", return_value="/usr/bin/ffprobe")
    def test_default_candidates(self, _mock_which):
        candidates = default_candidates("ffprobe")
        self.assertEqual(candidates[0], "/usr/bin/ffprobe")
        self.assertIn("/opt/homebrew/bin/ffprobe", candidates)
        self.assertEqual(len(candidates), len(set(candidates)))
        self.assertTrue(candidates[-1].endswith("ffprobe.exe"))


if __name__ == "__main__":
    unittest.main()
