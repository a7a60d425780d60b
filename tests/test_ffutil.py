"""Unit tests for ffutil — duration parsing and the Transcoder wrappers."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from fakes import FakeRunner, completed
from speechsplit.errors import (
    FFmpegInterruptedError,
    FFmpegNotFoundError,
    FFmpegProcessError,
    MalformedProbeOutputError,
)
from speechsplit.ffutil import Transcoder, parse_duration
from speechsplit.runner import run_process


# ---------------------------------------------------------------------------
# parse_duration (pure parsing, no subprocess)
# ---------------------------------------------------------------------------

class TestParseDuration:
    def test_string_duration(self):
        assert parse_duration('{"format": {"duration": "61.250000"}}') == 61.25

    def test_numeric_duration(self):
        assert parse_duration('{"format": {"duration": 12}}') == 12.0

    def test_missing_duration(self):
        with pytest.raises(MalformedProbeOutputError, match="Duration not found"):
            parse_duration('{"format": {}}')

    def test_missing_format(self):
        with pytest.raises(MalformedProbeOutputError, match="Duration not found"):
            parse_duration("{}")

    def test_invalid_json(self):
        with pytest.raises(MalformedProbeOutputError, match="invalid JSON"):
            parse_duration("not json")

    def test_empty_output(self):
        with pytest.raises(MalformedProbeOutputError):
            parse_duration("")

    def test_non_numeric_duration(self):
        with pytest.raises(MalformedProbeOutputError, match="Invalid duration"):
            parse_duration('{"format": {"duration": "N/A"}}')


# ---------------------------------------------------------------------------
# availability
# ---------------------------------------------------------------------------

class TestAvailability:
    def test_available(self):
        runner = FakeRunner()
        assert Transcoder(runner=runner).is_available() is True
        assert runner.calls == [["ffmpeg", "-version"]]

    def test_non_zero_exit(self):
        runner = FakeRunner({"-version": completed(returncode=1)})
        assert Transcoder(runner=runner).is_available() is False

    def test_missing_binary(self):
        runner = FakeRunner({"-version": FileNotFoundError("ffmpeg")})
        assert Transcoder(runner=runner).is_available() is False

    def test_launch_error(self):
        runner = FakeRunner({"-version": PermissionError("denied")})
        assert Transcoder(runner=runner).is_available() is False

    def test_custom_executable(self):
        runner = FakeRunner()
        Transcoder(runner=runner, ffmpeg="/opt/ffmpeg").is_available()
        assert runner.calls[0][0] == "/opt/ffmpeg"

    def test_check_available_raises(self):
        runner = FakeRunner({"-version": completed(returncode=127)})
        with pytest.raises(FFmpegNotFoundError, match="not available"):
            Transcoder(runner=runner).check_available()


# ---------------------------------------------------------------------------
# extract_audio
# ---------------------------------------------------------------------------

class TestExtractAudio:
    def test_builds_command(self, tmp_path: Path):
        runner = FakeRunner()
        video = tmp_path / "talk.mp4"

        audio = Transcoder(runner=runner).extract_audio(video)

        assert audio == tmp_path / "talk.mp3"
        assert runner.calls[1] == [
            "ffmpeg", "-y",
            "-i", str(video),
            "-vn",
            "-acodec", "libmp3lame",
            "-b:a", "64k",
            str(tmp_path / "talk.mp3"),
        ]

    def test_unavailable_spawns_nothing_else(self, tmp_path: Path):
        runner = FakeRunner({"-version": FileNotFoundError("ffmpeg")})
        with pytest.raises(FFmpegNotFoundError):
            Transcoder(runner=runner).extract_audio(tmp_path / "talk.mp4")
        assert runner.calls == [["ffmpeg", "-version"]]

    def test_non_zero_exit(self, tmp_path: Path):
        runner = FakeRunner({"-vn": completed(returncode=1, stderr="Invalid data")})
        with pytest.raises(FFmpegProcessError, match="exit code 1") as exc_info:
            Transcoder(runner=runner).extract_audio(tmp_path / "talk.mp4")
        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "Invalid data"

    def test_refuses_to_overwrite_input(self, tmp_path: Path):
        runner = FakeRunner()
        with pytest.raises(ValueError, match="onto itself"):
            Transcoder(runner=runner).extract_audio(tmp_path / "clip.mp3")
        assert runner.calls == [["ffmpeg", "-version"]]

    def test_custom_bitrate(self, tmp_path: Path):
        runner = FakeRunner()
        Transcoder(runner=runner, bitrate="32k").extract_audio(tmp_path / "a.mkv")
        cmd = runner.calls[1]
        assert cmd[cmd.index("-b:a") + 1] == "32k"


# ---------------------------------------------------------------------------
# probe_duration
# ---------------------------------------------------------------------------

class TestProbeDuration:
    def test_basic(self):
        report = json.dumps({"format": {"duration": "60.0"}})
        runner = FakeRunner({"-show_entries": completed(stdout=report)})

        assert Transcoder(runner=runner).probe_duration(Path("a.mp3")) == 60.0
        assert runner.calls[1] == [
            "ffprobe",
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "json",
            "a.mp3",
        ]

    def test_missing_duration_field(self):
        runner = FakeRunner({"-show_entries": completed(stdout='{"format": {}}')})
        with pytest.raises(MalformedProbeOutputError):
            Transcoder(runner=runner).probe_duration(Path("a.mp3"))

    def test_non_zero_exit(self):
        runner = FakeRunner({"-show_entries": completed(returncode=1)})
        with pytest.raises(FFmpegProcessError, match="getting audio duration"):
            Transcoder(runner=runner).probe_duration(Path("a.mp3"))

    def test_unavailable(self):
        runner = FakeRunner({"-version": completed(returncode=1)})
        with pytest.raises(FFmpegNotFoundError):
            Transcoder(runner=runner).probe_duration(Path("a.mp3"))
        assert len(runner.calls) == 1


# ---------------------------------------------------------------------------
# cut_segment
# ---------------------------------------------------------------------------

class TestCutSegment:
    def test_builds_command(self, tmp_path: Path):
        runner = FakeRunner()
        src, out = tmp_path / "a.mp3", tmp_path / "a-part2.mp3"

        Transcoder(runner=runner).cut_segment(src, out, 30.0, 30.0)

        assert runner.calls == [[
            "ffmpeg", "-y",
            "-i", str(src),
            "-ss", "30.0",
            "-t", "30.0",
            "-vn",
            "-acodec", "libmp3lame",
            "-b:a", "64k",
            str(out),
        ]]

    def test_non_zero_exit(self, tmp_path: Path):
        runner = FakeRunner({"-ss": completed(returncode=234)})
        with pytest.raises(FFmpegProcessError) as exc_info:
            Transcoder(runner=runner).cut_segment(
                tmp_path / "a.mp3", tmp_path / "b.mp3", 0.0, 1.0
            )
        assert exc_info.value.returncode == 234

    def test_missing_binary(self, tmp_path: Path):
        runner = FakeRunner({"-ss": FileNotFoundError("ffmpeg")})
        with pytest.raises(FFmpegNotFoundError):
            Transcoder(runner=runner).cut_segment(
                tmp_path / "a.mp3", tmp_path / "b.mp3", 0.0, 1.0
            )


# ---------------------------------------------------------------------------
# run_process (mocked subprocess)
# ---------------------------------------------------------------------------

class TestRunProcess:
    @patch("speechsplit.runner.subprocess.run")
    def test_captures_text_output(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["ffmpeg"], 0, "out", "")
        result = run_process(["ffmpeg", "-version"])
        assert result.stdout == "out"
        mock_run.assert_called_once_with(
            ["ffmpeg", "-version"], capture_output=True, text=True
        )

    @patch("speechsplit.runner.subprocess.run", side_effect=KeyboardInterrupt)
    def test_interrupt_becomes_error(self, mock_run):
        with pytest.raises(FFmpegInterruptedError, match="ffmpeg was interrupted"):
            run_process(["ffmpeg", "-version"])

    @patch("speechsplit.runner.subprocess.run", side_effect=KeyboardInterrupt)
    def test_interrupt_propagates_through_transcoder(self, mock_run, tmp_path: Path):
        with pytest.raises(FFmpegInterruptedError):
            Transcoder().cut_segment(tmp_path / "a.mp3", tmp_path / "b.mp3", 0.0, 1.0)
