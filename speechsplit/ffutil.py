"""FFmpeg/ffprobe subprocess helpers."""

import json
import logging
from pathlib import Path

from speechsplit.errors import (
    FFmpegNotFoundError,
    FFmpegProcessError,
    MalformedProbeOutputError,
)
from speechsplit.runner import ProcessRunner, run_process

logger = logging.getLogger(__name__)

INSTALL_HINT = (
    "ffmpeg is not available on this system. Install it with your package "
    "manager, e.g. 'sudo apt install ffmpeg'."
)


class Transcoder:
    """Thin wrapper around the ffmpeg and ffprobe command-line tools.

    Every call blocks until the tool exits. Non-zero exits raise
    ``FFmpegProcessError``; nothing is retried.
    """

    def __init__(
        self,
        runner: ProcessRunner = run_process,
        ffmpeg: str = "ffmpeg",
        ffprobe: str = "ffprobe",
        codec: str = "libmp3lame",
        bitrate: str = "64k",
    ) -> None:
        self.runner = runner
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.codec = codec
        self.bitrate = bitrate

    def is_available(self) -> bool:
        """Return True if ``ffmpeg -version`` runs and exits cleanly."""
        try:
            result = self.runner([self.ffmpeg, "-version"])
        except OSError:
            return False
        return result.returncode == 0

    def check_available(self) -> None:
        """Raise FFmpegNotFoundError if ffmpeg cannot be run."""
        if not self.is_available():
            raise FFmpegNotFoundError(INSTALL_HINT)

    def extract_audio(self, video_path: Path) -> Path:
        """Extract the audio track of *video_path* into ``<stem>.mp3`` beside it.

        An existing output file is overwritten.
        """
        self.check_available()

        video_path = Path(video_path)
        audio_path = video_path.with_suffix(".mp3")
        if audio_path == video_path:
            raise ValueError(f"Refusing to extract {video_path} onto itself")

        logger.info("Extracting audio from %s", video_path)
        cmd = [
            self.ffmpeg, "-y",
            "-i", str(video_path),
            "-vn",
            "-acodec", self.codec,
            "-b:a", self.bitrate,
            str(audio_path),
        ]
        self._run(cmd, "extracting audio from video")
        return audio_path

    def probe_duration(self, audio_path: Path) -> float:
        """Return the container duration of *audio_path* in seconds."""
        self.check_available()

        cmd = [
            self.ffprobe,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "json",
            str(audio_path),
        ]
        result = self._run(cmd, "getting audio duration")
        return parse_duration(result.stdout)

    def cut_segment(
        self, source: Path, output: Path, start: float, duration: float
    ) -> None:
        """Re-encode ``[start, start + duration)`` of *source* into *output*."""
        cmd = [
            self.ffmpeg, "-y",
            "-i", str(source),
            "-ss", str(start),
            "-t", str(duration),
            "-vn",
            "-acodec", self.codec,
            "-b:a", self.bitrate,
            str(output),
        ]
        self._run(cmd, "splitting audio file")

    def _run(self, cmd: list[str], action: str):
        try:
            result = self.runner(cmd)
        except FileNotFoundError as exc:
            raise FFmpegNotFoundError(f"{cmd[0]} not found on PATH") from exc

        if result.returncode != 0:
            stderr = result.stderr or ""
            logger.debug("%s stderr:\n%s", cmd[0], stderr)
            raise FFmpegProcessError(
                f"Error {action}: {cmd[0]} exit code {result.returncode}",
                returncode=result.returncode,
                stderr=stderr,
            )
        return result


def parse_duration(stdout: str) -> float:
    """Pull ``format.duration`` out of an ffprobe JSON report."""
    try:
        data = json.loads(stdout or "")
    except json.JSONDecodeError as exc:
        raise MalformedProbeOutputError("ffprobe returned invalid JSON") from exc

    fmt = data.get("format") if isinstance(data, dict) else None
    if not isinstance(fmt, dict) or "duration" not in fmt:
        raise MalformedProbeOutputError("Duration not found in ffprobe output")

    try:
        return float(fmt["duration"])
    except (TypeError, ValueError) as exc:
        raise MalformedProbeOutputError(
            f"Invalid duration in ffprobe output: {fmt['duration']!r}"
        ) from exc
