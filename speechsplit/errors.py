"""Exceptions raised by speechsplit."""


class SpeechSplitError(Exception):
    """Base class for all speechsplit errors."""


class MediaNotFoundError(SpeechSplitError, FileNotFoundError):
    """Raised when the source path does not exist."""


class MediaValidationError(SpeechSplitError, ValueError):
    """Raised when a file is neither audio nor video."""


class FFmpegNotFoundError(SpeechSplitError, RuntimeError):
    pass


class FFmpegProcessError(SpeechSplitError, RuntimeError):
    """Raised when ffmpeg/ffprobe exits with a non-zero code."""

    def __init__(self, message: str, returncode: int, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class MalformedProbeOutputError(SpeechSplitError, ValueError):
    """Raised when ffprobe output lacks the expected metadata."""


class FFmpegInterruptedError(SpeechSplitError, RuntimeError):
    """Raised when waiting on an ffmpeg/ffprobe process is interrupted."""
