"""Shared data types used across speechsplit."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class MediaKind(str, Enum):
    """Top-level media category detected from file content."""

    AUDIO = "audio"
    VIDEO = "video"


@dataclass
class MediaFile:
    """A media file on disk.

    ``duration`` and ``size_bytes`` stay ``None`` until probed: duration needs
    an ffprobe call, size a filesystem stat.
    """

    path: Path
    kind: MediaKind
    duration: float | None = None
    size_bytes: int | None = None


@dataclass
class TranscriptSegment:
    """A piece of transcribed text, timed against the unsplit audio."""

    start: float
    end: float
    text: str
