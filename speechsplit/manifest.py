"""JSON manifest schema — the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path

MIB = 1024 * 1024


@dataclass
class SplitConfig:
    """Size budget and encoding used when cutting parts."""

    max_size_mb: float = 25.0
    codec: str = "libmp3lame"
    bitrate: str = "64k"

    @property
    def max_size_bytes(self) -> int:
        return int(self.max_size_mb * MIB)


@dataclass
class ToolConfig:
    """Executable names or paths for the external tools."""

    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"


@dataclass
class TranscriptionConfig:
    """Configuration for transcribing the parts with Whisper."""

    enabled: bool = False
    model: str = "base"
    language: str | None = None
    output_format: str = "txt"


@dataclass
class Manifest:
    """Top-level job manifest."""

    input: Path
    version: str = "1"
    split: SplitConfig = field(default_factory=SplitConfig)
    tools: ToolConfig = field(default_factory=ToolConfig)
    transcription: TranscriptionConfig = field(default_factory=TranscriptionConfig)


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if "input" not in data:
        raise ValueError("Manifest must contain an 'input' field")

    split = SplitConfig(**data["split"]) if "split" in data else SplitConfig()
    tools = ToolConfig(**data["tools"]) if "tools" in data else ToolConfig()
    transcription = (
        TranscriptionConfig(**data["transcription"])
        if "transcription" in data
        else TranscriptionConfig()
    )

    if split.max_size_mb <= 0:
        raise ValueError("split.max_size_mb must be positive")
    if transcription.output_format not in ("txt", "srt", "vtt"):
        raise ValueError(
            f"Unknown transcript format {transcription.output_format!r}"
        )

    return Manifest(
        version=data.get("version", "1"),
        input=Path(data["input"]),
        split=split,
        tools=tools,
        transcription=transcription,
    )
