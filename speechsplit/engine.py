"""Orchestrator — runs the validate/extract/split pipeline defined by a Manifest."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from speechsplit import validate
from speechsplit.ffutil import Transcoder
from speechsplit.manifest import Manifest
from speechsplit.models import MediaFile, MediaKind, TranscriptSegment
from speechsplit.splitter import split_by_size
from speechsplit.transcribe import transcribe_parts, write_transcript

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    source: Path
    kind: MediaKind
    audio: MediaFile
    parts: list[MediaFile] = field(default_factory=list)
    transcript_path: Path | None = None
    transcript_segments: list[TranscriptSegment] = field(default_factory=list)


def transcoder_for(manifest: Manifest) -> Transcoder:
    return Transcoder(
        ffmpeg=manifest.tools.ffmpeg,
        ffprobe=manifest.tools.ffprobe,
        codec=manifest.split.codec,
        bitrate=manifest.split.bitrate,
    )


def probe_audio(path: Path, transcoder: Transcoder) -> MediaFile:
    """Build an AUDIO MediaFile with its duration and size filled in."""
    duration = transcoder.probe_duration(path)
    size = Path(path).stat().st_size
    logger.info("%s: %.1fs, %d bytes", path, duration, size)
    return MediaFile(path=Path(path), kind=MediaKind.AUDIO, duration=duration, size_bytes=size)


def process(
    manifest: Manifest,
    transcoder: Transcoder | None = None,
    on_progress: Callable[[str, float], None] | None = None,
    load_model: Callable[[str], Any] | None = None,
) -> EngineResult:
    """Execute the full pipeline.

    Args:
        manifest: Validated job manifest.
        transcoder: Transcoder to use; built from the manifest when omitted.
        on_progress: Optional callback(stage_name, fraction_complete).
        load_model: Optional Whisper model loader, for transcription.
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    transcoder = transcoder or transcoder_for(manifest)

    _progress("Validating input", 0.0)
    kind = validate.validate_media(manifest.input)

    audio_path = manifest.input
    if kind is MediaKind.VIDEO:
        _progress("Extracting audio from video", 0.1)
        audio_path = transcoder.extract_audio(manifest.input)

    _progress("Probing audio duration", 0.3)
    audio = probe_audio(audio_path, transcoder)

    _progress("Splitting audio", 0.4)
    parts = split_by_size(audio, manifest.split.max_size_bytes, transcoder)
    logger.info("Produced %d part(s) from %s", len(parts), audio.path)

    transcript_path = None
    transcript_segments: list[TranscriptSegment] = []
    if manifest.transcription.enabled:
        _progress("Transcribing audio", 0.6)
        transcript_segments = transcribe_parts(
            parts, manifest.transcription, load_model=load_model
        )
        _progress("Writing transcript", 0.95)
        transcript_path = write_transcript(
            transcript_segments, audio.path, manifest.transcription.output_format
        )

    _progress("Done", 1.0)
    return EngineResult(
        source=manifest.input,
        kind=kind,
        audio=audio,
        parts=parts,
        transcript_path=transcript_path,
        transcript_segments=transcript_segments,
    )
