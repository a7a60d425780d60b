"""Speech-to-text over split parts using OpenAI Whisper, plus transcript writers."""

import logging
from pathlib import Path
from typing import Any, Callable

from speechsplit.manifest import TranscriptionConfig
from speechsplit.models import MediaFile, TranscriptSegment

logger = logging.getLogger(__name__)


def _load_whisper_model(name: str) -> Any:
    import whisper

    return whisper.load_model(name)


def transcribe_parts(
    parts: list[MediaFile],
    config: TranscriptionConfig,
    load_model: Callable[[str], Any] | None = None,
) -> list[TranscriptSegment]:
    """Transcribe *parts* in order and return segments on the source timeline.

    Each part's timestamps are shifted by the total duration of the parts
    before it.
    """
    model = (load_model or _load_whisper_model)(config.model)

    segments: list[TranscriptSegment] = []
    offset = 0.0
    for i, part in enumerate(parts, 1):
        logger.info("Transcribing part %d/%d: %s", i, len(parts), part.path)
        result = model.transcribe(str(part.path), language=config.language)
        for seg in result["segments"]:
            segments.append(
                TranscriptSegment(
                    start=offset + seg["start"],
                    end=offset + seg["end"],
                    text=seg["text"].strip(),
                )
            )
        offset += part.duration or 0.0
    return segments


def _format_srt_time(seconds: float) -> str:
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    ms = int((seconds % 1) * 1000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def _format_vtt_time(seconds: float) -> str:
    return _format_srt_time(seconds).replace(",", ".")


def _render_txt(segments: list[TranscriptSegment]) -> str:
    return "\n".join(seg.text for seg in segments) + "\n"


def _render_srt(segments: list[TranscriptSegment]) -> str:
    lines: list[str] = []
    for i, seg in enumerate(segments, 1):
        lines.append(str(i))
        lines.append(f"{_format_srt_time(seg.start)} --> {_format_srt_time(seg.end)}")
        lines.append(seg.text)
        lines.append("")
    return "\n".join(lines)


def _render_vtt(segments: list[TranscriptSegment]) -> str:
    lines: list[str] = ["WEBVTT", ""]
    for seg in segments:
        lines.append(f"{_format_vtt_time(seg.start)} --> {_format_vtt_time(seg.end)}")
        lines.append(seg.text)
        lines.append("")
    return "\n".join(lines)


_RENDERERS = {"txt": _render_txt, "srt": _render_srt, "vtt": _render_vtt}


def write_transcript(
    segments: list[TranscriptSegment], output_base: Path, fmt: str = "txt"
) -> Path:
    """Write *segments* to ``output_base`` with the suffix for *fmt*."""
    if fmt not in _RENDERERS:
        raise ValueError(f"Unknown transcript format {fmt!r}")
    path = Path(output_base).with_suffix(f".{fmt}")
    path.write_text(_RENDERERS[fmt](segments), encoding="utf-8")
    return path
