"""Size-bounded splitting of audio files into equal-duration parts."""

import logging
import math
from pathlib import Path

from speechsplit.ffutil import Transcoder
from speechsplit.models import MediaFile, MediaKind

logger = logging.getLogger(__name__)


def part_path(source: Path, index: int) -> Path:
    """Return the output path of the zero-based part *index* of *source*.

    ``talk.mp4`` part 0 becomes ``talk-part1.mp3`` in the same directory.
    """
    source = Path(source)
    return source.with_name(f"{source.with_suffix('').name}-part{index + 1}.mp3")


def split_by_size(
    media: MediaFile, max_size_bytes: int, transcoder: Transcoder
) -> list[MediaFile]:
    """Split *media* into parts that should each fit in *max_size_bytes*.

    The part count is ``ceil(size / max_size_bytes)`` and every part gets the
    same duration. Actual part sizes follow the encoder's bitrate, so they are
    measured and reported but not guaranteed to fit the budget.

    If a cut fails the exception propagates and parts already written stay on
    disk.
    """
    if max_size_bytes <= 0:
        raise ValueError(f"max_size_bytes must be positive, got {max_size_bytes}")
    if media.size_bytes is None:
        raise ValueError(f"Size of {media.path} has not been measured")

    if media.size_bytes <= max_size_bytes:
        return [media]

    if media.duration is None:
        raise ValueError(f"Duration of {media.path} has not been probed")

    n_parts = math.ceil(media.size_bytes / max_size_bytes)
    part_duration = media.duration / n_parts
    logger.info(
        "Splitting %s (%d bytes, %.1fs) into %d parts of %.1fs",
        media.path, media.size_bytes, media.duration, n_parts, part_duration,
    )

    parts: list[MediaFile] = []
    for i in range(n_parts):
        start = i * part_duration
        output = part_path(media.path, i)
        transcoder.cut_segment(media.path, output, start, part_duration)

        size = output.stat().st_size
        if size > max_size_bytes:
            logger.warning(
                "%s is %d bytes, over the %d byte budget", output, size, max_size_bytes
            )
        parts.append(
            MediaFile(
                path=output,
                kind=MediaKind.AUDIO,
                duration=part_duration,
                size_bytes=size,
            )
        )
    return parts
