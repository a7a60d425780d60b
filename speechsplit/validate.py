"""Media file validation — existence and content-sniffed type."""

import logging
from pathlib import Path

import magic

from speechsplit.errors import MediaNotFoundError, MediaValidationError
from speechsplit.models import MediaKind

logger = logging.getLogger(__name__)


def file_exists(path: Path) -> bool:
    """Return True if *path* exists, raise MediaNotFoundError otherwise."""
    if not Path(path).exists():
        raise MediaNotFoundError(f"File not found: {path}")
    logger.info("File found at: %s", path)
    return True


def detect_mime(path: Path) -> str:
    """Sniff the MIME type of *path* from its content using libmagic."""
    return magic.from_file(str(path), mime=True)


def classify(path: Path) -> MediaKind:
    """Classify *path* as audio or video by content, not extension."""
    mime = detect_mime(path)
    top_level = mime.split("/", 1)[0].lower()
    try:
        kind = MediaKind(top_level)
    except ValueError:
        raise MediaValidationError(
            f"Invalid file type {mime!r}. Please provide an audio or video file."
        ) from None

    logger.info("File type validated: %s file (%s)", kind.value, mime)
    return kind


def validate_media(path: Path) -> MediaKind:
    file_exists(path)
    return classify(path)
