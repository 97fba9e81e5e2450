"""Video identifier extraction from pasted URLs or bare IDs."""

import re
from typing import Optional

import structlog

from vidshelf.core.validation import VIDEO_ID_PATTERN

logger = structlog.get_logger(__name__)

# Watch, short-link and embed URLs; the ID runs up to the next &, newline, ? or #.
# The captured ID is deliberately not length/charset checked here; the gateway
# rejects malformed IDs before calling the provider.
URL_ID_PATTERN = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)")


class InvalidInputError(ValueError):
    """Raised when user input cannot be turned into a video ID."""

    pass


class MissingInputError(InvalidInputError):
    """Raised when the input is empty or whitespace only."""

    pass


class InvalidFormatError(InvalidInputError):
    """Raised when the input is neither a recognized URL nor a bare ID."""

    pass


def extract_video_id(text: str) -> Optional[str]:
    """
    Extract a video ID from a URL or bare identifier.

    Args:
        text: Trimmed user input

    Returns:
        The video ID, or None when nothing matches
    """
    if not text:
        return None

    match = URL_ID_PATTERN.search(text)
    if match:
        return match.group(1)

    if VIDEO_ID_PATTERN.fullmatch(text):
        return text

    return None


def parse_video_input(raw: Optional[str]) -> str:
    """
    Turn raw pasted input into a video ID.

    Args:
        raw: Untrimmed user input

    Returns:
        The extracted video ID

    Raises:
        MissingInputError: If the input is empty or whitespace only
        InvalidFormatError: If no video ID can be extracted
    """
    text = (raw or "").strip()
    if not text:
        raise MissingInputError("Please enter a YouTube video URL or ID")

    video_id = extract_video_id(text)
    if video_id is None:
        logger.debug("video_id_not_extracted", input=text)
        raise InvalidFormatError("Invalid YouTube URL or ID")

    return video_id
