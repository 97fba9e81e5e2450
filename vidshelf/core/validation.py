"""Input validation utilities shared by the gateway and the library API.

This module provides the canonical video ID check and subtitle filename
validation used across endpoints.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

# Canonical YouTube video identifier: exactly 11 URL-safe characters
VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

# C0 control characters and DEL
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1f\x7f]")


class SubtitleExtension(str, Enum):
    """Accepted subtitle file extensions."""

    SRT = ".srt"
    VTT = ".vtt"
    ASS = ".ass"
    TXT = ".txt"


@dataclass(frozen=True)
class ValidationResult:
    """Result of a validation operation."""

    is_valid: bool
    error_message: Optional[str] = None
    sanitized_value: Optional[str] = None


def is_valid_video_id(video_id: Optional[str]) -> bool:
    """Check whether a value is a canonical 11-character video ID."""
    if not video_id or not isinstance(video_id, str):
        return False
    return VIDEO_ID_PATTERN.fullmatch(video_id) is not None


class VideoIdValidator:
    """Validates canonical video identifiers."""

    def validate(self, video_id: Optional[str]) -> ValidationResult:
        """
        Validate a video ID.

        Args:
            video_id: Identifier to validate

        Returns:
            ValidationResult with validation status and any error message
        """
        if not video_id:
            return ValidationResult(is_valid=False, error_message="Missing videoId parameter")

        if not is_valid_video_id(video_id):
            logger.debug("Invalid video ID rejected", video_id=video_id)
            return ValidationResult(is_valid=False, error_message="Invalid video ID format")

        return ValidationResult(is_valid=True, sanitized_value=video_id)


class SubtitleFileValidator:
    """Validates uploaded subtitle filenames.

    Only the extension is checked; the content is never inspected.
    """

    MAX_NAME_LENGTH = 255

    def validate_filename(self, filename: Optional[str]) -> ValidationResult:
        """
        Validate a subtitle filename.

        Args:
            filename: Original filename of the upload

        Returns:
            ValidationResult whose sanitized_value is the bare filename
        """
        if not filename or not filename.strip():
            return ValidationResult(is_valid=False, error_message="Subtitle filename is required")

        # Browsers may send a full client path; keep only the final component
        cleaned = CONTROL_CHARS_PATTERN.sub("", filename).strip()
        name = PurePath(cleaned.replace("\\", "/")).name
        if not name:
            return ValidationResult(is_valid=False, error_message="Subtitle filename is required")

        if len(name) > self.MAX_NAME_LENGTH:
            return ValidationResult(
                is_valid=False,
                error_message=f"Subtitle filename exceeds maximum length of {self.MAX_NAME_LENGTH}",
            )

        suffix = PurePath(name).suffix.lower()
        try:
            SubtitleExtension(suffix)
        except ValueError:
            valid = [e.value for e in SubtitleExtension]
            return ValidationResult(
                is_valid=False,
                error_message=f"Unsupported subtitle file type. Valid options: {', '.join(valid)}",
            )

        return ValidationResult(is_valid=True, sanitized_value=name)


# Singleton instances for convenience
video_id_validator = VideoIdValidator()
subtitle_validator = SubtitleFileValidator()
