"""Display formatting for the snapshot strings stored on video records."""

from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from vidshelf.core.config import DisplayConfig


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 provider timestamp such as "2009-10-25T06:57:33Z".

    Naive timestamps are treated as UTC.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class DisplayFormatter:
    """Renders dates, timestamps and counts in the configured display locale."""

    def __init__(
        self,
        config: Optional[DisplayConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or DisplayConfig()
        self.tz = ZoneInfo(self.config.timezone)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def format_date(self, value: datetime) -> str:
        return value.astimezone(self.tz).strftime(self.config.date_format)

    def format_datetime(self, value: datetime) -> str:
        return value.astimezone(self.tz).strftime(self.config.datetime_format)

    def format_count(self, value: int) -> str:
        """Format an integer with digit grouping, e.g. 1234567 -> "1,234,567"."""
        grouped = f"{value:,}"
        if self.config.thousands_separator != ",":
            grouped = grouped.replace(",", self.config.thousands_separator)
        return grouped

    def now(self) -> str:
        """Current time as a display timestamp."""
        return self.format_datetime(self._clock())
