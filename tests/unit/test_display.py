"""Tests for display formatting"""

from datetime import datetime, timezone

import pytest

from vidshelf.core.config import DisplayConfig
from vidshelf.core.display import DisplayFormatter, parse_timestamp


class TestParseTimestamp:
    """Test parse_timestamp"""

    def test_zulu_suffix(self) -> None:
        """Test a trailing Z is read as UTC"""
        parsed = parse_timestamp("2009-10-25T06:57:33Z")

        assert parsed == datetime(2009, 10, 25, 6, 57, 33, tzinfo=timezone.utc)

    def test_offset(self) -> None:
        """Test explicit offsets are honored"""
        parsed = parse_timestamp("2009-10-25T08:57:33+02:00")

        assert parsed.astimezone(timezone.utc).hour == 6

    def test_naive_is_utc(self) -> None:
        """Test naive timestamps are treated as UTC"""
        assert parse_timestamp("2009-10-25T06:57:33").tzinfo == timezone.utc

    @pytest.mark.parametrize("value", ["", "yesterday", None, 12345])
    def test_invalid(self, value) -> None:
        """Test unparseable values raise ValueError"""
        with pytest.raises(ValueError):
            parse_timestamp(value)


class TestDisplayFormatter:
    """Test DisplayFormatter"""

    def test_format_date(self) -> None:
        """Test date formatting with defaults"""
        formatter = DisplayFormatter()

        assert formatter.format_date(datetime(2024, 3, 5, tzinfo=timezone.utc)) == "2024/03/05"

    def test_format_datetime(self) -> None:
        """Test date-time formatting with defaults"""
        formatter = DisplayFormatter()
        value = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)

        assert formatter.format_datetime(value) == "2024/03/05 14:07:09"

    @pytest.mark.parametrize(
        "value,expected",
        [(0, "0"), (999, "999"), (1000, "1,000"), (1234567, "1,234,567")],
    )
    def test_format_count(self, value: int, expected: str) -> None:
        """Test digit grouping"""
        assert DisplayFormatter().format_count(value) == expected

    def test_custom_separator(self) -> None:
        """Test a configured thousands separator replaces the comma"""
        formatter = DisplayFormatter(DisplayConfig(thousands_separator="."))

        assert formatter.format_count(1234567) == "1.234.567"

    def test_now_uses_clock_and_timezone(self) -> None:
        """Test now() renders the injected clock in the display timezone"""
        formatter = DisplayFormatter(
            DisplayConfig(timezone="Asia/Shanghai"),
            clock=lambda: datetime(2024, 3, 5, 20, 0, 0, tzinfo=timezone.utc),
        )

        assert formatter.now() == "2024/03/06 04:00:00"
