"""Tests for display formatting helpers."""

import pytest

from host_sampler.sinks import format_bytes, format_rate, render_bar


class TestFormatBytes:
    """Test binary-prefix byte formatting."""

    @pytest.mark.parametrize(
        "num_bytes,expected",
        [
            (0, "0 B"),
            (999, "999 B"),
            (1023, "1023 B"),
            (1024, "1.00 KB"),
            (1536, "1.50 KB"),
            (1048576, "1.00 MB"),
            (1048575, "1024.00 KB"),
            (5 * 1024**3, "5.00 GB"),
            (3 * 1024**4, "3.00 TB"),
        ],
    )
    def test_format(self, num_bytes: int, expected: str) -> None:
        assert format_bytes(num_bytes) == expected

    def test_largest_prefix_caps_at_exbibytes(self) -> None:
        assert format_bytes(2048 * 1024**6) == "2048.00 EB"


class TestFormatRate:
    """Test per-second rate formatting."""

    def test_rate(self) -> None:
        assert format_rate(1536.0) == "1.50 KB/s"

    def test_fraction_truncated(self) -> None:
        assert format_rate(999.9) == "999 B/s"

    def test_negative_clamped(self) -> None:
        assert format_rate(-5.0) == "0 B/s"


class TestRenderBar:
    """Test percentage bars."""

    @pytest.mark.parametrize(
        "percent,filled",
        [(0, 0), (50, 25), (100, 50), (33.3, 16), (150, 50), (-10, 0)],
    )
    def test_default_width(self, percent: float, filled: int) -> None:
        bar = render_bar(percent)

        assert len(bar) == 50
        assert bar == "█" * filled + "░" * (50 - filled)

    def test_custom_width(self) -> None:
        assert render_bar(50, width=10) == "█████░░░░░"
