"""Tests for human-readable age strings."""

import pytest

from src.utils.age_format import format_token_age, format_token_age_short


@pytest.mark.parametrize(
    ("days", "long", "short"),
    [
        (0, "just created", "just created"),
        (10 / (24 * 60), "10 minutes", "10m"),
        (1.5 / 24, "1 hour", "1h"),
        (0.5, "12 hours", "12h"),
        (1, "1 day", "1d"),
        (10, "10 days", "10d"),
        (13.9, "13 days", "13d"),
        (45, "1mo 15d", "1mo 15d"),
        (365, "1y", "1y"),
        (400, "1y 1mo 5d", "1y 1mo 5d"),
    ],
)
def test_formats(days: float, long: str, short: str) -> None:
    assert format_token_age(days) == long
    assert format_token_age_short(days) == short
