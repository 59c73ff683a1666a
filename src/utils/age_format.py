"""Human-readable token age strings.

    0.5   -> "12 hours"      / "12h"
    10    -> "10 days"       / "10d"
    400   -> "1y 1mo 5d"     (same in both forms)
"""

import math


def _sub_day(age_days: float, *, short: bool) -> str:
    hours = math.floor(age_days * 24)
    if hours == 0:
        minutes = math.floor(age_days * 24 * 60 + 0.5)
        if minutes <= 0:
            return "just created"
        if minutes < 60:
            return f"{minutes}m" if short else f"{minutes} minutes"
        return "<1h" if short else "less than 1 hour"
    if hours == 1:
        return "1h" if short else "1 hour"
    return f"{hours}h" if short else f"{hours} hours"


def _long_span(age_days: float) -> str:
    total = math.floor(age_days)
    years, rest = divmod(total, 365)
    months, days = divmod(rest, 30)
    parts = []
    if years:
        parts.append(f"{years}y")
    if months:
        parts.append(f"{months}mo")
    if days:
        parts.append(f"{days}d")
    return " ".join(parts)


def format_token_age(age_days: float) -> str:
    if age_days < 1:
        return _sub_day(age_days, short=False)
    if age_days < 30:
        days = math.floor(age_days)
        return "1 day" if days == 1 else f"{days} days"
    return _long_span(age_days)


def format_token_age_short(age_days: float) -> str:
    if age_days < 1:
        return _sub_day(age_days, short=True)
    if age_days < 30:
        return f"{math.floor(age_days)}d"
    return _long_span(age_days)
