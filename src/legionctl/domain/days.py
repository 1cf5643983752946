"""Calendar-day keys for daily quest logs.

A day is stored as a literal ``YYYY-MM-DD`` string rather than a timestamp,
so which day a log belongs to never depends on a timezone conversion.

INVARIANT: the pattern check is shape-only. ``2024-13-40`` is a valid key
here; calendar validity is not this layer's concern.
"""

from __future__ import annotations

import re

DAY_PATTERN: re.Pattern[str] = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
DAY_PATTERN_MESSAGE = "Date must be YYYY-MM-DD"


def is_day_key(value: str) -> bool:
    """Check whether *value* has the ``YYYY-MM-DD`` shape."""
    return DAY_PATTERN.fullmatch(value) is not None

