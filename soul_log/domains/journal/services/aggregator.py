"""Pure statistics over journal entries.

Every function here is synchronous and side-effect free. Entries are any
objects exposing ``category`` and ``created_at`` (``entry_type`` as well for
:func:`type_totals`), so ORM rows and test doubles work alike.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional, Sequence, Union

from soul_log.domains.journal.constants import (
    BODY_CATEGORIES,
    DEFAULT_HYDRATION_GOAL,
    ENTRY_TYPE_BODY,
    ENTRY_TYPE_MIND,
    ENTRY_TYPE_SOUL,
    ENTRY_TYPES,
    MIND_MOODS,
    SOUL_CATEGORIES,
)

DayLike = Union[date, datetime]


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 12.5 must become 13 here.
    return int(math.floor(value + 0.5))


def entry_day(created_at: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of a timestamp; naive values are treated as UTC."""
    if created_at.tzinfo is None:
        if tz is None:
            return created_at.date()
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(tz or timezone.utc).date()


def _reference_day(reference: DayLike, tz: Optional[tzinfo]) -> date:
    if isinstance(reference, datetime):
        return entry_day(reference, tz)
    return reference


def category_counts(entries: Iterable, categories: Sequence[str]) -> dict[str, int]:
    counts = Counter(entry.category for entry in entries)
    return {category: counts.get(category, 0) for category in categories}


def most_common_category(entries: Iterable, categories: Sequence[str]) -> Optional[str]:
    """Category with the highest count, or None when nothing matched.

    Only a strictly greater count replaces the current leader, so ties go to
    whichever category comes first in ``categories``.
    """
    best, best_count = None, 0
    for category, count in category_counts(entries, categories).items():
        if count > best_count:
            best, best_count = category, count
    return best


def hydration_percent(progress: int, goal: int) -> int:
    progress = max(progress, 0)
    if goal <= 0:
        return 0
    return min(100, round_half_up(progress / goal * 100))


def streak_days(entries: Iterable, reference_date: DayLike, tz: Optional[tzinfo] = None) -> int:
    """Consecutive days with an entry, counted back from ``reference_date``.

    A reference day without entries yields 0 even if yesterday had one.
    """
    days = {entry_day(entry.created_at, tz) for entry in entries}
    cursor = _reference_day(reference_date, tz)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def mindful_today(entries: Iterable, reference_date: DayLike, tz: Optional[tzinfo] = None) -> bool:
    day = _reference_day(reference_date, tz)
    return any(entry_day(entry.created_at, tz) == day for entry in entries)


def average_per_week(total: int) -> float:
    return max(1, round_half_up(total / 7 * 10) / 10)


def type_totals(entries: Iterable) -> dict[str, int]:
    counts = Counter(entry.entry_type for entry in entries)
    totals = {"all": sum(counts.values())}
    totals.update({entry_type: counts.get(entry_type, 0) for entry_type in ENTRY_TYPES})
    return totals


def summarize(
    entries: Sequence,
    reference_date: DayLike,
    *,
    tz: Optional[tzinfo] = None,
    hydration_progress: int = 0,
    hydration_goal: int = DEFAULT_HYDRATION_GOAL,
) -> dict:
    """Statistics for the mind, body and soul views in one payload."""
    by_type = {entry_type: [e for e in entries if e.entry_type == entry_type] for entry_type in ENTRY_TYPES}
    mind, body, soul = by_type[ENTRY_TYPE_MIND], by_type[ENTRY_TYPE_BODY], by_type[ENTRY_TYPE_SOUL]
    latest_body = max(body, key=lambda e: e.created_at, default=None)
    return {
        "totals": type_totals(entries),
        "mind": {
            "mood_counts": category_counts(mind, MIND_MOODS),
            "most_common_mood": most_common_category(mind, MIND_MOODS),
            "average_per_week": average_per_week(len(mind)),
        },
        "body": {
            "category_counts": category_counts(body, BODY_CATEGORIES),
            "most_common_category": most_common_category(body, BODY_CATEGORIES),
            "hydration_percent": hydration_percent(hydration_progress, hydration_goal),
            "hydration_progress": max(hydration_progress, 0),
            "hydration_goal": hydration_goal,
            "latest_entry_at": latest_body.created_at.isoformat() if latest_body else None,
        },
        "soul": {
            "category_counts": category_counts(soul, SOUL_CATEGORIES),
            "streak_days": streak_days(soul, reference_date, tz),
            "mindful_today": mindful_today(soul, reference_date, tz),
        },
    }


__all__ = [
    "average_per_week",
    "category_counts",
    "entry_day",
    "hydration_percent",
    "mindful_today",
    "most_common_category",
    "round_half_up",
    "streak_days",
    "summarize",
    "type_totals",
]
