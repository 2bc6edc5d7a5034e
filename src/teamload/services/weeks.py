"""Week-bucket helpers: Monday alignment, windows and display labels."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Sequence

from ..errors import ValidationError

DEFAULT_WEEK_COUNT = 4
# "Around a date" windows open this many weeks before the anchor's week.
WEEKS_BEFORE_ANCHOR = 2


def monday_of(day: date) -> date:
    """Return the Monday of the week containing ``day`` (Sunday maps back six days)."""

    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())


def parse_week(value: date | str) -> date:
    """Coerce a ``date`` or ISO ``YYYY-MM-DD`` string into a Monday date.

    Raises ValidationError for malformed strings or non-Monday dates.
    """

    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid week date: {value!r}") from exc
    if not isinstance(value, date):
        raise ValidationError(f"Invalid week date: {value!r}")
    if value.weekday() != 0:
        raise ValidationError(f"Week date must be a Monday, got {value.isoformat()}")
    return value


def next_weeks(count: int = DEFAULT_WEEK_COUNT, *, today: date | None = None) -> tuple[date, ...]:
    """``count`` consecutive Mondays starting with the current week."""

    if count < 0:
        raise ValueError("count must be >= 0")
    start = monday_of(today or date.today())
    return tuple(start + timedelta(weeks=i) for i in range(count))


def weeks_around(center: date, count: int = DEFAULT_WEEK_COUNT) -> tuple[date, ...]:
    """``count`` consecutive Mondays starting two weeks before ``center``'s week."""

    if count < 0:
        raise ValueError("count must be >= 0")
    start = monday_of(center) - timedelta(weeks=WEEKS_BEFORE_ANCHOR)
    return tuple(start + timedelta(weeks=i) for i in range(count))


def week_window(
    count: int = DEFAULT_WEEK_COUNT,
    anchor: date | None = None,
    *,
    centered: bool = False,
) -> tuple[date, ...]:
    """Dispatch between the "next N weeks" and "N weeks around a date" policies."""

    if centered:
        return weeks_around(anchor or date.today(), count)
    return next_weeks(count, today=anchor)


def shift_window(weeks: Sequence[date], offset: int) -> tuple[date, ...]:
    """Move every week of a window by ``offset`` weeks (negative = earlier)."""

    delta = timedelta(weeks=offset)
    return tuple(week + delta for week in weeks)


def format_week_short(week: date) -> str:
    """Short display label, e.g. ``Jan 05``."""

    return week.strftime("%b %d")


def format_window_range(weeks: Sequence[date]) -> str:
    """Label for a window, e.g. ``Jan 05 - Jan 26``; empty for an empty window."""

    if not weeks:
        return ""
    return f"{format_week_short(weeks[0])} - {format_week_short(weeks[-1])}"
