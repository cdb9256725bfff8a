"""Calendar bookkeeping for scheduled programs."""
from __future__ import annotations

from datetime import date, timedelta
from enum import Enum

from coachhub.errors import ValidationFailed


class ScheduleStatus(str, Enum):
    planned = "planned"
    completed = "completed"
    missed = "missed"


def next_weekday(start: date, day_of_week: int) -> date:
    """First date on/after ``start`` falling on ``day_of_week`` (0=Monday .. 6=Sunday)."""
    return start + timedelta(days=(day_of_week - start.weekday()) % 7)


def weekly_occurrences(day_of_week: int, weeks: int, *, start: date) -> list[date]:
    if not 0 <= day_of_week <= 6:
        raise ValidationFailed("day_of_week must be between 0 (Monday) and 6 (Sunday)", code="invalid_weekday")
    if weeks < 1:
        raise ValidationFailed("repeat_weeks must be at least 1", code="invalid_repeat")
    first = next_weekday(start, day_of_week)
    return [first + timedelta(weeks=w) for w in range(weeks)]


def resolve_dates(
    *,
    dates: list[date] | None,
    day_of_week: int | None,
    repeat_weeks: int | None,
    today: date,
) -> list[date]:
    """Explicit dates win; otherwise expand the weekly rule."""
    if dates:
        return list(dates)
    if day_of_week is not None and repeat_weeks:
        return weekly_occurrences(day_of_week, repeat_weeks, start=today)
    raise ValidationFailed("no dates given", code="no_dates")


def status_for(scheduled_date: date, completed: bool, *, today: date) -> ScheduleStatus:
    if completed:
        return ScheduleStatus.completed
    if scheduled_date < today:
        return ScheduleStatus.missed
    return ScheduleStatus.planned
