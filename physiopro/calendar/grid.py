"""Month grid construction. Weeks start on Monday."""

import calendar
from datetime import date, timedelta

DAYS_PER_WEEK = 7
WEEKDAY_LABELS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def shift_month(day: date, delta: int) -> date:
    """First day of the month ``delta`` months away from ``day``'s month."""
    month_index = day.year * 12 + (day.month - 1) + delta
    return date(month_index // 12, month_index % 12 + 1, 1)


def same_month(first: date, second: date) -> bool:
    return (first.year, first.month) == (second.year, second.month)


def build_month_grid(reference: date) -> list[date]:
    """Every day from the Monday on/before the 1st to the Sunday on/after month end."""
    first = month_start(reference)
    last = month_end(reference)
    grid_start = first - timedelta(days=first.weekday())
    grid_end = last + timedelta(days=DAYS_PER_WEEK - 1 - last.weekday())

    return [
        grid_start + timedelta(days=offset)
        for offset in range((grid_end - grid_start).days + 1)
    ]


def month_weeks(reference: date) -> list[list[date]]:
    grid = build_month_grid(reference)
    return [grid[index:index + DAYS_PER_WEEK] for index in range(0, len(grid), DAYS_PER_WEEK)]
