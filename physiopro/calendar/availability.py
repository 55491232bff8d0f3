from datetime import date, datetime, time, timedelta
from typing import Iterable

SUGGESTED_AVAILABILITY_TOOLTIP = 'AI Suggested Availability'
SIMULATED_SUGGESTION_OFFSETS_DAYS = (3, 5, 10)
SIMULATED_SUGGESTED_TIMES = (time(10, 30), time(11, 0), time(14, 0), time(14, 30))


class SuggestedSlots:
    """Days flagged by an external availability source."""

    def __init__(self, dates: Iterable[date | datetime] = ()):
        self._dates = frozenset(
            value.date() if isinstance(value, datetime) else value
            for value in dates
        )

    def __len__(self) -> int:
        return len(self._dates)

    def __iter__(self):
        return iter(sorted(self._dates))

    def is_suggested(self, day: date) -> bool:
        return day in self._dates

    def tooltip_for(self, day: date) -> str | None:
        return SUGGESTED_AVAILABILITY_TOOLTIP if self.is_suggested(day) else None


def simulated_suggested_dates(today: date) -> list[date]:
    return [today + timedelta(days=offset) for offset in SIMULATED_SUGGESTION_OFFSETS_DAYS]


def suggested_times(day: date, now: datetime) -> list[time]:
    """Suggested start times for ``day``; on today only times still ahead of ``now``."""
    if day != now.date():
        return list(SIMULATED_SUGGESTED_TIMES)
    current = now.time().replace(second=0, microsecond=0)
    return [slot for slot in SIMULATED_SUGGESTED_TIMES if slot > current]
