from datetime import date, timedelta

import pytest

from physiopro.calendar.grid import build_month_grid, month_weeks, same_month, shift_month


def test_build_month_grid_pads_march_2024_to_full_weeks() -> None:
    grid = build_month_grid(date(2024, 3, 15))

    assert grid[0] == date(2024, 2, 26)
    assert grid[-1] == date(2024, 3, 31)
    assert len(grid) == 35


def test_build_month_grid_has_no_padding_when_month_fills_whole_weeks() -> None:
    grid = build_month_grid(date(2021, 2, 10))

    assert grid[0] == date(2021, 2, 1)
    assert grid[-1] == date(2021, 2, 28)
    assert len(grid) == 28


def test_build_month_grid_spans_six_weeks_when_needed() -> None:
    grid = build_month_grid(date(2021, 5, 1))

    assert grid[0] == date(2021, 4, 26)
    assert grid[-1] == date(2021, 6, 6)
    assert len(grid) == 42


@pytest.mark.parametrize('year', [1999, 2000, 2023, 2024, 2100])
def test_build_month_grid_is_week_aligned_for_every_month(year: int) -> None:
    for month in range(1, 13):
        reference = date(year, month, 1)
        grid = build_month_grid(reference)

        assert len(grid) % 7 == 0
        assert 28 <= len(grid) <= 42
        assert grid[0].weekday() == 0
        assert grid[-1].weekday() == 6
        assert all(later - earlier == timedelta(days=1) for earlier, later in zip(grid, grid[1:]))
        assert reference in grid
        assert shift_month(reference, 1) - timedelta(days=1) in grid


def test_month_weeks_chunks_grid_into_rows_of_seven() -> None:
    weeks = month_weeks(date(2024, 3, 1))

    assert len(weeks) == 5
    assert all(len(week) == 7 for week in weeks)
    assert weeks[0][0] == date(2024, 2, 26)
    assert weeks[-1][-1] == date(2024, 3, 31)


@pytest.mark.parametrize(
    ('day', 'delta', 'expected'),
    [
        (date(2024, 3, 15), 1, date(2024, 4, 1)),
        (date(2024, 12, 31), 1, date(2025, 1, 1)),
        (date(2024, 1, 31), -1, date(2023, 12, 1)),
        (date(2024, 3, 1), -14, date(2023, 1, 1)),
    ],
)
def test_shift_month_rolls_over_years(day: date, delta: int, expected: date) -> None:
    assert shift_month(day, delta) == expected


def test_same_month_ignores_day() -> None:
    assert same_month(date(2024, 3, 1), date(2024, 3, 31))
    assert not same_month(date(2024, 3, 1), date(2023, 3, 1))
