"""
Completion calendar statistics.

Works on plain dates so it can mix finished sessions with legacy
progress entries.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List

# A streak survives up to this many days between two trained days
MAX_STREAK_GAP_DAYS = 2
WEEKLY_AVERAGE_WINDOW_DAYS = 28


@dataclass
class CompletionStats:
    """Headline numbers for the completion calendar."""

    this_month_count: int
    current_streak: int
    weekly_average: float


def unique_sorted_days(days: Iterable[date]) -> List[date]:
    """De-duplicate and sort ascending."""
    return sorted(set(days))


def count_this_month(days: Iterable[date], today: date) -> int:
    return sum(1 for d in set(days) if d.year == today.year and d.month == today.month)


def calculate_current_streak(days: Iterable[date], today: date) -> int:
    """
    Number of trained days in the streak ending at today.

    Walks back from today; a trained day extends the streak if it is at most
    MAX_STREAK_GAP_DAYS before the day the walk expects next. Future days
    are ignored.
    """
    ordered = sorted({d for d in days if d <= today}, reverse=True)
    if not ordered:
        return 0

    streak = 0
    expected = today
    for day in ordered:
        if day == expected:
            streak += 1
            expected = day - timedelta(days=1)
            continue
        gap = (expected - day).days
        if gap <= MAX_STREAK_GAP_DAYS:
            streak += 1
            expected = day - timedelta(days=1)
        else:
            break
    return streak


def calculate_weekly_average(days: Iterable[date], today: date) -> float:
    """Trained days per week over the last four weeks, one decimal."""
    window_start = today - timedelta(days=WEEKLY_AVERAGE_WINDOW_DAYS)
    recent = sum(1 for d in set(days) if window_start <= d <= today)
    return round(recent / 4, 1)


def calculate_completion_stats(days: Iterable[date], today: date) -> CompletionStats:
    days = list(days)
    return CompletionStats(
        this_month_count=count_this_month(days, today),
        current_streak=calculate_current_streak(days, today),
        weekly_average=calculate_weekly_average(days, today),
    )
