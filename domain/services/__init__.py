"""
Pure domain computations.

- workout_stats: volume, duration, exercise status and display formatting
- completion_stats: completion calendar statistics
"""

from domain.services.completion_stats import (
    CompletionStats,
    calculate_completion_stats,
    calculate_current_streak,
    calculate_weekly_average,
    count_this_month,
    unique_sorted_days,
)
from domain.services.workout_stats import (
    ExerciseVolumeBreakdown,
    calculate_exercise_volume,
    calculate_session_volume,
    calculate_set_volume,
    calculate_workout_breakdown,
    derive_exercise_status,
    format_duration,
    format_volume,
    session_duration_seconds,
)

__all__ = [
    # Workout stats
    "ExerciseVolumeBreakdown",
    "calculate_set_volume",
    "calculate_exercise_volume",
    "calculate_session_volume",
    "calculate_workout_breakdown",
    "session_duration_seconds",
    "derive_exercise_status",
    "format_duration",
    "format_volume",
    # Completion calendar
    "CompletionStats",
    "calculate_completion_stats",
    "calculate_current_streak",
    "calculate_weekly_average",
    "count_this_month",
    "unique_sorted_days",
]
