"""Derived Analytics - Pure functions for dashboard and insight numbers.

All functions are pure: same input always produces same output, no side
effects. "Today" is always passed in by the caller.
"""

from datetime import date, timedelta
from typing import Callable, Iterable, Optional, Sequence

from .entries import entry_for_date
from .legacy import entry_emotions, mood_level, quadrant_color
from .models import (
    AppetiteEntry,
    DaySnapshot,
    JournalEntry,
    MoodEntry,
    MoodStats,
    ScatterPoint,
    SeriesPoint,
    SleepEntry,
    StressEntry,
)

NO_VALUE = "—"
LEVELS = (1, 2, 3, 4, 5)
TREND_THRESHOLD = 0.25


def average(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for no values."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def format_average(value: float) -> str:
    """Render an average for display: one decimal, or a dash when empty."""
    if value == 0:
        return NO_VALUE
    return f"{value:.1f}"


def average_mood(entries: Sequence[MoodEntry]) -> float:
    return average(mood_level(e) for e in entries)


def average_stress(entries: Sequence[StressEntry]) -> float:
    return average(e.stress_level for e in entries)


def average_sleep_hours(entries: Sequence[SleepEntry]) -> float:
    return average(e.hours for e in entries)


def average_sleep_quality(entries: Sequence[SleepEntry]) -> float:
    return average(e.quality for e in entries)


def average_water_intake(entries: Sequence[AppetiteEntry]) -> float:
    return average(e.water_intake for e in entries)


def streak(dates: Iterable[date], today: date) -> int:
    """Count consecutive days with an entry, walking back from today.

    Stops at the first day without an entry; 0 if today has none.
    """
    logged = set(dates)
    count = 0
    day = today
    while day in logged:
        count += 1
        day -= timedelta(days=1)
    return count


def distribution(values: Iterable[int]) -> dict[int, int]:
    """Histogram over levels 1-5. Values outside the range are ignored."""
    counts = {level: 0 for level in LEVELS}
    for value in values:
        if value in counts:
            counts[value] += 1
    return counts


def mood_distribution(entries: Sequence[MoodEntry]) -> dict[int, int]:
    return distribution(mood_level(e) for e in entries)


def daily_series(
    entries: Sequence,
    today: date,
    value: Callable[[object], Optional[float]],
    days: int = 30,
) -> list[SeriesPoint]:
    """Dense day-by-day series ending today, None where nothing was logged.

    Args:
        entries: Dated entries of one tracker
        today: Last day of the series
        value: Extracts the plotted number from an entry
        days: Length of the series

    Returns:
        `days` points, oldest first
    """
    points = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        entry = entry_for_date(entries, day)
        points.append(SeriesPoint(date=day, value=value(entry) if entry else None))
    return points


def week_start(today: date) -> date:
    """Monday of the week containing `today`."""
    return today - timedelta(days=today.weekday())


def weekly_series(
    entries: Sequence,
    today: date,
    value: Callable[[object], Optional[float]],
) -> list[SeriesPoint]:
    """Monday-to-Sunday series for the week containing today."""
    sunday = week_start(today) + timedelta(days=6)
    return daily_series(entries, sunday, value, days=7)


def mood_series(entries: Sequence[MoodEntry], today: date, days: int = 30) -> list[SeriesPoint]:
    return daily_series(entries, today, mood_level, days=days)


def valence_arousal_points(entries: Sequence[MoodEntry]) -> list[ScatterPoint]:
    """Flatten each entry's emotions into independent scatter points.

    Legacy entries with only a 1-5 mood contribute one synthesized point.
    """
    points = []
    for entry in sorted(entries, key=lambda e: e.date):
        for emotion in entry_emotions(entry):
            points.append(ScatterPoint(
                date=entry.date,
                valence=emotion.valence,
                arousal=emotion.arousal,
                label=emotion.label,
                color=quadrant_color(emotion.valence, emotion.arousal),
            ))
    return points


def mood_stats(entries: Sequence[MoodEntry], today: date) -> MoodStats:
    """Average mood plus the trend of the last 7 days against the 7 before."""
    recent_start = today - timedelta(days=6)
    prior_start = today - timedelta(days=13)
    recent = [mood_level(e) for e in entries if recent_start <= e.date <= today]
    prior = [mood_level(e) for e in entries if prior_start <= e.date < recent_start]

    trend = "stable"
    if recent and prior:
        delta = average(recent) - average(prior)
        if delta > TREND_THRESHOLD:
            trend = "up"
        elif delta < -TREND_THRESHOLD:
            trend = "down"

    return MoodStats(
        average=round(average_mood(entries), 2),
        trend=trend,
        total_entries=len(entries),
    )


def day_snapshot(
    day: date,
    moods: Sequence[MoodEntry] = (),
    stress: Sequence[StressEntry] = (),
    sleep: Sequence[SleepEntry] = (),
    appetite: Sequence[AppetiteEntry] = (),
    journal: Sequence[JournalEntry] = (),
) -> DaySnapshot:
    """Join every tracker on one calendar day."""
    return DaySnapshot(
        date=day,
        mood=entry_for_date(moods, day),
        stress=entry_for_date(stress, day),
        sleep=entry_for_date(sleep, day),
        appetite=entry_for_date(appetite, day),
        journal=[e for e in journal if e.date == day],
    )


def insights_summary(
    moods: Sequence[MoodEntry],
    stress: Sequence[StressEntry],
    sleep: Sequence[SleepEntry],
    appetite: Sequence[AppetiteEntry],
    journal: Sequence[JournalEntry],
    today: date,
) -> dict:
    """Bundle of the insight numbers, shaped for JSON output."""
    stats = mood_stats(moods, today)
    return {
        "mood": {
            "average": format_average(stats.average),
            "trend": stats.trend,
            "total_entries": stats.total_entries,
            "streak": streak((e.date for e in moods), today),
            "distribution": mood_distribution(moods),
            "weekly": [p.model_dump(mode="json") for p in weekly_series(moods, today, mood_level)],
            "last_30_days": [p.model_dump(mode="json") for p in mood_series(moods, today)],
            "valence_arousal": [p.model_dump(mode="json") for p in valence_arousal_points(moods)],
        },
        "stress": {
            "average": format_average(average_stress(stress)),
            "distribution": distribution(e.stress_level for e in stress),
            "weekly": [
                p.model_dump(mode="json")
                for p in weekly_series(stress, today, lambda e: e.stress_level)
            ],
        },
        "sleep": {
            "average_hours": format_average(average_sleep_hours(sleep)),
            "average_quality": format_average(average_sleep_quality(sleep)),
            "weekly_hours": [
                p.model_dump(mode="json")
                for p in weekly_series(sleep, today, lambda e: e.hours)
            ],
        },
        "appetite": {
            "average_water": format_average(average_water_intake(appetite)),
        },
        "journal": {
            "total_entries": len(journal),
            "streak": streak((e.date for e in journal), today),
        },
    }
