"""Unit tests for mindful tips."""

import random
from datetime import date

from moodgarden.core.models import (
    AppetiteEntry,
    DaySnapshot,
    Emotion,
    JournalEntry,
    MealEntry,
    MoodEntry,
    SleepEntry,
    StressEntry,
)
from moodgarden.core.tips import GENERAL_TIPS, MAX_TIPS, has_data, mindful_tips


DAY = date(2024, 3, 14)


def full_day(**overrides) -> DaySnapshot:
    fields = {
        "date": DAY,
        "mood": MoodEntry(date=DAY, emotions=[Emotion(valence=1, arousal=3, label="Cheerful")]),
        "sleep": SleepEntry(date=DAY, hours=8, quality=4),
        "stress": StressEntry(date=DAY, stress_level=2),
        "appetite": AppetiteEntry(
            date=DAY,
            water_intake=8,
            meals=[MealEntry(time="08:00"), MealEntry(time="13:00")],
        ),
        "journal": [JournalEntry(date=DAY, title="Day", content="Fine")],
    }
    fields.update(overrides)
    return DaySnapshot(**fields)


class TestMindfulTips:
    """Tests for mindful_tips."""

    def test_nothing_logged(self):
        """An empty day nudges towards every tracker."""
        tips = mindful_tips(DaySnapshot(date=DAY), random.Random(1))
        assert any("tracking your mood" in t for t in tips)
        assert any("Tracking your sleep" in t for t in tips)
        assert any("journaling today" in t for t in tips)
        assert len(tips) <= MAX_TIPS

    def test_balanced_day_gets_general_tips_only(self):
        tips = mindful_tips(full_day(), random.Random(3))
        assert 1 <= len(tips) <= 2
        assert all(t in GENERAL_TIPS for t in tips)

    def test_anxious_mood(self):
        snapshot = full_day(mood=MoodEntry(date=DAY, emotions=[Emotion(valence=-1, arousal=5, label="Anxious")]))
        tips = mindful_tips(snapshot, random.Random(0))
        assert any("deep breathing" in t for t in tips)

    def test_short_poor_sleep(self):
        tips = mindful_tips(full_day(sleep=SleepEntry(date=DAY, hours=5, quality=1)), random.Random(0))
        assert any("less than 7 hours" in t for t in tips)
        assert any("limiting screens" in t for t in tips)

    def test_high_stress_and_low_water(self):
        snapshot = full_day(
            stress=StressEntry(date=DAY, stress_level=5),
            appetite=AppetiteEntry(date=DAY, water_intake=2),
        )
        tips = mindful_tips(snapshot, random.Random(0))
        assert any("grounding technique" in t for t in tips)
        assert any("glasses of water" in t for t in tips)
        assert any("Regular meals" in t for t in tips)

    def test_no_duplicate_tips(self):
        for seed in range(20):
            tips = mindful_tips(full_day(), random.Random(seed))
            assert len(tips) == len(set(tips))


class TestHasData:
    def test_empty_and_logged(self):
        assert has_data(DaySnapshot(date=DAY)) is False
        assert has_data(full_day()) is True
