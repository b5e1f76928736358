"""Mindful Tips - suggestions derived from what was logged today."""

import random
from typing import Optional

from .models import DaySnapshot
from .legacy import mean_valence

MAX_TIPS = 8
MAX_GENERAL_TIPS = 2

GENERAL_TIPS = [
    "🌱 Small, consistent actions for your wellbeing add up over time",
    "🌿 Spending time in nature, even briefly, can boost your mood",
    "🎵 Listening to calming music can help reduce stress and anxiety",
    "📱 Consider taking regular breaks from screens and social media",
    "🤝 Maintaining social connections is important for mental health",
    "🏃 Regular physical activity, even gentle movement, supports mental wellbeing",
    "🧘 Mindfulness practices don't have to be long - even 2-3 minutes can help",
]


def _mood_tips(snapshot: DaySnapshot) -> list[str]:
    mood = snapshot.mood
    if mood is None:
        return ["📊 Consider tracking your mood today to better understand your emotional patterns"]

    if mood.emotions:
        valence = mean_valence(mood)
        arousal = sum(e.arousal for e in mood.emotions) / len(mood.emotions)
    else:
        # legacy entries carry no arousal
        return []

    if arousal >= 4 and valence < 0:
        return [
            "🌿 Try some deep breathing exercises - breathe in for 4 counts, hold for 4, and out for 4",
            "🧘 Consider a short mindfulness or meditation session to help calm your mind",
            "🚶 Take a gentle walk outside if possible - movement can help regulate emotions",
        ]
    if arousal <= 2 and valence < 0:
        return [
            "☀️ Try to get some natural light exposure - even a few minutes can help",
            "💧 Make sure you're staying hydrated - dehydration can affect mood",
            "📞 Consider reaching out to someone you trust - connection can help",
        ]
    if arousal >= 4 and valence > 0:
        return [
            "✨ Great to see you're feeling energetic! Channel this into something positive",
            "📝 Consider journaling about what's making you feel good today",
        ]
    if arousal <= 2 and valence > 0:
        return ["😌 You seem to be in a peaceful state - enjoy this moment of calm"]
    return []


def _sleep_tips(snapshot: DaySnapshot) -> list[str]:
    sleep = snapshot.sleep
    if sleep is None:
        return ["🌙 Tracking your sleep can help identify patterns that affect your mental health"]

    tips = []
    if sleep.hours < 7:
        tips.append("😴 You got less than 7 hours of sleep - try to aim for 7-9 hours for better wellbeing")
        tips.append("🌙 Consider establishing a regular bedtime routine to improve sleep quality")
    elif sleep.hours > 9:
        tips.append("💤 You got more than 9 hours - make sure you're not oversleeping regularly")
    if sleep.quality <= 2:
        tips.append("🛏️ Poor sleep quality can affect your mood - try limiting screens before bed")
        tips.append("🍵 Avoid caffeine in the afternoon and evening to improve sleep quality")
    return tips


def _stress_tips(snapshot: DaySnapshot) -> list[str]:
    if snapshot.stress is None:
        return ["📊 Tracking stress levels can help you identify patterns and triggers"]
    if snapshot.stress.stress_level >= 4:
        return [
            "😰 High stress detected - try the 5-4-3-2-1 grounding technique: notice 5 things you "
            "see, 4 you can touch, 3 you hear, 2 you smell, 1 you taste",
            "💆 Take regular breaks throughout the day - even 5 minutes can help",
            "📝 Writing down your stress triggers can help you understand and manage them better",
        ]
    return []


def _appetite_tips(snapshot: DaySnapshot) -> list[str]:
    appetite = snapshot.appetite
    if appetite is None:
        return ["🥗 Tracking your food and water intake can help you see connections with your mood and energy"]

    tips = []
    if appetite.water_intake < 6:
        tips.append("💧 You've had less than 6 glasses of water - staying hydrated is important for mental health")
    if len(appetite.meals) < 2:
        tips.append("🍽️ Regular meals help maintain stable energy and mood throughout the day")
    return tips


def _journal_tips(snapshot: DaySnapshot) -> list[str]:
    if snapshot.journal:
        return []
    return [
        "📔 Consider journaling today - writing about your thoughts and feelings can be helpful",
        "✍️ Even a few sentences about your day can help process emotions",
    ]


def mindful_tips(snapshot: DaySnapshot, rng: Optional[random.Random] = None) -> list[str]:
    """Build today's tips from the day's logged entries.

    Tracker-specific tips come first. While fewer than MAX_TIPS exist, up to
    two random general tips are added (duplicates are skipped, so fewer may
    appear).

    Args:
        snapshot: Everything logged today
        rng: Random source for the general tips

    Returns:
        Ordered list of tip strings
    """
    rng = rng or random.Random()
    tips = (
        _mood_tips(snapshot)
        + _sleep_tips(snapshot)
        + _stress_tips(snapshot)
        + _appetite_tips(snapshot)
        + _journal_tips(snapshot)
    )

    slots = min(max(0, MAX_TIPS - len(tips)), MAX_GENERAL_TIPS)
    for _ in range(slots):
        tip = rng.choice(GENERAL_TIPS)
        if tip not in tips:
            tips.append(tip)
    return tips


def has_data(snapshot: DaySnapshot) -> bool:
    """True if anything at all was logged on the snapshot's day."""
    return any([snapshot.mood, snapshot.stress, snapshot.sleep, snapshot.appetite, snapshot.journal])
