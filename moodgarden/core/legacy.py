"""Legacy Mood Schema - bridging the 1-5 mood scale and valence/arousal.

Older mood entries carry a single 1-5 `mood`; newer ones carry one or two
emotions on the valence/arousal plane. Charts need one number per day, so
the mappings here convert between the two at read time. Nothing here
rewrites stored data.
"""

from typing import Any

from .models import Emotion, EmotionColor, MoodEntry

AROUSAL_MIDPOINT = 3


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def valence_to_mood(valence: float) -> int:
    """Map valence (-2..2) onto the legacy 1-5 mood scale.

    round((valence + 2) * 1.25) + 1, clamped to [1, 5]:
    -2 -> 1, 0 -> 3, 2 -> 5.
    """
    return clamp(round((valence + 2) * 1.25) + 1, 1, 5)


def mood_to_valence(mood: int) -> int:
    """Map a legacy 1-5 mood onto valence (-2..2): 1 -> -2, 3 -> 0, 5 -> 2."""
    return clamp(mood, 1, 5) - 3


def quadrant_color(valence: float, arousal: float) -> EmotionColor:
    """Color of the valence/arousal quadrant a point falls in.

    Zero valence is neutral (gray). Arousal at or above the midpoint counts
    as energized.
    """
    if valence == 0:
        return "gray"
    energized = arousal >= AROUSAL_MIDPOINT
    if valence > 0:
        return "yellow" if energized else "green"
    return "red" if energized else "blue"


def mean_valence(entry: MoodEntry) -> float | None:
    if not entry.emotions:
        return None
    return sum(e.valence for e in entry.emotions) / len(entry.emotions)


def mood_level(entry: MoodEntry) -> int:
    """Single 1-5 mood level for an entry, whichever schema it uses."""
    if entry.mood is not None:
        return entry.mood
    return valence_to_mood(mean_valence(entry))


def entry_emotions(entry: MoodEntry) -> list[Emotion]:
    """The entry's emotions, synthesizing one from a legacy-only entry."""
    if entry.emotions:
        return list(entry.emotions)
    valence = mood_to_valence(entry.mood)
    return [Emotion(
        valence=valence,
        arousal=AROUSAL_MIDPOINT,
        label=f"Mood {entry.mood}",
        color=quadrant_color(valence, AROUSAL_MIDPOINT),
    )]


def migrate_mood_record(raw: Any) -> Any:
    """Bring a stored mood record up to the current shape.

    Handles the intermediate schema where a single emotion was stored
    inline as top-level `valence`/`arousal`/`label`/`emoji` fields.
    Records already in the current shape, and non-object values, are
    returned unchanged for validation to accept or reject.

    Args:
        raw: One record as decoded from storage

    Returns:
        A dict that MoodEntry can validate
    """
    if not isinstance(raw, dict) or raw.get("emotions") or "valence" not in raw:
        return raw

    migrated = {k: v for k, v in raw.items() if k not in ("valence", "arousal", "label", "emoji", "color")}
    valence = clamp(int(raw["valence"]), -2, 2)
    arousal = clamp(int(raw.get("arousal", AROUSAL_MIDPOINT)), 1, 5)
    migrated["emotions"] = [{
        "valence": valence,
        "arousal": arousal,
        "label": raw.get("label") or "Unlabeled",
        "emoji": raw.get("emoji", ""),
        "color": raw.get("color") or quadrant_color(valence, arousal),
    }]
    return migrated
