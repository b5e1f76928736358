"""Emotion Catalog - the fixed set of emotions offered when logging mood.

Grouped by quadrant color: yellow (pleasant, energized), red (unpleasant,
energized), green (pleasant, calm), blue (unpleasant, low energy), gray
(neutral).
"""

from .models import Emotion, EmotionColor


def _e(valence: int, arousal: int, label: str, emoji: str, color: EmotionColor) -> Emotion:
    return Emotion(valence=valence, arousal=arousal, label=label, emoji=emoji, color=color)


EMOTIONS: list[Emotion] = [
    _e(2, 5, "Elated", "🤩", "yellow"),
    _e(2, 4, "Excited", "😆", "yellow"),
    _e(1, 5, "Energetic", "⚡", "yellow"),
    _e(1, 4, "Happy", "😊", "yellow"),
    _e(2, 3, "Joyful", "😄", "yellow"),
    _e(1, 3, "Cheerful", "😃", "yellow"),
    _e(-2, 5, "Panicked", "😱", "red"),
    _e(-2, 4, "Angry", "😠", "red"),
    _e(-1, 5, "Anxious", "😰", "red"),
    _e(-1, 4, "Stressed", "😓", "red"),
    _e(-2, 3, "Frustrated", "😤", "red"),
    _e(-1, 3, "Worried", "😟", "red"),
    _e(-2, 2, "Irritated", "😒", "red"),
    _e(2, 2, "Peaceful", "😌", "green"),
    _e(2, 1, "Serene", "🧘", "green"),
    _e(1, 2, "Content", "🙂", "green"),
    _e(1, 1, "Calm", "😇", "green"),
    _e(2, 3, "Relaxed", "😎", "green"),
    _e(1, 3, "Satisfied", "😊", "green"),
    _e(-2, 2, "Depressed", "😔", "blue"),
    _e(-2, 1, "Empty", "😑", "blue"),
    _e(-1, 2, "Sad", "😢", "blue"),
    _e(-1, 1, "Tired", "😴", "blue"),
    _e(-2, 3, "Melancholy", "😞", "blue"),
    _e(-1, 3, "Lonely", "😕", "blue"),
    # lowest arousal on the 1-5 scale
    _e(-1, 1, "Exhausted", "😫", "blue"),
    _e(0, 3, "Neutral", "😐", "gray"),
    _e(0, 2, "Indifferent", "😶", "gray"),
    _e(0, 4, "Alert", "👀", "gray"),
    _e(0, 1, "Bored", "🥱", "gray"),
]


def emotion_id(emotion: Emotion) -> str:
    """Stable identifier used to pick an emotion: '<emoji>-<label>'."""
    return f"{emotion.emoji}-{emotion.label}"


def find_emotion(key: str) -> Emotion | None:
    """Look up a catalog emotion by id or by case-insensitive label.

    Args:
        key: Either an emotion id ('😊-Happy') or a label ('happy')

    Returns:
        Matching Emotion, or None if not in the catalog
    """
    key_lower = key.strip().lower()
    for emotion in EMOTIONS:
        if emotion_id(emotion) == key.strip() or emotion.label.lower() == key_lower:
            return emotion
    return None


def emotions_by_color() -> dict[str, list[Emotion]]:
    """Group the catalog by quadrant color, preserving catalog order."""
    groups: dict[str, list[Emotion]] = {c: [] for c in ("yellow", "red", "green", "blue", "gray")}
    for emotion in EMOTIONS:
        groups[emotion.color].append(emotion)
    return groups
