"""Core Data Models - Pydantic models for type safety.

All models are value objects with no behavior beyond validation.
Stored JSON keeps camelCase field names; Python code uses snake_case.
"""

from datetime import date as DateType
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
import uuid


PetType = Literal["cat", "dog"]
Theme = Literal["light", "dark"]
EmotionColor = Literal["yellow", "red", "green", "blue", "gray"]
MealType = Literal["breakfast", "lunch", "dinner", "snack"]
Importance = Literal["low", "medium", "high"]

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _new_id() -> str:
    return str(uuid.uuid4())


class StoredModel(BaseModel):
    """Base for persisted records: accepts both alias and field names."""

    model_config = ConfigDict(populate_by_name=True)

    def to_storage(self) -> dict:
        """Serialize to the JSON shape written to key-value storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserPreferences(StoredModel):
    """Companion profile and display preferences."""

    pet_type: Optional[PetType] = Field(default=None, alias="petType")
    pet_name: str = Field(default="", alias="petName")
    theme: Theme = "light"

    @property
    def has_selected_pet(self) -> bool:
        """Profile counts as selected only when both species and name are set."""
        return self.pet_type is not None and self.pet_name.strip() != ""


class Emotion(StoredModel):
    """A point on the valence/arousal plane with its display label."""

    valence: int = Field(ge=-2, le=2, description="Pleasantness, -2 (unpleasant) to 2")
    arousal: int = Field(ge=1, le=5, description="Activation, 1 (low) to 5 (high)")
    label: str = Field(min_length=1)
    emoji: str = ""
    color: EmotionColor = "gray"


class MoodEntry(StoredModel):
    """A day's mood: one or two emotions, or a legacy 1-5 level."""

    id: str = Field(default_factory=_new_id)
    date: DateType = Field(description="Date of this entry (YYYY-MM-DD)")
    emotions: list[Emotion] = Field(default_factory=list, max_length=2)
    mood: Optional[int] = Field(default=None, ge=1, le=5, description="Legacy 1-5 mood level")
    notes: Optional[str] = None
    tags: Optional[list[str]] = None

    @model_validator(mode="after")
    def _has_mood_value(self) -> "MoodEntry":
        if not self.emotions and self.mood is None:
            raise ValueError("mood entry needs at least one emotion or a mood level")
        return self


class StressEntry(StoredModel):
    """A day's stress level with optional triggers."""

    id: str = Field(default_factory=_new_id)
    date: DateType
    stress_level: int = Field(ge=1, le=5, alias="stressLevel")
    triggers: Optional[list[str]] = None
    notes: Optional[str] = None


class SleepEntry(StoredModel):
    """A night's sleep, recorded against the day it ended."""

    id: str = Field(default_factory=_new_id)
    date: DateType
    hours: float = Field(ge=0, le=24)
    quality: int = Field(ge=1, le=5)
    bedtime: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    wake_time: Optional[str] = Field(default=None, pattern=HHMM_PATTERN, alias="wakeTime")
    notes: Optional[str] = None


class MealEntry(StoredModel):
    """A single meal within a day's appetite entry."""

    id: str = Field(default_factory=_new_id)
    time: str = Field(pattern=HHMM_PATTERN)
    type: MealType = "snack"
    description: str = ""
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class AppetiteEntry(StoredModel):
    """A day's water intake and meals."""

    id: str = Field(default_factory=_new_id)
    date: DateType
    water_intake: int = Field(default=0, ge=0, alias="waterIntake", description="Glasses of water")
    meals: list[MealEntry] = Field(default_factory=list)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _unique_meal_ids(self) -> "AppetiteEntry":
        ids = [m.id for m in self.meals]
        if len(ids) != len(set(ids)):
            raise ValueError("meal ids must be unique within an entry")
        return self


class JournalEntry(StoredModel):
    """A free-text journal entry. Several may share a date."""

    id: str = Field(default_factory=_new_id)
    date: DateType
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    tags: Optional[list[str]] = None


class TodoTask(StoredModel):
    """A to-do item. completed_at is set exactly when completed is True."""

    id: str = Field(default_factory=_new_id)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    importance: Importance = "medium"
    completed: bool = False
    created_at: DateType = Field(alias="createdAt")
    completed_at: Optional[DateType] = Field(default=None, alias="completedAt")

    @model_validator(mode="after")
    def _completion_stamp(self) -> "TodoTask":
        if self.completed != (self.completed_at is not None):
            raise ValueError("completedAt must be set if and only if the task is completed")
        return self


class ScatterPoint(BaseModel):
    """One emotion plotted on the valence/arousal chart."""

    date: DateType
    valence: int
    arousal: int
    label: str
    color: EmotionColor


class SeriesPoint(BaseModel):
    """One day in a dense chart series; value is None when nothing was logged."""

    date: DateType
    value: Optional[float] = None


class MoodStats(BaseModel):
    """Headline mood numbers for the dashboard."""

    average: float
    trend: Literal["up", "down", "stable"]
    total_entries: int


class DaySnapshot(BaseModel):
    """All dated tracker entries for one calendar day."""

    date: DateType
    mood: Optional[MoodEntry] = None
    stress: Optional[StressEntry] = None
    sleep: Optional[SleepEntry] = None
    appetite: Optional[AppetiteEntry] = None
    journal: list[JournalEntry] = Field(default_factory=list)
