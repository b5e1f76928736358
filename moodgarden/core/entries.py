"""Entry Mutations - Pure functions over tracker collections.

All functions are pure: they return new lists and never mutate their
inputs. Persisting the result is the shell's job.
"""

import uuid
from datetime import date
from typing import Iterable, Optional, TypeVar

from .models import (
    AppetiteEntry,
    Importance,
    JournalEntry,
    MealEntry,
    MoodEntry,
    SleepEntry,
    StressEntry,
    TodoTask,
)


DatedEntry = TypeVar("DatedEntry", MoodEntry, StressEntry, SleepEntry, AppetiteEntry)
Identified = TypeVar("Identified", JournalEntry, TodoTask, MealEntry)

IMPORTANCE_ORDER = {"high": 3, "medium": 2, "low": 1}


def upsert_by_date(collection: list[DatedEntry], entry: DatedEntry) -> list[DatedEntry]:
    """Save an entry so that its date holds exactly one record.

    If a record with the same date exists it is replaced by `entry`, keeping
    the existing record's id. Otherwise `entry` is appended as-is.

    Args:
        collection: Current entries for one tracker
        entry: New values for the entry's date

    Returns:
        New collection with the entry saved
    """
    for i, existing in enumerate(collection):
        if existing.date == entry.date:
            replaced = entry.model_copy(update={"id": existing.id})
            return collection[:i] + [replaced] + collection[i + 1:]
    return collection + [entry]


def entry_for_date(collection: Iterable[DatedEntry], day: date) -> Optional[DatedEntry]:
    """Return the entry logged for a date, or None."""
    return next((e for e in collection if e.date == day), None)


def delete_by_id(collection: list[Identified], entry_id: str) -> list[Identified]:
    """Remove the record with the given id. Unknown ids leave the list unchanged."""
    return [e for e in collection if e.id != entry_id]


def find_by_id(collection: Iterable[Identified], entry_id: str) -> Optional[Identified]:
    """Return the record with the given id, or None."""
    return next((e for e in collection if e.id == entry_id), None)


def parse_triggers(text: str | None) -> list[str] | None:
    """Split a comma-separated trigger list, dropping blanks.

    Returns None when nothing is left, so the field is omitted on save.
    """
    if not text:
        return None
    triggers = [t.strip() for t in text.split(",") if t.strip()]
    return triggers or None


# ==================== Journal ====================


def save_journal_entry(entries: list[JournalEntry], entry: JournalEntry) -> list[JournalEntry]:
    """Insert a journal entry, or replace the one with the same id.

    An edit keeps the original entry's date.
    """
    for i, existing in enumerate(entries):
        if existing.id == entry.id:
            edited = entry.model_copy(update={"date": existing.date})
            return entries[:i] + [edited] + entries[i + 1:]
    return entries + [entry]


def recent_entries(entries: list[JournalEntry], limit: int = 3) -> list[JournalEntry]:
    """Newest journal entries first."""
    return sorted(entries, key=lambda e: e.date, reverse=True)[:max(0, limit)]


# ==================== To-do ====================


def add_task(
    tasks: list[TodoTask],
    title: str,
    today: date,
    description: str | None = None,
    importance: Importance = "medium",
) -> list[TodoTask]:
    """Append a new open task. Blank titles are rejected."""
    if not title.strip():
        raise ValueError("Task title cannot be empty")
    task = TodoTask(
        title=title.strip(),
        description=(description or "").strip() or None,
        importance=importance,
        created_at=today,
    )
    return tasks + [task]


def toggle_task(tasks: list[TodoTask], task_id: str, today: date) -> list[TodoTask]:
    """Flip a task's completed flag.

    Completing stamps completed_at with `today`; reopening clears it.
    """
    toggled = []
    for task in tasks:
        if task.id == task_id:
            done = not task.completed
            task = task.model_copy(update={
                "completed": done,
                "completed_at": today if done else None,
            })
        toggled.append(task)
    return toggled


def active_tasks(tasks: list[TodoTask]) -> list[TodoTask]:
    """Open tasks, most important first."""
    return sorted(
        (t for t in tasks if not t.completed),
        key=lambda t: IMPORTANCE_ORDER[t.importance],
        reverse=True,
    )


def completed_tasks(tasks: list[TodoTask]) -> list[TodoTask]:
    """Completed tasks, most recently finished first."""
    return sorted(
        (t for t in tasks if t.completed),
        key=lambda t: t.completed_at or t.created_at,
        reverse=True,
    )


# ==================== Meals ====================


def add_meal(meals: list[MealEntry], meal: MealEntry) -> list[MealEntry]:
    """Append a meal, giving it a fresh id if its id is already taken."""
    if any(m.id == meal.id for m in meals):
        meal = meal.model_copy(update={"id": str(uuid.uuid4())})
    return meals + [meal]


def update_meal(meals: list[MealEntry], meal_id: str, updates: dict) -> list[MealEntry]:
    """Apply field updates to one meal; the result is re-validated."""
    updated = []
    for meal in meals:
        if meal.id == meal_id:
            data = meal.model_dump()
            data.update(updates)
            data["id"] = meal.id
            meal = MealEntry(**data)
        updated.append(meal)
    return updated


def remove_meal(meals: list[MealEntry], meal_id: str) -> list[MealEntry]:
    """Drop a meal by id."""
    return delete_by_id(meals, meal_id)
