"""Profile Store - the active profile's tracker collections and their persistence.

Owns the in-memory collections for the selected companion profile. Every
mutation goes through a pure core function and then the whole collection
is written back to storage (last write wins; no incremental diff).
"""

import json
import logging
from datetime import date
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from ..core import namespace
from ..core.entries import (
    add_task,
    delete_by_id,
    find_by_id,
    save_journal_entry,
    toggle_task,
    upsert_by_date,
)
from ..core.legacy import migrate_mood_record
from ..core.models import (
    AppetiteEntry,
    Importance,
    JournalEntry,
    MoodEntry,
    SleepEntry,
    StressEntry,
    TodoTask,
    UserPreferences,
)
from .storage import KeyValueStore


logger = logging.getLogger(__name__)

ENTRY_MODELS: dict[str, type[BaseModel]] = {
    namespace.MOOD: MoodEntry,
    namespace.STRESS: StressEntry,
    namespace.SLEEP: SleepEntry,
    namespace.APPETITE: AppetiteEntry,
    namespace.JOURNAL: JournalEntry,
    namespace.TODOS: TodoTask,
}

RECORD_MIGRATIONS: dict[str, Callable[[Any], Any]] = {
    namespace.MOOD: migrate_mood_record,
}


class ProfileStore:
    """Profile-scoped entry store backed by a key-value store.

    Storage layout:
        moodGarden_preferences: { petType, petName, theme }
        moodGarden_openai_key: "<key>"
        moodGarden_<species>_<name>_<collection>: [ ...entries ]
    """

    def __init__(self, storage: KeyValueStore, clock: Callable[[], date] = date.today) -> None:
        """Initialize and load the stored profile.

        Args:
            storage: Key-value backend
            clock: Source of "today" for stamps such as task creation
        """
        self._storage = storage
        self._clock = clock
        self.preferences = UserPreferences()
        self._collections: dict[str, list] = {name: [] for name in namespace.COLLECTIONS}
        self.load()

    # ==================== Loading ====================

    def load(self) -> None:
        """Reload preferences and every collection of the active profile."""
        self.preferences = self._read_preferences()
        for name in namespace.COLLECTIONS:
            self._collections[name] = self._read_collection(name)
        if self.has_profile:
            logger.info(
                "Loaded profile %s/%s (%d mood entries)",
                self.preferences.pet_type,
                self.preferences.pet_name,
                len(self._collections[namespace.MOOD]),
            )

    def _read_preferences(self) -> UserPreferences:
        raw = self._storage.get(namespace.PREFERENCES_KEY)
        if raw is None:
            return UserPreferences()
        try:
            return UserPreferences.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning("Discarding unreadable preferences: %s", str(e))
            return UserPreferences()

    def _key(self, collection: str) -> str | None:
        return namespace.storage_key(self.preferences.pet_type, self.preferences.pet_name, collection)

    def _read_collection(self, collection: str) -> list:
        """Parse one stored collection; malformed content yields an empty list."""
        key = self._key(collection)
        if key is None:
            return []
        raw = self._storage.get(key)
        if raw is None:
            return []

        model = ENTRY_MODELS[collection]
        migrate = RECORD_MIGRATIONS.get(collection)
        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise TypeError(f"expected a list, got {type(records).__name__}")
            if migrate is not None:
                records = [migrate(r) for r in records]
            return [model.model_validate(r) for r in records]
        except (json.JSONDecodeError, ValidationError, TypeError, ValueError) as e:
            logger.warning("Discarding unreadable %s: %s", key, str(e))
            return []

    # ==================== Persistence ====================

    def _commit(self, collection: str, entries: list) -> bool:
        """Write a whole collection to storage, then replace it in memory.

        With no profile selected there is nothing to persist and only the
        in-memory collection changes. A failed write leaves memory as it was.

        Returns:
            False if the storage write failed
        """
        key = self._key(collection)
        if key is None:
            logger.debug("No profile selected; %s not saved", collection)
            self._collections[collection] = entries
            return True
        payload = json.dumps([e.to_storage() for e in entries], ensure_ascii=False)
        if not self._storage.set(key, payload):
            logger.error("Failed to save %s", key)
            return False
        self._collections[collection] = entries
        return True

    # ==================== Profile ====================

    @property
    def has_profile(self) -> bool:
        return self.preferences.has_selected_pet

    def today(self) -> date:
        return self._clock()

    def _update_preferences(self, **changes) -> UserPreferences | None:
        """Validate and persist changed preferences; None if the write failed."""
        prefs = UserPreferences.model_validate({**self.preferences.model_dump(), **changes})
        if not self._storage.set(namespace.PREFERENCES_KEY, json.dumps(prefs.to_storage())):
            logger.error("Failed to save preferences")
            return None
        self.preferences = prefs
        return prefs

    def select_profile(self, pet_type: str | None, pet_name: str) -> UserPreferences | None:
        """Make a profile active and load its namespace.

        Data stored under the previous profile is left in place. Returns
        None, keeping the current profile, if the preferences write failed.
        """
        if self._update_preferences(pet_type=pet_type, pet_name=pet_name.strip()) is None:
            return None
        for name in namespace.COLLECTIONS:
            self._collections[name] = self._read_collection(name)
        logger.info("Switched to profile %s/%s", pet_type, pet_name)
        return self.preferences

    def set_theme(self, theme: str) -> UserPreferences | None:
        return self._update_preferences(theme=theme)

    def reset_data(self) -> int:
        """Delete every stored collection of the active profile.

        Returns:
            Number of keys removed
        """
        prefix = namespace.namespace_prefix(self.preferences.pet_type, self.preferences.pet_name)
        if prefix is None:
            return 0
        # another profile's name may extend this prefix, so match whole keys
        owned = {self._key(name) for name in namespace.COLLECTIONS}
        removed = 0
        for key in self._storage.keys(prefix + "_"):
            if key in owned and self._storage.delete(key):
                removed += 1
        self._collections = {name: [] for name in namespace.COLLECTIONS}
        logger.info("Reset %d keys for %s", removed, prefix)
        return removed

    def get_api_key(self) -> str | None:
        return self._storage.get(namespace.API_KEY_KEY) or None

    def set_api_key(self, api_key: str | None) -> bool:
        """Store the chat API key; an empty value removes it."""
        if api_key and api_key.strip():
            return self._storage.set(namespace.API_KEY_KEY, api_key.strip())
        return self._storage.delete(namespace.API_KEY_KEY)

    # ==================== Collections ====================

    def entries(self, collection: str) -> list:
        """Current entries of a collection (a copy)."""
        return list(self._collections[collection])

    @property
    def moods(self) -> list[MoodEntry]:
        return self.entries(namespace.MOOD)

    @property
    def stress(self) -> list[StressEntry]:
        return self.entries(namespace.STRESS)

    @property
    def sleep(self) -> list[SleepEntry]:
        return self.entries(namespace.SLEEP)

    @property
    def appetite(self) -> list[AppetiteEntry]:
        return self.entries(namespace.APPETITE)

    @property
    def journal(self) -> list[JournalEntry]:
        return self.entries(namespace.JOURNAL)

    @property
    def todos(self) -> list[TodoTask]:
        return self.entries(namespace.TODOS)

    # ==================== Dated trackers ====================

    def _save_dated(self, collection: str, entry):
        """Upsert a dated entry. Returns the stored entry, or None if the write failed."""
        saved = upsert_by_date(self._collections[collection], entry)
        if not self._commit(collection, saved):
            return None
        return next(e for e in saved if e.date == entry.date)

    def save_mood(self, entry: MoodEntry) -> MoodEntry | None:
        return self._save_dated(namespace.MOOD, entry)

    def save_stress(self, entry: StressEntry) -> StressEntry | None:
        return self._save_dated(namespace.STRESS, entry)

    def save_sleep(self, entry: SleepEntry) -> SleepEntry | None:
        return self._save_dated(namespace.SLEEP, entry)

    def save_appetite(self, entry: AppetiteEntry) -> AppetiteEntry | None:
        return self._save_dated(namespace.APPETITE, entry)

    # ==================== Journal ====================

    def save_journal(self, entry: JournalEntry) -> JournalEntry | None:
        """Add a journal entry, or update it in place when its id exists."""
        saved = save_journal_entry(self._collections[namespace.JOURNAL], entry)
        if not self._commit(namespace.JOURNAL, saved):
            return None
        return find_by_id(saved, entry.id)

    def delete_journal(self, entry_id: str) -> bool:
        """Delete a journal entry. Returns False if the id is unknown or the write failed."""
        current = self._collections[namespace.JOURNAL]
        remaining = delete_by_id(current, entry_id)
        if len(remaining) == len(current):
            logger.warning("Journal entry not found: %s", entry_id)
            return False
        return self._commit(namespace.JOURNAL, remaining)

    # ==================== To-do ====================

    def add_todo(
        self,
        title: str,
        description: str | None = None,
        importance: Importance = "medium",
    ) -> TodoTask | None:
        tasks = add_task(self._collections[namespace.TODOS], title, self._clock(), description, importance)
        if not self._commit(namespace.TODOS, tasks):
            return None
        return tasks[-1]

    def toggle_todo(self, task_id: str) -> TodoTask | None:
        """Flip a task's completion. Returns None if the id is unknown or the write failed."""
        if find_by_id(self._collections[namespace.TODOS], task_id) is None:
            logger.warning("Task not found: %s", task_id)
            return None
        tasks = toggle_task(self._collections[namespace.TODOS], task_id, self._clock())
        if not self._commit(namespace.TODOS, tasks):
            return None
        return find_by_id(tasks, task_id)

    def delete_todo(self, task_id: str) -> bool:
        current = self._collections[namespace.TODOS]
        remaining = delete_by_id(current, task_id)
        if len(remaining) == len(current):
            logger.warning("Task not found: %s", task_id)
            return False
        return self._commit(namespace.TODOS, remaining)
