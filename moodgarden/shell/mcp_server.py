"""MCP Server - Tool definitions for the MoodGarden assistant.

Defines all MCP tools an assistant can invoke to log and review wellness
data for the active companion profile.
"""

import logging
import os
from datetime import date
from typing import Literal

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from pydantic import ValidationError

from ..core.analytics import day_snapshot, insights_summary
from ..core.emotions import emotion_id, emotions_by_color, find_emotion
from ..core.entries import (
    active_tasks,
    add_meal as add_meal_to_list,
    completed_tasks,
    entry_for_date,
    find_by_id,
    parse_triggers,
    recent_entries,
    remove_meal as remove_meal_from_list,
    update_meal as update_meal_in_list,
)
from ..core.models import (
    AppetiteEntry,
    JournalEntry,
    MealEntry,
    MoodEntry,
    SleepEntry,
    StressEntry,
)
from ..core.tips import has_data, mindful_tips
from .chat_client import ChatAssistant, ChatConfig, ChatMessage
from .profile_store import ProfileStore
from .storage import create_store


logger = logging.getLogger(__name__)

NO_PROFILE_ERROR = {"error": "No companion selected. Use select_profile with a pet type and name first."}

# Configure transport security; extra hosts come from MOODGARDEN_ALLOWED_HOSTS
transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        *[h.strip() for h in os.environ.get("MOODGARDEN_ALLOWED_HOSTS", "").split(",") if h.strip()],
    ],
)

# Initialize FastMCP server with stateless HTTP for cloud deployments
mcp = FastMCP(
    "moodgarden",
    instructions="""MoodGarden - Personal wellness tracking companion.

Use these tools to help the user log mood, stress, sleep, appetite,
journal entries and to-do tasks, and to review trends and tips.

On first use, call select_profile to name the user's companion (cat or dog).
Entries for a tracker are one per day: logging again for the same date
replaces that day's entry. Never switch profile or reset data without the
user's explicit confirmation.""",
    stateless_http=True,
    transport_security=transport_security,
)

# Lazy-initialized clients
_profile_store: ProfileStore | None = None
_chat_assistant: ChatAssistant | None = None


def get_profile_store() -> ProfileStore:
    """Get or create the profile store."""
    global _profile_store
    if _profile_store is None:
        _profile_store = ProfileStore(create_store())
    return _profile_store


def get_chat_assistant() -> ChatAssistant:
    """Get or create the chat assistant."""
    global _chat_assistant
    if _chat_assistant is None:
        _chat_assistant = ChatAssistant(get_profile_store().get_api_key, ChatConfig.from_env())
    return _chat_assistant


def _parse_date(date_str: str | None, store: ProfileStore) -> date:
    """Parse YYYY-MM-DD, defaulting to today. Raises ValueError."""
    if not date_str:
        return store.today()
    return date.fromisoformat(date_str)


def _validation_error(e: ValidationError) -> dict:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'entry'}: {err['msg']}" for err in e.errors()
    )
    return {"error": f"Invalid input - {problems}"}


# ==================== Profile Tools ====================


@mcp.tool()
def get_profile() -> dict:
    """Show the active companion profile and theme.

    Returns:
        Dictionary with pet_type, pet_name, theme and whether a profile is selected
    """
    store = get_profile_store()
    prefs = store.preferences
    return {
        "pet_type": prefs.pet_type,
        "pet_name": prefs.pet_name,
        "theme": prefs.theme,
        "profile_selected": store.has_profile,
        "chat_api_key_configured": store.get_api_key() is not None,
    }


@mcp.tool()
def select_profile(pet_type: Literal["cat", "dog"], pet_name: str) -> dict:
    """Choose the companion for a new user.

    Only works while no profile is selected; use switch_profile otherwise.

    Args:
        pet_type: "cat" or "dog"
        pet_name: The companion's name

    Returns:
        The selected profile
    """
    store = get_profile_store()
    if store.has_profile:
        return {"error": "A companion is already selected. Use switch_profile to change it."}
    if not pet_name.strip():
        return {"error": "Please give your companion a name."}
    try:
        prefs = store.select_profile(pet_type, pet_name)
    except ValidationError as e:
        return _validation_error(e)
    if prefs is None:
        return {"error": "Failed to save profile. Please try again."}
    return {"pet_type": prefs.pet_type, "pet_name": prefs.pet_name, "profile_selected": True}


@mcp.tool()
def switch_profile(pet_type: Literal["cat", "dog"], pet_name: str, confirm: bool = False) -> dict:
    """Switch to a different companion profile.

    Each companion has its own separate data; the current companion's data
    will no longer be shown. Requires confirm=True after the user agrees.

    Args:
        pet_type: "cat" or "dog"
        pet_name: The companion's name
        confirm: Must be True to proceed

    Returns:
        The new profile, or a request for confirmation
    """
    if not confirm:
        return {
            "confirmation_required": True,
            "message": "Switching companion hides all data of the current one. Call again with confirm=True.",
        }
    if not pet_name.strip():
        return {"error": "Please give your companion a name."}
    store = get_profile_store()
    try:
        prefs = store.select_profile(pet_type, pet_name)
    except ValidationError as e:
        return _validation_error(e)
    if prefs is None:
        return {"error": "Failed to switch profile. Please try again."}
    return {
        "pet_type": prefs.pet_type,
        "pet_name": prefs.pet_name,
        "mood_entries": len(store.moods),
    }


@mcp.tool()
def reset_data(confirm: bool = False) -> dict:
    """Erase all tracker data for the active companion.

    Requires confirm=True after the user agrees. Preferences are kept.

    Args:
        confirm: Must be True to proceed

    Returns:
        Number of stored collections removed, or a request for confirmation
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    if not confirm:
        return {
            "confirmation_required": True,
            "message": "This permanently deletes all entries for this companion. Call again with confirm=True.",
        }
    removed = store.reset_data()
    return {"success": True, "collections_removed": removed}


@mcp.tool()
def set_theme(theme: Literal["light", "dark"]) -> dict:
    """Set the display theme preference.

    Args:
        theme: "light" or "dark"
    """
    try:
        prefs = get_profile_store().set_theme(theme)
    except ValidationError as e:
        return _validation_error(e)
    if prefs is None:
        return {"error": "Failed to save theme. Please try again."}
    return {"theme": prefs.theme}


@mcp.tool()
def set_api_key(api_key: str | None = None) -> str:
    """Store (or with no value, remove) the key used for hosted chat replies.

    The key is stored as-is in MoodGarden's storage.

    Args:
        api_key: Chat completion API key, or empty to remove it
    """
    store = get_profile_store()
    if not store.set_api_key(api_key):
        return "Failed to update the API key. Please try again."
    if api_key and api_key.strip():
        return "API key saved. Chat replies will use the hosted model."
    return "API key removed. Chat replies will use built-in suggestions."


# ==================== Tracker Tools ====================


@mcp.tool()
def list_emotions() -> dict:
    """List the emotions that can be logged, grouped by quadrant color.

    Returns:
        Dictionary of color -> emotions with id, label, emoji, valence, arousal
    """
    return {
        color: [
            {
                "id": emotion_id(e),
                "label": e.label,
                "emoji": e.emoji,
                "valence": e.valence,
                "arousal": e.arousal,
            }
            for e in emotions
        ]
        for color, emotions in emotions_by_color().items()
    }


@mcp.tool()
def log_mood(
    emotions: list[str] | None = None,
    mood: int | None = None,
    notes: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Log the mood for a day, replacing any earlier mood for that date.

    Args:
        emotions: One or two emotion labels or ids from list_emotions
        mood: Optional 1-5 overall mood level
        notes: Optional free-text notes
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The saved entry
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR

    picked = []
    for key in emotions or []:
        emotion = find_emotion(key)
        if emotion is None:
            return {"error": f"Unknown emotion: {key}. Use list_emotions to see options."}
        picked.append(emotion)

    try:
        entry = MoodEntry(
            date=_parse_date(date_str, store),
            emotions=picked,
            mood=mood,
            notes=(notes or "").strip() or None,
        )
    except ValidationError as e:
        return _validation_error(e)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    saved = store.save_mood(entry)
    if saved is None:
        return {"error": "Failed to save mood. Please try again."}
    return {"entry": saved.to_storage()}


@mcp.tool()
def log_stress(
    stress_level: int,
    triggers: str | None = None,
    notes: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Log the stress level for a day, replacing any earlier entry for that date.

    Args:
        stress_level: 1 (very low) to 5 (very high)
        triggers: Optional comma-separated triggers (e.g., "work, commute")
        notes: Optional free-text notes
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The saved entry
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    try:
        entry = StressEntry(
            date=_parse_date(date_str, store),
            stress_level=stress_level,
            triggers=parse_triggers(triggers),
            notes=(notes or "").strip() or None,
        )
    except ValidationError as e:
        return _validation_error(e)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    saved = store.save_stress(entry)
    if saved is None:
        return {"error": "Failed to save stress. Please try again."}
    return {"entry": saved.to_storage()}


@mcp.tool()
def log_sleep(
    hours: float,
    quality: int,
    bedtime: str | None = None,
    wake_time: str | None = None,
    notes: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Log a night's sleep, replacing any earlier entry for that date.

    Args:
        hours: Hours slept (0-24, halves allowed)
        quality: 1 (poor) to 5 (excellent)
        bedtime: Optional bedtime as HH:MM
        wake_time: Optional wake time as HH:MM
        notes: Optional free-text notes
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The saved entry
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    try:
        entry = SleepEntry(
            date=_parse_date(date_str, store),
            hours=hours,
            quality=quality,
            bedtime=bedtime or None,
            wake_time=wake_time or None,
            notes=(notes or "").strip() or None,
        )
    except ValidationError as e:
        return _validation_error(e)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    saved = store.save_sleep(entry)
    if saved is None:
        return {"error": "Failed to save sleep. Please try again."}
    return {"entry": saved.to_storage()}


@mcp.tool()
def log_appetite(
    water_intake: int,
    notes: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Log water intake for a day, replacing that day's appetite entry.

    Meals already logged for the date are kept; use add_meal / remove_meal
    to change them.

    Args:
        water_intake: Glasses of water
        notes: Optional free-text notes
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The saved entry
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    try:
        day = _parse_date(date_str, store)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    existing = entry_for_date(store.appetite, day)
    try:
        entry = AppetiteEntry(
            date=day,
            water_intake=water_intake,
            meals=existing.meals if existing else [],
            notes=(notes or "").strip() or None,
        )
    except ValidationError as e:
        return _validation_error(e)

    saved = store.save_appetite(entry)
    if saved is None:
        return {"error": "Failed to save appetite. Please try again."}
    return {"entry": saved.to_storage()}


@mcp.tool()
def add_meal(
    meal_time: str,
    meal_type: Literal["breakfast", "lunch", "dinner", "snack"] = "snack",
    description: str = "",
    rating: int | None = None,
    date_str: str | None = None,
) -> dict:
    """Add a meal to a day's appetite entry, creating the entry if needed.

    Args:
        meal_time: Time eaten as HH:MM
        meal_type: breakfast, lunch, dinner or snack
        description: What was eaten
        rating: Optional 1-5 rating of how it felt
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The new meal and the day's updated entry
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    try:
        day = _parse_date(date_str, store)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    existing = entry_for_date(store.appetite, day)
    try:
        meal = MealEntry(time=meal_time, type=meal_type, description=description.strip(), rating=rating)
    except ValidationError as e:
        return _validation_error(e)

    entry = AppetiteEntry(
        date=day,
        water_intake=existing.water_intake if existing else 0,
        meals=add_meal_to_list(existing.meals if existing else [], meal),
        notes=existing.notes if existing else None,
    )
    saved = store.save_appetite(entry)
    if saved is None:
        return {"error": "Failed to save meal. Please try again."}
    return {"meal": saved.meals[-1].to_storage(), "entry": saved.to_storage()}


@mcp.tool()
def update_meal(
    meal_id: str,
    meal_time: str | None = None,
    meal_type: Literal["breakfast", "lunch", "dinner", "snack"] | None = None,
    description: str | None = None,
    rating: int | None = None,
    date_str: str | None = None,
) -> dict:
    """Change a logged meal. Only provided fields are updated.

    Args:
        meal_id: ID of the meal to change
        meal_time: New time as HH:MM (optional)
        meal_type: New meal type (optional)
        description: New description (optional)
        rating: New 1-5 rating, or 0 to clear it (optional)
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The updated meal
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    try:
        day = _parse_date(date_str, store)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    existing = entry_for_date(store.appetite, day)
    if existing is None or find_by_id(existing.meals, meal_id) is None:
        return {"error": "Meal not found."}

    updates = {}
    if meal_time is not None:
        updates["time"] = meal_time
    if meal_type is not None:
        updates["type"] = meal_type
    if description is not None:
        updates["description"] = description.strip()
    if rating is not None:
        updates["rating"] = rating or None

    if not updates:
        return {"error": "No updates provided."}

    try:
        meals = update_meal_in_list(existing.meals, meal_id, updates)
    except ValidationError as e:
        return _validation_error(e)

    saved = store.save_appetite(existing.model_copy(update={"meals": meals}))
    if saved is None:
        return {"error": "Failed to save meal. Please try again."}
    return {"meal": find_by_id(saved.meals, meal_id).to_storage()}


@mcp.tool()
def remove_meal(meal_id: str, date_str: str | None = None) -> dict:
    """Remove a meal from a day's appetite entry.

    Args:
        meal_id: ID of the meal to remove
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The day's updated entry
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    try:
        day = _parse_date(date_str, store)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    existing = entry_for_date(store.appetite, day)
    if existing is None or find_by_id(existing.meals, meal_id) is None:
        return {"error": "Meal not found."}

    entry = existing.model_copy(update={"meals": remove_meal_from_list(existing.meals, meal_id)})
    saved = store.save_appetite(entry)
    if saved is None:
        return {"error": "Failed to remove meal. Please try again."}
    return {"entry": saved.to_storage()}


# ==================== Journal Tools ====================


@mcp.tool()
def write_journal(
    title: str,
    content: str,
    mood: int | None = None,
    entry_id: str | None = None,
) -> dict:
    """Write a new journal entry for today, or edit an existing one.

    Args:
        title: Entry title
        content: Entry text
        mood: Optional 1-5 mood level
        entry_id: ID of an entry to edit (omit to create a new entry)

    Returns:
        The saved entry
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR

    fields = {
        "date": store.today(),
        "title": title.strip(),
        "content": content.strip(),
        "mood": mood,
    }
    if entry_id is not None:
        if find_by_id(store.journal, entry_id) is None:
            return {"error": "Journal entry not found."}
        fields["id"] = entry_id

    try:
        entry = JournalEntry(**fields)
    except ValidationError as e:
        return _validation_error(e)

    saved = store.save_journal(entry)
    if saved is None:
        return {"error": "Failed to save journal entry. Please try again."}
    return {"entry": saved.to_storage()}


@mcp.tool()
def delete_journal(entry_id: str) -> dict:
    """Delete a journal entry.

    Args:
        entry_id: ID of the entry to delete
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    if find_by_id(store.journal, entry_id) is None:
        return {"error": "Journal entry not found."}
    if not store.delete_journal(entry_id):
        return {"error": "Failed to delete journal entry. Please try again."}
    return {"success": True, "entries_remaining": len(store.journal)}


@mcp.tool()
def list_journal(limit: int = 3) -> list[dict]:
    """List the most recent journal entries, newest first.

    Args:
        limit: How many entries to return
    """
    store = get_profile_store()
    return [e.to_storage() for e in recent_entries(store.journal, limit)]


# ==================== To-do Tools ====================


@mcp.tool()
def add_todo(
    title: str,
    description: str | None = None,
    importance: Literal["low", "medium", "high"] = "medium",
) -> dict:
    """Add a task to the to-do list.

    Args:
        title: Task title
        description: Optional details
        importance: low, medium or high
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    try:
        task = store.add_todo(title, description, importance)
    except (ValueError, ValidationError) as e:
        return {"error": str(e)}
    if task is None:
        return {"error": "Failed to save task. Please try again."}
    return {"task": task.to_storage()}


@mcp.tool()
def toggle_todo(task_id: str) -> dict:
    """Mark a task done, or reopen a completed task.

    Args:
        task_id: ID of the task
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    if find_by_id(store.todos, task_id) is None:
        return {"error": "Task not found."}
    task = store.toggle_todo(task_id)
    if task is None:
        return {"error": "Failed to update task. Please try again."}
    return {"task": task.to_storage()}


@mcp.tool()
def delete_todo(task_id: str) -> dict:
    """Delete a task.

    Args:
        task_id: ID of the task
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    if find_by_id(store.todos, task_id) is None:
        return {"error": "Task not found."}
    if not store.delete_todo(task_id):
        return {"error": "Failed to delete task. Please try again."}
    return {"success": True}


@mcp.tool()
def list_todos() -> dict:
    """List open tasks (most important first) and completed tasks (newest first)."""
    store = get_profile_store()
    return {
        "active": [t.to_storage() for t in active_tasks(store.todos)],
        "completed": [t.to_storage() for t in completed_tasks(store.todos)],
    }


# ==================== Query Tools ====================


@mcp.tool()
def get_day(date_str: str | None = None) -> dict:
    """Get everything logged on one day.

    Args:
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        Dictionary with the day's mood, stress, sleep, appetite and journal entries
    """
    store = get_profile_store()
    try:
        day = _parse_date(date_str, store)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    snapshot = day_snapshot(day, store.moods, store.stress, store.sleep, store.appetite, store.journal)
    return snapshot.model_dump(mode="json", by_alias=True, exclude_none=True)


@mcp.tool()
def get_insights() -> dict:
    """Get averages, streaks, distributions and trend series for all trackers.

    Averages are shown as "—" when nothing has been logged.
    """
    store = get_profile_store()
    if not store.has_profile:
        return NO_PROFILE_ERROR
    return insights_summary(
        store.moods, store.stress, store.sleep, store.appetite, store.journal, store.today()
    )


@mcp.tool()
def get_tips() -> dict:
    """Get mindful tips based on what was logged today."""
    store = get_profile_store()
    today = store.today()
    snapshot = day_snapshot(today, store.moods, store.stress, store.sleep, store.appetite, store.journal)
    return {
        "date": today.isoformat(),
        "has_data": has_data(snapshot),
        "tips": mindful_tips(snapshot),
    }


# ==================== Chat Tools ====================


@mcp.tool()
def chat(message: str, history: list[dict] | None = None) -> dict:
    """Talk to the supportive assistant.

    Uses the hosted model when an API key is configured, otherwise (or on
    any failure) built-in suggestions.

    Args:
        message: The user's message
        history: Earlier turns as [{"role": "user"|"assistant", "content": "..."}]

    Returns:
        The assistant's reply
    """
    if not message.strip():
        return {"error": "Message cannot be empty."}
    try:
        turns = [ChatMessage(**m) for m in history or []]
    except (ValidationError, TypeError) as e:
        return {"error": f"Invalid history: {e}"}
    return {"reply": get_chat_assistant().reply(turns, message.strip())}
