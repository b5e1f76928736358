"""Storage Namespacing - pure key derivation for profile-scoped data.

Every profile (companion species + name) gets its own key prefix, so
switching profile switches to an independent set of collections.
"""

import re

KEY_PREFIX = "moodGarden"
PREFERENCES_KEY = f"{KEY_PREFIX}_preferences"
API_KEY_KEY = f"{KEY_PREFIX}_openai_key"

MOOD = "moodEntries"
STRESS = "stressEntries"
SLEEP = "sleepEntries"
APPETITE = "appetiteEntries"
JOURNAL = "journalEntries"
TODOS = "todos"

COLLECTIONS = (MOOD, STRESS, SLEEP, APPETITE, JOURNAL, TODOS)

_UNSAFE_CHARS = re.compile(r"[^a-z0-9]+")


def sanitize_name(name: str) -> str:
    """Lowercase a name and replace each run of non-alphanumerics with '_'.

    Example: "Mr. Fluffy!" -> "mr_fluffy_"
    """
    return _UNSAFE_CHARS.sub("_", name.lower())


def namespace_prefix(pet_type: str | None, pet_name: str | None) -> str | None:
    """Key prefix for a profile, or None when the profile is incomplete."""
    if not pet_type or not pet_name or not pet_name.strip():
        return None
    return f"{KEY_PREFIX}_{pet_type}_{sanitize_name(pet_name)}"


def storage_key(pet_type: str | None, pet_name: str | None, collection: str) -> str | None:
    """Storage key for one collection of a profile.

    Args:
        pet_type: Companion species ('cat' or 'dog')
        pet_name: Companion name as typed by the user
        collection: One of COLLECTIONS

    Returns:
        'moodGarden_<species>_<sanitized-name>_<collection>', or None if
        species or name is missing (reads and writes are then skipped)
    """
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")
    prefix = namespace_prefix(pet_type, pet_name)
    if prefix is None:
        return None
    return f"{prefix}_{collection}"
