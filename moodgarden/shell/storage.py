"""Key-Value Storage - Backends holding MoodGarden's persisted state.

This module handles all storage I/O. Values are JSON strings keyed by the
storage keys derived in core.namespace; business logic is in the core
module. Two backends share one interface: Firestore for deployments and an
in-process dict for local runs and tests.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol

from google.cloud import firestore


logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string key-value interface used by ProfileStore."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...

    def delete(self, key: str) -> bool: ...

    def keys(self, prefix: str = "") -> list[str]: ...


class MemoryKeyValueStore:
    """Process-local storage. Contents vanish when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def delete(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        collection: Collection holding one document per storage key
    """

    project_id: str | None = None
    database: str | None = None
    collection: str = "moodgarden"

    @classmethod
    def from_env(cls) -> "FirestoreConfig":
        """Build config from FIRESTORE_PROJECT / FIRESTORE_DATABASE / FIRESTORE_COLLECTION."""
        return cls(
            project_id=os.environ.get("FIRESTORE_PROJECT"),
            database=os.environ.get("FIRESTORE_DATABASE"),
            collection=os.environ.get("FIRESTORE_COLLECTION", "moodgarden"),
        )


class FirestoreKeyValueStore:
    """Key-value storage on Firestore.

    Document structure:
        {collection}/{storage_key}: { value: "<json string>" }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _doc_ref(self, key: str) -> firestore.DocumentReference:
        """Get reference to the document holding one key."""
        return self.client.collection(self.config.collection).document(key)

    def get(self, key: str) -> str | None:
        """Fetch a stored value.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if missing or unreadable
        """
        logger.debug("Reading key: %s", key)
        try:
            doc = self._doc_ref(key).get()
            if not doc.exists:
                return None
            return doc.to_dict().get("value")
        except Exception as e:
            logger.error("Failed to read %s: %s", key, str(e))
            return None

    def set(self, key: str, value: str) -> bool:
        """Overwrite a stored value.

        Args:
            key: Storage key
            value: JSON string to store

        Returns:
            True if successful
        """
        logger.debug("Writing key: %s", key)
        try:
            self._doc_ref(key).set({"value": value})
            return True
        except Exception as e:
            logger.error("Failed to write %s: %s", key, str(e))
            return False

    def delete(self, key: str) -> bool:
        """Remove a key. Missing keys are not an error."""
        try:
            self._doc_ref(key).delete()
            return True
        except Exception as e:
            logger.error("Failed to delete %s: %s", key, str(e))
            return False

    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with `prefix`.

        Firestore has no prefix query on document ids, so all ids are
        listed and filtered in memory (acceptable for one user's keys).
        """
        try:
            refs = self.client.collection(self.config.collection).list_documents()
            return sorted(ref.id for ref in refs if ref.id.startswith(prefix))
        except Exception as e:
            logger.error("Failed to list keys: %s", str(e))
            return []


def create_store() -> KeyValueStore:
    """Pick the storage backend from MOODGARDEN_STORAGE (firestore | memory)."""
    backend = os.environ.get("MOODGARDEN_STORAGE", "firestore").lower()
    if backend == "memory":
        logger.info("Using in-memory storage")
        return MemoryKeyValueStore()
    config = FirestoreConfig.from_env()
    logger.info("Using Firestore storage (collection=%s)", config.collection)
    return FirestoreKeyValueStore(config)
