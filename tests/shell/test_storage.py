"""Tests for key-value storage backends."""

import pytest
from unittest.mock import MagicMock, patch

from moodgarden.shell.storage import (
    FirestoreConfig,
    FirestoreKeyValueStore,
    MemoryKeyValueStore,
    create_store,
)


class TestMemoryKeyValueStore:
    """Tests for MemoryKeyValueStore."""

    def test_set_get_delete(self):
        store = MemoryKeyValueStore()
        assert store.get("a") is None
        assert store.set("a", "1") is True
        assert store.get("a") == "1"
        store.delete("a")
        assert store.get("a") is None

    def test_delete_missing_is_ok(self):
        assert MemoryKeyValueStore().delete("nope") is True

    def test_keys_by_prefix(self):
        store = MemoryKeyValueStore({"moodGarden_cat_tom_todos": "[]", "moodGarden_preferences": "{}", "other": ""})
        assert store.keys("moodGarden_cat_") == ["moodGarden_cat_tom_todos"]
        assert len(store.keys()) == 3


@pytest.fixture
def mock_collection():
    """Firestore collection mock behind a FirestoreKeyValueStore."""
    with patch("moodgarden.shell.storage.firestore") as mock_fs:
        mock_client = MagicMock()
        mock_fs.Client.return_value = mock_client
        yield mock_client.collection.return_value, mock_fs


class TestFirestoreKeyValueStore:
    """Tests for FirestoreKeyValueStore with a mocked client."""

    def test_get_existing(self, mock_collection):
        collection, _ = mock_collection
        doc = collection.document.return_value.get.return_value
        doc.exists = True
        doc.to_dict.return_value = {"value": "[1]"}

        store = FirestoreKeyValueStore(FirestoreConfig(collection="mg"))
        assert store.get("k") == "[1]"
        collection.document.assert_called_with("k")

    def test_get_missing(self, mock_collection):
        collection, _ = mock_collection
        collection.document.return_value.get.return_value.exists = False
        assert FirestoreKeyValueStore().get("k") is None

    def test_get_error_returns_none(self, mock_collection):
        collection, _ = mock_collection
        collection.document.return_value.get.side_effect = RuntimeError("unavailable")
        assert FirestoreKeyValueStore().get("k") is None

    def test_set_writes_value_field(self, mock_collection):
        collection, _ = mock_collection
        assert FirestoreKeyValueStore().set("k", "[]") is True
        collection.document.return_value.set.assert_called_once_with({"value": "[]"})

    def test_set_error_returns_false(self, mock_collection):
        collection, _ = mock_collection
        collection.document.return_value.set.side_effect = RuntimeError("denied")
        assert FirestoreKeyValueStore().set("k", "[]") is False

    def test_keys_filtered(self, mock_collection):
        collection, _ = mock_collection
        refs = [MagicMock(id="moodGarden_dog_rex_todos"), MagicMock(id="moodGarden_preferences")]
        collection.list_documents.return_value = refs
        assert FirestoreKeyValueStore().keys("moodGarden_dog_") == ["moodGarden_dog_rex_todos"]

    def test_client_uses_config(self, mock_collection):
        _, mock_fs = mock_collection
        store = FirestoreKeyValueStore(FirestoreConfig(project_id="p", database="d"))
        store.get("k")
        mock_fs.Client.assert_called_once_with(project="p", database="d")


class TestCreateStore:
    """Tests for backend selection."""

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("MOODGARDEN_STORAGE", "memory")
        assert isinstance(create_store(), MemoryKeyValueStore)

    def test_firestore_backend(self, monkeypatch):
        monkeypatch.setenv("MOODGARDEN_STORAGE", "firestore")
        monkeypatch.setenv("FIRESTORE_COLLECTION", "wellness")
        store = create_store()
        assert isinstance(store, FirestoreKeyValueStore)
        assert store.config.collection == "wellness"
