"""Integration tests for the HTTP app and MCP tools over in-memory storage."""

from datetime import date

import pytest
from starlette.testclient import TestClient

from moodgarden.main import create_app
from moodgarden.shell import mcp_server
from moodgarden.shell.profile_store import ProfileStore
from moodgarden.shell.storage import MemoryKeyValueStore


TODAY = date(2024, 3, 14)


@pytest.fixture
def storage():
    return MemoryKeyValueStore()


@pytest.fixture
def store(storage, monkeypatch):
    """Fresh profile store behind the MCP tools."""
    store = ProfileStore(storage, clock=lambda: TODAY)
    monkeypatch.setattr(mcp_server, "_profile_store", store)
    monkeypatch.setattr(mcp_server, "_chat_assistant", None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return store


@pytest.fixture
def profile(store):
    mcp_server.select_profile("cat", "Tom")
    return store


@pytest.fixture
def client():
    return TestClient(create_app())


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_returns_json(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["service"] == "moodgarden-mcp"

    def test_cors_preflight_localhost(self, client):
        response = client.options(
            "/health",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert response.status_code == 200
        assert response.headers.get("access-control-allow-origin") == "http://localhost:5173"


class TestProfileTools:
    """Tests for profile tools."""

    def test_tools_need_profile(self, store):
        assert "error" in mcp_server.log_mood(mood=3)
        assert "error" in mcp_server.get_insights()

    def test_select_profile(self, store):
        result = mcp_server.select_profile("dog", "  Rex ")
        assert result["pet_name"] == "Rex"
        assert mcp_server.get_profile()["profile_selected"] is True

    def test_select_twice_refused(self, profile):
        assert "error" in mcp_server.select_profile("dog", "Rex")

    def test_blank_name_refused(self, store):
        assert "error" in mcp_server.select_profile("cat", "  ")

    def test_switch_needs_confirmation(self, profile):
        result = mcp_server.switch_profile("dog", "Rex")
        assert result["confirmation_required"] is True
        assert profile.preferences.pet_name == "Tom"

    def test_switch_isolates_data(self, profile):
        mcp_server.log_stress(stress_level=4)
        result = mcp_server.switch_profile("dog", "Rex", confirm=True)
        assert result["pet_name"] == "Rex"
        assert mcp_server.get_day()["date"] == TODAY.isoformat()
        assert "stress" not in mcp_server.get_day()

        mcp_server.switch_profile("cat", "Tom", confirm=True)
        assert mcp_server.get_day()["stress"]["stressLevel"] == 4

    def test_reset_needs_confirmation(self, profile):
        mcp_server.log_mood(mood=3)
        assert mcp_server.reset_data()["confirmation_required"] is True
        assert len(profile.moods) == 1

        assert mcp_server.reset_data(confirm=True)["success"] is True
        assert profile.moods == []

    def test_api_key_round_trip(self, profile):
        mcp_server.set_api_key("sk-test")
        assert mcp_server.get_profile()["chat_api_key_configured"] is True
        mcp_server.set_api_key(None)
        assert mcp_server.get_profile()["chat_api_key_configured"] is False

    def test_set_theme(self, profile):
        assert mcp_server.set_theme("dark") == {"theme": "dark"}


class TestTrackerTools:
    """Tests for tracker tools."""

    def test_log_mood_with_emotions(self, profile):
        result = mcp_server.log_mood(emotions=["happy", "Calm"], notes="Nice walk")
        labels = [e["label"] for e in result["entry"]["emotions"]]
        assert labels == ["Happy", "Calm"]
        assert result["entry"]["date"] == TODAY.isoformat()

    def test_log_mood_rejects_three_emotions(self, profile):
        result = mcp_server.log_mood(emotions=["happy", "calm", "sad"])
        assert "error" in result
        assert profile.moods == []

    def test_log_mood_unknown_emotion(self, profile):
        assert "Unknown emotion" in mcp_server.log_mood(emotions=["grumpy-ish"])["error"]

    def test_log_mood_bad_date(self, profile):
        assert "YYYY-MM-DD" in mcp_server.log_mood(mood=3, date_str="14/03/2024")["error"]

    def test_relog_same_day_replaces(self, profile):
        first = mcp_server.log_mood(mood=2)["entry"]
        second = mcp_server.log_mood(mood=5)["entry"]
        assert second["id"] == first["id"]
        assert [m.mood for m in profile.moods] == [5]

    def test_log_stress_triggers(self, profile):
        entry = mcp_server.log_stress(stress_level=3, triggers="work, traffic")["entry"]
        assert entry["triggers"] == ["work", "traffic"]

    def test_log_stress_out_of_range(self, profile):
        assert "error" in mcp_server.log_stress(stress_level=7)

    def test_log_sleep(self, profile):
        entry = mcp_server.log_sleep(hours=7.5, quality=4, bedtime="23:00", wake_time="06:30")["entry"]
        assert entry["hours"] == 7.5
        assert entry["wakeTime"] == "06:30"

    def test_appetite_scenario(self, profile):
        mcp_server.log_appetite(water_intake=3, date_str="2024-01-01")
        mcp_server.log_appetite(water_intake=5, date_str="2024-01-01")
        assert len(profile.appetite) == 1
        assert profile.appetite[0].water_intake == 5

    def test_meals_kept_when_water_relogged(self, profile):
        meal = mcp_server.add_meal("08:15", "breakfast", "Porridge", rating=4)["meal"]
        mcp_server.log_appetite(water_intake=6)
        entry = profile.appetite[0]
        assert entry.water_intake == 6
        assert [m.id for m in entry.meals] == [meal["id"]]

        mcp_server.remove_meal(meal["id"])
        assert profile.appetite[0].meals == []
        assert "error" in mcp_server.remove_meal(meal["id"])

    def test_add_meal_bad_time(self, profile):
        assert "error" in mcp_server.add_meal("8am")


class TestJournalAndTodoTools:
    """Tests for journal and to-do tools."""

    def test_journal_write_edit_delete(self, profile):
        entry = mcp_server.write_journal("Morning", "Slept well", mood=4)["entry"]
        edited = mcp_server.write_journal("Morning", "Slept really well", entry_id=entry["id"])["entry"]
        assert edited["id"] == entry["id"]
        assert mcp_server.list_journal()[0]["content"] == "Slept really well"

        assert mcp_server.delete_journal(entry["id"])["entries_remaining"] == 0
        assert "error" in mcp_server.delete_journal(entry["id"])

    def test_journal_edit_unknown(self, profile):
        assert "error" in mcp_server.write_journal("T", "C", entry_id="missing")

    def test_journal_blank_title(self, profile):
        assert "error" in mcp_server.write_journal("  ", "Body")

    def test_todo_flow(self, profile):
        low = mcp_server.add_todo("Tidy desk", importance="low")["task"]
        high = mcp_server.add_todo("Book appointment", importance="high")["task"]

        listing = mcp_server.list_todos()
        assert [t["title"] for t in listing["active"]] == ["Book appointment", "Tidy desk"]

        done = mcp_server.toggle_todo(high["id"])["task"]
        assert done["completedAt"] == TODAY.isoformat()
        assert [t["id"] for t in mcp_server.list_todos()["completed"]] == [high["id"]]

        reopened = mcp_server.toggle_todo(high["id"])["task"]
        assert "completedAt" not in reopened

        assert mcp_server.delete_todo(low["id"]) == {"success": True}
        assert "error" in mcp_server.toggle_todo(low["id"])

    def test_blank_todo_refused(self, profile):
        assert "error" in mcp_server.add_todo("   ")


class TestQueryTools:
    """Tests for insights, tips and emotion listing."""

    def test_insights(self, profile):
        for offset, level in enumerate([5, 3, 1]):
            mcp_server.log_mood(mood=level, date_str=date(2024, 3, 14 - offset).isoformat())
        insights = mcp_server.get_insights()
        assert insights["mood"]["average"] == "3.0"
        assert insights["mood"]["streak"] == 3
        assert insights["stress"]["average"] == "—"

    def test_tips(self, profile):
        tips = mcp_server.get_tips()
        assert tips["has_data"] is False
        assert len(tips["tips"]) > 0

    def test_list_emotions(self, store):
        groups = mcp_server.list_emotions()
        assert set(groups) == {"yellow", "red", "green", "blue", "gray"}


class TestChatTool:
    """Tests for the chat tool without a hosted key."""

    def test_fallback_reply(self, profile):
        reply = mcp_server.chat("I can't sleep")["reply"]
        assert "sleep" in reply.lower()

    def test_empty_message(self, profile):
        assert "error" in mcp_server.chat("  ")

    def test_bad_history(self, profile):
        assert "error" in mcp_server.chat("hi", history=[{"role": "system", "content": "x"}])


class TestUpdateMealTool:
    """Tests for update_meal."""

    def test_update_fields(self, profile):
        meal = mcp_server.add_meal("12:30", "lunch", "Soup")["meal"]
        updated = mcp_server.update_meal(meal["id"], description="Tomato soup", rating=5)["meal"]
        assert updated["description"] == "Tomato soup"
        assert updated["rating"] == 5
        assert updated["time"] == "12:30"

    def test_update_invalid_and_missing(self, profile):
        meal = mcp_server.add_meal("12:30", "lunch", "Soup")["meal"]
        assert "error" in mcp_server.update_meal(meal["id"], rating=9)
        assert "error" in mcp_server.update_meal(meal["id"])
        assert "error" in mcp_server.update_meal("missing", rating=3)

    def test_clear_rating(self, profile):
        meal = mcp_server.add_meal("12:30", "lunch", "Soup", rating=2)["meal"]
        updated = mcp_server.update_meal(meal["id"], rating=0)["meal"]
        assert "rating" not in updated
        assert updated["description"] == "Soup"


class TestStorageFailures:
    """Tools report failed writes instead of a saved entry."""

    @pytest.fixture
    def failing_store(self, storage, monkeypatch):
        store = ProfileStore(storage, clock=lambda: TODAY)
        store.select_profile("cat", "Tom")
        monkeypatch.setattr(mcp_server, "_profile_store", store)
        monkeypatch.setattr(storage, "set", lambda key, value: False)
        return store

    def test_log_mood_write_fails(self, failing_store):
        result = mcp_server.log_mood(mood=3)
        assert result == {"error": "Failed to save mood. Please try again."}
        assert failing_store.moods == []

    def test_tracker_and_todo_writes_fail(self, failing_store):
        assert "error" in mcp_server.log_stress(stress_level=2)
        assert "error" in mcp_server.log_sleep(hours=8, quality=4)
        assert "error" in mcp_server.log_appetite(water_intake=4)
        assert "error" in mcp_server.add_meal("08:00")
        assert "error" in mcp_server.write_journal("Title", "Body")
        assert "error" in mcp_server.add_todo("Walk")
        assert "error" in mcp_server.set_theme("dark")
        assert failing_store.appetite == []
