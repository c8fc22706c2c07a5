"""
Tests for app_storage.py

Tests the core storage functionality without touching the real data file.
Uses a temporary file for isolation.
"""

import sys
import json
import threading
import pytest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser.profile import UserProfile
from storage import app_storage


# ============ Fixtures ============

@pytest.fixture
def temp_state_file(tmp_path):
    """Point the state file at a temporary location."""
    temp_file = tmp_path / "data" / "autofill_state.json"

    # Patch the STATE_FILE constant
    with patch.object(app_storage, 'STATE_FILE', temp_file):
        yield temp_file


@pytest.fixture
def sample_entry():
    """Sample application entry for testing."""
    return {
        "id": "entry-1",
        "job_title": "Senior Software Engineer",
        "company": "Test Corp",
        "location": "San Francisco, CA",
        "job_description": "Build things.",
        "posting_url": "https://example.com/jobs/123",
        "created_at": "2026-01-15T10:00:00+00:00",
    }


# ============ Load/Save Tests ============

class TestLoadSave:
    """Tests for the state file itself."""

    def test_missing_file_is_empty(self, temp_state_file):
        """Should behave as empty when the file doesn't exist."""
        assert not temp_state_file.exists()
        assert app_storage.get_user_profile() is None
        assert app_storage.get_application_entries() == []
        assert app_storage.get_general_resume_text() is None

    def test_creates_parent_directory(self, temp_state_file):
        app_storage.save_general_resume_text("Resume")

        assert temp_state_file.exists()
        assert json.loads(temp_state_file.read_text())["general_resume_text"] == "Resume"

    def test_corrupt_file_is_empty(self, temp_state_file):
        """Should return empty state for invalid JSON."""
        temp_state_file.parent.mkdir(parents=True)
        temp_state_file.write_text("{ invalid json }")

        assert app_storage.get_application_entries() == []

    def test_undecodable_file_is_empty(self, temp_state_file):
        """Invalid UTF-8 bytes are treated like any other corrupt file."""
        temp_state_file.parent.mkdir(parents=True)
        temp_state_file.write_bytes(b'{"user_profile": "\xff\xfe"}')

        assert app_storage.get_user_profile() is None
        assert app_storage.get_application_entries() == []

    def test_non_dict_file_is_empty(self, temp_state_file):
        temp_state_file.parent.mkdir(parents=True)
        temp_state_file.write_text("[1, 2, 3]")

        assert app_storage.get_user_profile() is None

    def test_no_temp_files_left(self, temp_state_file, sample_entry):
        """Atomic write should not leave temp files behind."""
        app_storage.save_application_entries([sample_entry])

        assert [p.name for p in temp_state_file.parent.iterdir()] == ["autofill_state.json"]

    def test_keys_are_independent(self, temp_state_file, sample_entry):
        app_storage.save_application_entries([sample_entry])
        app_storage.save_user_profile(UserProfile(first_name="Grace"))

        assert app_storage.get_application_entries() == [sample_entry]
        assert app_storage.get_user_profile().first_name == "Grace"


# ============ Profile Tests ============

class TestProfile:
    """Tests for profile persistence."""

    def test_round_trip(self, temp_state_file):
        profile = UserProfile(first_name="Grace", last_name="Hopper", target_job_titles=["Engineer"])

        app_storage.save_user_profile(profile)

        assert app_storage.get_user_profile() == profile

    def test_unknown_stored_keys_ignored(self, temp_state_file):
        temp_state_file.parent.mkdir(parents=True)
        temp_state_file.write_text(json.dumps({"user_profile": {"email": "a@b.c", "legacy": 1}}))

        assert app_storage.get_user_profile() == UserProfile(email="a@b.c")


# ============ Application Entry Tests ============

class TestApplicationEntries:
    """Tests for entry persistence."""

    def test_get_by_id(self, temp_state_file, sample_entry):
        app_storage.save_application_entries([sample_entry])

        assert app_storage.get_application_entry_by_id("entry-1") == sample_entry
        assert app_storage.get_application_entry_by_id("nope") is None

    def test_upsert_inserts(self, temp_state_file, sample_entry):
        app_storage.upsert_application_entry(sample_entry)
        assert len(app_storage.get_application_entries()) == 1

    def test_upsert_replaces(self, temp_state_file, sample_entry):
        """Upserting the same id should keep a single copy."""
        app_storage.upsert_application_entry(sample_entry)
        app_storage.upsert_application_entry({**sample_entry, "company": "New Corp"})

        entries = app_storage.get_application_entries()
        assert len(entries) == 1
        assert entries[0]["company"] == "New Corp"

    def test_delete(self, temp_state_file, sample_entry):
        app_storage.save_application_entries([sample_entry, {**sample_entry, "id": "entry-2"}])

        assert app_storage.delete_application_entry("entry-1") is True
        assert app_storage.delete_application_entry("entry-1") is False
        assert [e["id"] for e in app_storage.get_application_entries()] == ["entry-2"]

    def test_update_merges_and_keeps_id(self, temp_state_file, sample_entry):
        app_storage.save_application_entries([sample_entry])

        updated = app_storage.update_application_entry("entry-1", {"company": "New Corp", "id": "other"})

        assert updated["company"] == "New Corp"
        assert updated["id"] == "entry-1"
        assert app_storage.get_application_entry_by_id("entry-1")["company"] == "New Corp"

    def test_update_missing(self, temp_state_file):
        assert app_storage.update_application_entry("nope", {"company": "X"}) is None
        assert not temp_state_file.exists()


# ============ Concurrency Tests ============

class TestConcurrentWrites:
    """Writers in several threads must not lose each other's changes."""

    def test_parallel_upserts_keep_every_entry(self, temp_state_file, sample_entry):
        def worker(n):
            for i in range(25):
                app_storage.upsert_application_entry({**sample_entry, "id": f"w{n}-{i}"})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = app_storage.get_application_entries()
        assert len(entries) == 100
        assert len({e["id"] for e in entries}) == 100

    def test_parallel_updates_and_deletes(self, temp_state_file, sample_entry):
        app_storage.save_application_entries(
            [{**sample_entry, "id": f"e{i}"} for i in range(40)]
        )

        def deleter():
            for i in range(0, 40, 2):
                app_storage.delete_application_entry(f"e{i}")

        def updater():
            for i in range(1, 40, 2):
                app_storage.update_application_entry(f"e{i}", {"company": "Updated"})

        threads = [threading.Thread(target=deleter), threading.Thread(target=updater)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = app_storage.get_application_entries()
        assert sorted(e["id"] for e in entries) == sorted(f"e{i}" for i in range(1, 40, 2))
        assert all(e["company"] == "Updated" for e in entries)


# ============ Clear Tests ============

class TestClearAllData:
    """Tests for clear_all_data()."""

    def test_clears_managed_keys_only(self, temp_state_file, sample_entry):
        temp_state_file.parent.mkdir(parents=True)
        temp_state_file.write_text(json.dumps({
            "user_profile": {"first_name": "Grace"},
            "application_entries": [sample_entry],
            "general_resume_text": "Resume",
            "other_app": {"keep": True},
        }))

        app_storage.clear_all_data()

        assert json.loads(temp_state_file.read_text()) == {"other_app": {"keep": True}}
        assert app_storage.get_user_profile() is None
