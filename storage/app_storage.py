# storage/app_storage.py
"""
Local state for the autofill app.

Single file: data/autofill_state.json
{
  "user_profile": {...} | null,
  "application_entries": [...],
  "general_resume_text": "..." | null
}

Every write replaces the whole file atomically (temp file + os.replace).
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv

from browser.profile import UserProfile
from parsers.schema import ApplicationEntry

logger = logging.getLogger(__name__)

load_dotenv(Path(__file__).parent.parent / ".env")

DATA_DIR = Path(os.getenv("AUTOFILL_DATA_DIR", str(Path(__file__).parent.parent / "data")))
STATE_FILE = DATA_DIR / "autofill_state.json"

KEY_USER_PROFILE = "user_profile"
KEY_APPLICATION_ENTRIES = "application_entries"
KEY_GENERAL_RESUME_TEXT = "general_resume_text"
STATE_KEYS = (KEY_USER_PROFILE, KEY_APPLICATION_ENTRIES, KEY_GENERAL_RESUME_TEXT)

# Held for every load-modify-save cycle; sync FastAPI endpoints run in a threadpool
_state_lock = threading.RLock()


def _load_state() -> dict:
    """Load the whole state file ({} when missing or unreadable)."""
    if not STATE_FILE.exists():
        return {}
    try:
        with STATE_FILE.open("r", encoding="utf-8") as f:
            state = json.load(f)
    except (ValueError, OSError) as e:
        # ValueError covers bad JSON and undecodable bytes
        logger.warning(f"Ignoring unreadable state file {STATE_FILE}: {e}")
        return {}
    return state if isinstance(state, dict) else {}


def _save_state(state: dict):
    """Save the state with atomic write + fsync"""
    STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(STATE_FILE.parent), suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, str(STATE_FILE))
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def _read(key: str):
    with _state_lock:
        return _load_state().get(key)


def _update(mutate: Callable[[dict], Any]):
    """Load, mutate in place and save the state as one locked step. Returns mutate's result."""
    with _state_lock:
        state = _load_state()
        result = mutate(state)
        _save_state(state)
        return result


def _write(key: str, value):
    _update(lambda state: state.__setitem__(key, value))


def _entries_of(state: dict) -> List[ApplicationEntry]:
    entries = state.get(KEY_APPLICATION_ENTRIES)
    return entries if isinstance(entries, list) else []


# ============ Profile ============

def get_user_profile() -> Optional[UserProfile]:
    """Stored user profile, if one exists."""
    data = _read(KEY_USER_PROFILE)
    if not isinstance(data, dict):
        return None
    return UserProfile.from_dict(data)


def save_user_profile(profile: UserProfile):
    _write(KEY_USER_PROFILE, profile.to_dict())


def get_general_resume_text() -> Optional[str]:
    return _read(KEY_GENERAL_RESUME_TEXT)


def save_general_resume_text(resume_text: Optional[str]):
    _write(KEY_GENERAL_RESUME_TEXT, resume_text)


# ============ Application Entries ============

def get_application_entries() -> List[ApplicationEntry]:
    """All entries in stored order."""
    entries = _read(KEY_APPLICATION_ENTRIES)
    return entries if isinstance(entries, list) else []


def save_application_entries(entries: List[ApplicationEntry]):
    _write(KEY_APPLICATION_ENTRIES, list(entries))


def get_application_entry_by_id(entry_id: str) -> Optional[ApplicationEntry]:
    for entry in get_application_entries():
        if entry.get("id") == entry_id:
            return entry
    return None


def upsert_application_entry(entry: ApplicationEntry):
    """Insert or replace by id, keeping a single copy."""
    def mutate(state):
        entries = _entries_of(state)
        for i, existing in enumerate(entries):
            if existing.get("id") == entry["id"]:
                entries[i] = entry
                break
        else:
            entries.append(entry)
        state[KEY_APPLICATION_ENTRIES] = entries

    _update(mutate)


def update_application_entry(entry_id: str, changes: Dict[str, Any]) -> Optional[ApplicationEntry]:
    """Merge `changes` into a stored entry. None (and no write) if it doesn't exist."""
    with _state_lock:
        state = _load_state()
        entries = _entries_of(state)
        for i, existing in enumerate(entries):
            if existing.get("id") == entry_id:
                entries[i] = {**existing, **changes, "id": entry_id}
                state[KEY_APPLICATION_ENTRIES] = entries
                _save_state(state)
                return entries[i]
    return None


def delete_application_entry(entry_id: str) -> bool:
    """Remove an entry. Returns True if something was removed."""
    def mutate(state):
        entries = _entries_of(state)
        remaining = [e for e in entries if e.get("id") != entry_id]
        state[KEY_APPLICATION_ENTRIES] = remaining
        return len(remaining) != len(entries)

    return _update(mutate)


def clear_all_data():
    """Drop every key this app manages."""
    def mutate(state):
        for key in STATE_KEYS:
            state.pop(key, None)

    _update(mutate)
