"""
Application entries: captured job postings the user is applying to.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from parsers.schema import ApplicationEntry
from parsers.universal import extract_job_posting
from storage import app_storage

logger = logging.getLogger(__name__)

DEFAULT_JOB_TITLE = "Untitled Role"
DEFAULT_COMPANY = "Unknown Company"
MIN_TITLE_LENGTH = 2
REQUIRED_ENTRY_FIELDS = ("job_title", "company", "job_description")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_entry_id() -> str:
    return str(uuid.uuid4())


def create_application_entry_from_page(url: str, document) -> ApplicationEntry:
    """Extract the posting shown in `document` and save it as a new entry."""
    partial = extract_job_posting(document, url=url)

    title = partial["job_title"]
    if not title or len(title) < MIN_TITLE_LENGTH:
        title = DEFAULT_JOB_TITLE

    entry: ApplicationEntry = {
        "id": generate_entry_id(),
        "job_title": title,
        "company": partial["company"] or DEFAULT_COMPANY,
        "location": partial["location"],
        "job_description": partial["job_description"] or "",
        "posting_url": partial["posting_url"] or url,
        "created_at": _now_iso(),
    }
    app_storage.upsert_application_entry(entry)
    logger.info(f"Captured application entry {entry['id']}: {entry['job_title']} @ {entry['company']}")
    return entry


def list_application_entries() -> List[ApplicationEntry]:
    """Entries sorted newest first."""
    entries = app_storage.get_application_entries()
    return sorted(entries, key=lambda e: e.get("created_at") or "", reverse=True)


def update_application_entry(entry_id: str, updates: Dict[str, Any]) -> Optional[ApplicationEntry]:
    """
    Merge `updates` into an entry. None if the entry doesn't exist.

    `id` can't be changed, and a null title, company or description is ignored.
    """
    changes = {
        key: value
        for key, value in updates.items()
        if key != "id" and not (key in REQUIRED_ENTRY_FIELDS and value is None)
    }
    return app_storage.update_application_entry(entry_id, changes)


def delete_application_entry(entry_id: str) -> bool:
    return app_storage.delete_application_entry(entry_id)


def replace_application_entries(entries: List[ApplicationEntry]):
    app_storage.save_application_entries(entries)
