"""
Actions run against the page the user is looking at.

- inspect_form: what the analyzer sees (fields + scores, upload inputs)
- capture_job_posting: raw posting attributes
- run_autofill: fill the form for one application entry
"""

import logging
from typing import Optional

from browser.auto_fill import autofill_form
from browser.form_analyzer import describe_upload_input, detect_resume_upload_inputs, find_form_fields
from parsers.universal import extract_job_posting
from storage import app_storage

logger = logging.getLogger(__name__)

REASON_NO_PROFILE = "NO_PROFILE"
REASON_ENTRY_NOT_FOUND = "ENTRY_NOT_FOUND"


def inspect_form(document) -> dict:
    fields = [detected.to_dict() for detected in find_form_fields(document)]
    file_inputs = [describe_upload_input(el) for el in detect_resume_upload_inputs(document)]
    return {"fields": fields, "file_inputs": file_inputs}


def capture_job_posting(document, url: Optional[str] = None) -> dict:
    return {"ok": True, "partial": extract_job_posting(document, url=url)}


def run_autofill(document, application_entry_id: str) -> dict:
    """Autofill `document` with the stored profile for an existing entry."""
    profile = app_storage.get_user_profile()
    if profile is None:
        return {"ok": False, "reason": REASON_NO_PROFILE}

    entry = app_storage.get_application_entry_by_id(application_entry_id)
    if entry is None:
        return {"ok": False, "reason": REASON_ENTRY_NOT_FOUND}

    logger.info(f"Running autofill for entry {application_entry_id} ({entry.get('job_title')})")
    result = autofill_form(document, profile)

    return {
        "ok": True,
        **result.to_dict(),
        "resume_upload_inputs_detected": len(detect_resume_upload_inputs(document)),
    }
