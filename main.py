# main.py
"""
HTTP surface for the autofill engine.

The page (or an extension relaying it) posts its HTML; we classify, extract
or fill it and answer with JSON. Run with:
    uvicorn main:app --reload
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from api.application_entries import (
    create_application_entry_from_page,
    delete_application_entry,
    list_application_entries,
    update_application_entry,
)
from api.page_actions import capture_job_posting, inspect_form, run_autofill
from browser.dom import SnapshotDocument
from browser.profile import UserProfile
from storage import app_storage

# Environment: PROD or DEV
ENV = os.getenv("JOB_AUTOFILL_ENV", "PROD")

logger = logging.getLogger(__name__)


app = FastAPI(
    title="Job Autofill",
    description="Heuristic form autofill and job posting capture",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------
# Request models
# -----------------------------

class ProfilePayload(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    website_url: Optional[str] = None
    target_job_titles: List[str] = []
    summary: Optional[str] = None


class PageRequest(BaseModel):
    html: str


class CaptureRequest(BaseModel):
    html: str
    url: str = ""


class AutofillRequest(BaseModel):
    html: str
    application_entry_id: str


class EntryUpdate(BaseModel):
    job_title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    job_description: Optional[str] = None
    posting_url: Optional[str] = None
    tailored_resume_metadata_id: Optional[str] = None


# -----------------------------
# Endpoints
# -----------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/env")
def get_env():
    """Return current environment (PROD/DEV)"""
    return {"env": ENV}


@app.get("/profile")
def get_profile():
    profile = app_storage.get_user_profile()
    return {"profile": profile.to_dict() if profile else None}


@app.put("/profile")
def put_profile(payload: ProfilePayload):
    profile = UserProfile.from_dict(payload.model_dump())
    app_storage.save_user_profile(profile)
    return {"ok": True, "profile": profile.to_dict()}


@app.post("/inspect")
def inspect(payload: PageRequest):
    """Fields the analyzer detects on the posted form, best first."""
    return inspect_form(SnapshotDocument(payload.html))


@app.post("/capture")
def capture(payload: CaptureRequest):
    """
    Capture the posted job page as a new application entry.
    """
    if not payload.html.strip():
        return {"ok": False, "reason": "EMPTY_PAGE"}
    try:
        entry = create_application_entry_from_page(payload.url, SnapshotDocument(payload.html))
    except Exception:
        logger.exception(f"Failed to create application entry from {payload.url or '<no url>'}")
        return {"ok": False, "reason": "CAPTURE_FAILED"}
    return {"ok": True, "entry": entry}


@app.post("/capture/preview")
def capture_preview(payload: CaptureRequest):
    """Extract posting attributes without saving anything."""
    return capture_job_posting(SnapshotDocument(payload.html), url=payload.url or None)


@app.post("/autofill")
def autofill(payload: AutofillRequest):
    """
    Fill the posted form for an application entry.
    Returns the outcome plus the filled HTML.
    """
    document = SnapshotDocument(payload.html)
    response = run_autofill(document, payload.application_entry_id)
    if response.get("ok"):
        document.run_timers()
        response["html"] = document.html()
    return response


@app.get("/applications")
def get_applications():
    entries = list_application_entries()
    return {"count": len(entries), "entries": entries}


@app.get("/applications/{entry_id}")
def get_application(entry_id: str):
    entry = app_storage.get_application_entry_by_id(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Application entry not found")
    return entry


@app.patch("/applications/{entry_id}")
def patch_application(entry_id: str, payload: EntryUpdate):
    updated = update_application_entry(entry_id, payload.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(status_code=404, detail="Application entry not found")
    return updated


@app.delete("/applications/{entry_id}")
def remove_application(entry_id: str):
    return {"ok": delete_application_entry(entry_id)}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="127.0.0.1", port=int(os.getenv("PORT", "8000")))
