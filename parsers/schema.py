# parsers/schema.py
"""
Data contracts between the posting extractor, storage and the API.

The extractor fills what it can and leaves the rest as None.
"""

from typing import Optional, TypedDict


class JobPosting(TypedDict):
    """Best-effort attributes of a job posting page (RAW)."""
    job_title: Optional[str]        # e.g. "Senior Engineer"
    company: Optional[str]
    location: Optional[str]
    job_description: Optional[str]  # whitespace collapsed, not truncated
    posting_url: Optional[str]


class ApplicationEntry(TypedDict, total=False):
    """
    A captured posting the user is applying to (stored in app_storage).
    """
    # === REQUIRED ===
    id: str                         # uuid4
    job_title: str                  # "Untitled Role" when nothing was found
    company: str                    # "Unknown Company" when nothing was found
    job_description: str
    created_at: str                 # ISO datetime (UTC)

    # === OPTIONAL ===
    location: Optional[str]
    posting_url: Optional[str]
    tailored_resume_metadata_id: Optional[str]
