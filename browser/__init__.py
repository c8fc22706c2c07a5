"""
Form detection and autofill for job applications.

Usage:
    from browser import SnapshotDocument, UserProfile, autofill_form

    doc = SnapshotDocument(html)
    result = autofill_form(doc, UserProfile(first_name="Grace", email="grace@example.com"))
"""

from .auto_fill import AutofillResult, auto_fill, autofill_form
from .client import BrowserClient
from .dom import DetachedElementError, SnapshotDocument
from .field_patterns import FIELD_PATTERNS, FieldIdentifier
from .form_analyzer import DetectedField, detect_resume_upload_inputs, find_form_fields
from .page_document import PageDocument
from .profile import UserProfile, get_value_for_field

__all__ = [
    "AutofillResult",
    "BrowserClient",
    "DetachedElementError",
    "DetectedField",
    "FIELD_PATTERNS",
    "FieldIdentifier",
    "PageDocument",
    "SnapshotDocument",
    "UserProfile",
    "auto_fill",
    "autofill_form",
    "detect_resume_upload_inputs",
    "find_form_fields",
    "get_value_for_field",
]
