#!/usr/bin/env python3
"""
Autofill engine.

Writes profile values into the fields found by form_analyzer and reports
what was filled and what was skipped. Every write is followed by bubbling
"input" and "change" events so frameworks bound to the page notice it.

Each control is filled at most once: the best-ranked detection for a
control claims it and later detections of the same control are ignored.

`autofill_form()` works on any document backend; `auto_fill()` drives a live
page in Playwright and returns a JSON-able result instead of raising.
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .client import BrowserClient
from .config import (
    FORM_SETTLE_WAIT,
    HIGHLIGHT_CLASS,
    HIGHLIGHT_CSS,
    HIGHLIGHT_DURATION_MS,
    HIGHLIGHT_STYLE_ID,
)
from .field_patterns import FieldIdentifier
from .form_analyzer import DetectedField, detect_resume_upload_inputs, find_form_fields
from .profile import get_value_for_field

logger = logging.getLogger(__name__)

NOTIFY_EVENTS = ("input", "change")


@dataclass
class AutofillResult:
    filled_fields: List[Tuple[FieldIdentifier, str]] = field(default_factory=list)
    skipped_fields: List[FieldIdentifier] = field(default_factory=list)

    def to_dict(self):
        return {
            "filled_fields": [{"field": f.value, "value": value} for f, value in self.filled_fields],
            "skipped_fields": [f.value for f in self.skipped_fields],
        }


def ensure_highlight_style(document) -> bool:
    """Make sure the highlight <style> exists in this document (once)."""
    return document.ensure_style(HIGHLIGHT_STYLE_ID, HIGHLIGHT_CSS)


def apply_value(element, value: str):
    """
    Write `value` into a control and notify the page.

    Selects pick the option whose value or visible text equals `value`
    (by the option's value); without a match the raw string is assigned.
    """
    if element.tag_name == "select":
        option = next((o for o in element.options() if o.value == value or o.text == value), None)
        element.set_value(option.value if option is not None else value)
    else:
        element.set_value(value)

    for event_type in NOTIFY_EVENTS:
        element.dispatch_event(event_type)


def _highlight(element):
    element.add_class(HIGHLIGHT_CLASS)
    element.scroll_into_view()
    element.remove_class_later(HIGHLIGHT_CLASS, HIGHLIGHT_DURATION_MS)


def autofill_form(document, profile, detected: Optional[List[DetectedField]] = None) -> AutofillResult:
    """
    Fill the detected fields of `document` from `profile`.

    Args:
        document: SnapshotDocument or PageDocument
        profile: UserProfile, a dict with the same keys, or None
        detected: ranking from find_form_fields (computed here if omitted)
    """
    ensure_highlight_style(document)
    if detected is None:
        detected = find_form_fields(document)

    result = AutofillResult()
    claimed = set()

    for item in detected:
        if item.element in claimed:
            continue
        claimed.add(item.element)

        value = get_value_for_field(profile, item.field)
        if value is None:
            result.skipped_fields.append(item.field)
            continue

        try:
            apply_value(item.element, value)
        except Exception as e:
            logger.warning(f"Could not fill {item.field.value}: {e}")
            result.skipped_fields.append(item.field)
            continue

        try:
            _highlight(item.element)
        except Exception as e:
            logger.debug(f"Highlight skipped for {item.field.value}: {e}")

        result.filled_fields.append((item.field, value))

    logger.info(
        f"Autofill: {len(result.filled_fields)} filled, {len(result.skipped_fields)} skipped"
    )
    return result


def auto_fill(url: str, profile, screenshot_name: Optional[str] = None, headless: bool = True) -> dict:
    """
    Open `url` in a browser and autofill it.

    Returns dict with results (no user interaction).
    """
    result = {
        "ok": False,
        "url": url,
        "filled_fields": [],
        "skipped_fields": [],
        "resume_upload_inputs_detected": 0,
        "screenshot": None,
        "error": None,
    }

    if profile is None:
        result["error"] = "Profile not found"
        return result

    try:
        with BrowserClient(headless=headless) as browser:
            if not browser.open_job_page(url, settle_seconds=FORM_SETTLE_WAIT):
                result["error"] = "Failed to open page"
                return result

            document = browser.document
            outcome = autofill_form(document, profile)

            result.update(outcome.to_dict())
            result["resume_upload_inputs_detected"] = len(detect_resume_upload_inputs(document))
            if screenshot_name:
                result["screenshot"] = str(browser.screenshot(screenshot_name))
            result["ok"] = True

    except Exception as e:
        logger.error(f"Autofill run failed for {url}: {e}")
        result["error"] = str(e)

    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    from storage.app_storage import get_user_profile

    if len(sys.argv) < 2:
        print("Usage: python -m browser.auto_fill <application-url>")
        sys.exit(1)

    print(json.dumps(auto_fill(sys.argv[1], get_user_profile()), indent=2))
