"""
Form Analyzer - heuristic field detection.

Scores every enabled, non-hidden form control against the field pattern
table, using the textual signals the page gives us about each control:
1. name / id attributes
2. aria-label and placeholder
3. associated <label> text

A signal counts once per field no matter how many of that field's patterns
it matches, so a score is "how many independent hints agree".

Works on any document backend (browser.dom.SnapshotDocument for parsed HTML,
browser.page_document.PageDocument for a live Playwright page).
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Pattern

from .field_patterns import FIELD_PATTERNS, FieldIdentifier

logger = logging.getLogger(__name__)

CANDIDATE_SELECTOR = "input, textarea, select"
UPLOAD_SELECTOR = 'input[type="file"]'
PLACEHOLDER_TAGS = ("input", "textarea")


@dataclass
class DetectedField:
    """A control that looks like `field`, with the number of agreeing signals."""

    element: Any
    field: FieldIdentifier
    score: int

    def to_dict(self):
        return {"field": self.field.value, "score": self.score}


def harvest_signals(element) -> List[str]:
    """
    Collect the textual hints about one control.

    Returns the non-empty values among: name, id, aria-label, placeholder
    (inputs and textareas only) and the space-joined text of its labels.
    """
    signals = [
        element.get_attribute("name"),
        element.get_attribute("id"),
        element.get_attribute("aria-label"),
    ]
    if element.tag_name in PLACEHOLDER_TAGS:
        signals.append(element.get_attribute("placeholder"))
    signals.append(" ".join(element.label_texts()))

    return [signal for signal in signals if signal and signal.strip()]


def compute_score(signals: Iterable[str], patterns: Iterable[Pattern]) -> int:
    patterns = tuple(patterns)
    return sum(1 for signal in signals if any(p.search(signal) for p in patterns))


def is_candidate(element) -> bool:
    return not element.disabled and element.type != "hidden"


def find_form_fields(document) -> List[DetectedField]:
    """
    Detect likely application form fields.

    Every (control, field) pair with a positive score is returned, best
    first. Equal scores keep document order, then pattern-table order.
    The same control can appear under several fields.
    """
    candidates = [el for el in document.query_selector_all(CANDIDATE_SELECTOR) if is_candidate(el)]

    detected: List[DetectedField] = []
    for element in candidates:
        signals = harvest_signals(element)
        if not signals:
            continue
        for field, patterns in FIELD_PATTERNS:
            score = compute_score(signals, patterns)
            if score > 0:
                detected.append(DetectedField(element=element, field=field, score=score))

    # list.sort is stable, reverse=True included
    detected.sort(key=lambda d: d.score, reverse=True)

    logger.debug(f"Form analysis: {len(candidates)} candidates, {len(detected)} detections")
    return detected


def detect_resume_upload_inputs(document) -> list:
    """Enabled file inputs, where a resume upload would go."""
    return [el for el in document.query_selector_all(UPLOAD_SELECTOR) if not el.disabled]


def describe_upload_input(element) -> str:
    return element.get_attribute("name") or element.get_attribute("id") or "file-input"
