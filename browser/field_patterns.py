"""
Field pattern table.

Maps each semantic field to the regexes that recognise it in an element's
name / id / aria-label / placeholder / label text. Pure data: the scoring
lives in form_analyzer.compute_score.

Row order matters only as the tie-break between equal scores
(firstName/lastName are listed before the generic fullName row).
"""

import re
from enum import Enum
from typing import List, Pattern, Tuple


class FieldIdentifier(str, Enum):
    """Semantic form fields the autofill engine knows how to fill."""
    FULL_NAME = "fullName"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    CITY = "city"
    POSTAL_CODE = "postalCode"
    LINKEDIN_URL = "linkedinUrl"
    GITHUB_URL = "githubUrl"
    WEBSITE_URL = "websiteUrl"


def _compile(*patterns: str) -> Tuple[Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


FIELD_PATTERNS: Tuple[Tuple[FieldIdentifier, Tuple[Pattern, ...]], ...] = (
    (FieldIdentifier.FIRST_NAME, _compile(r"first.?name", r"given")),
    (FieldIdentifier.LAST_NAME, _compile(r"last.?name", r"family", r"surname")),
    (FieldIdentifier.FULL_NAME, _compile(r"name", r"full.?name", r"applicant")),
    (FieldIdentifier.EMAIL, _compile(r"email", r"e-mail")),
    (FieldIdentifier.PHONE, _compile(r"phone", r"mobile", r"tel")),
    (FieldIdentifier.ADDRESS, _compile(r"address", r"street")),
    (FieldIdentifier.CITY, _compile(r"city", r"town")),
    (FieldIdentifier.POSTAL_CODE, _compile(r"postal", r"zip")),
    (FieldIdentifier.LINKEDIN_URL, _compile(r"linkedin")),
    (FieldIdentifier.GITHUB_URL, _compile(r"github")),
    (FieldIdentifier.WEBSITE_URL, _compile(r"portfolio", r"website", r"url")),
)


def get_patterns(field: FieldIdentifier) -> Tuple[Pattern, ...]:
    """Patterns for a single field (empty tuple for unknown fields)."""
    for identifier, patterns in FIELD_PATTERNS:
        if identifier == field:
            return patterns
    return ()


def field_order() -> List[FieldIdentifier]:
    return [identifier for identifier, _ in FIELD_PATTERNS]
