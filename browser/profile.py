"""
User profile for job application autofill.

Handles:
- The profile record (UserProfile) and its dict round-trip
- Resolving a detected field to the value we should type into it
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from .field_patterns import FieldIdentifier


# Field -> UserProfile attribute. fullName is composed from first/last.
PROFILE_ATTRIBUTES: Dict[FieldIdentifier, str] = {
    FieldIdentifier.FIRST_NAME: "first_name",
    FieldIdentifier.LAST_NAME: "last_name",
    FieldIdentifier.EMAIL: "email",
    FieldIdentifier.PHONE: "phone",
    FieldIdentifier.ADDRESS: "address",
    FieldIdentifier.CITY: "city",
    FieldIdentifier.POSTAL_CODE: "postal_code",
    FieldIdentifier.LINKEDIN_URL: "linkedin_url",
    FieldIdentifier.GITHUB_URL: "github_url",
    FieldIdentifier.WEBSITE_URL: "website_url",
}


@dataclass
class UserProfile:
    """Personal details used to fill applications. None means "not set"."""

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
    target_job_titles: List[str] = field(default_factory=list)
    summary: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _lookup(profile, attribute: str):
    if isinstance(profile, Mapping):
        return profile.get(attribute)
    return getattr(profile, attribute, None)


def compose_full_name(profile) -> str:
    """'First Last' from the trimmed name parts, skipping empty ones."""
    parts = [_lookup(profile, "first_name"), _lookup(profile, "last_name")]
    return " ".join(part.strip() for part in parts if part and part.strip())


def get_value_for_field(profile, field_id: FieldIdentifier) -> Optional[str]:
    """
    Value to inject for a detected field, or None when the profile has none.

    An empty full name is None (nothing to write); other attributes are
    returned as stored, with lists joined by ", ".
    """
    if profile is None:
        return None

    if field_id == FieldIdentifier.FULL_NAME:
        return compose_full_name(profile) or None

    attribute = PROFILE_ATTRIBUTES.get(field_id)
    if attribute is None:
        return None

    value = _lookup(profile, attribute)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)
