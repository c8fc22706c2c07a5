import re
from typing import Optional

# "Senior Engineer - Acme Careers", "Engineer | Indeed.com", "Role • Site"
RE_TITLE_SUFFIX = re.compile(r"\s+[-|•–—]\s+.*$")
RE_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return RE_WHITESPACE.sub(" ", text or "").strip()


def clean_document_title(title: Optional[str]) -> str:
    """
    Strip the trailing site name from a <title>.

    Only separators surrounded by spaces count, so "Front-end Engineer"
    stays intact.
    """
    title = normalize_whitespace(title)
    return RE_TITLE_SUFFIX.sub("", title).strip()
