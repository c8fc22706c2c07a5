"""
Universal job posting extractor.

Pulls title / company / location / description out of any job page using
ordered selector cascades: for each attribute the selectors are tried in
priority order and the first element (in document order) with non-empty
text wins. No scoring, no site-specific code.

Title falls back to the cleaned <title>; the other attributes have no
fallback and are None when nothing matches.
"""

import logging
from typing import Iterable, Optional

import requests

from browser.config import POSTING_FETCH_TIMEOUT, USER_AGENT
from browser.dom import SnapshotDocument
from parsers.schema import JobPosting
from utils.normalize import clean_document_title, normalize_whitespace

logger = logging.getLogger(__name__)


TITLE_SELECTORS = [
    'h1[data-testid="job-title"]',
    'h1',
    '[data-testid="jobTitle"]',
    '[class*="jobsearch-JobInfoHeader-title"]',
    '[class*="jobTitle"]',
]

COMPANY_SELECTORS = [
    '[data-testid="company-name"]',
    '[class*="jobsearch-CompanyInfoContainer"] a',
    '[class*="jobsearch-CompanyInfoContainer"]',
    '[class*="companyName"]',
    'a[href*="company"]',
]

LOCATION_SELECTORS = [
    '[data-testid="job-location"]',
    '[data-testid*="location"]',
    '[class*="jobsearch-JobInfoHeader-subtitle"] [class*="location"]',
    '[class*="job-location"]',
    '[class*="jobLocation"]',
]

DESCRIPTION_SELECTORS = [
    '#jobDescriptionText',
    '[data-testid="jobDescriptionText"]',
    '[class*="jobsearch-jobDescriptionText"]',
    'article',
    'main',
]


def pick_text(document, selectors: Iterable[str]) -> Optional[str]:
    """First non-empty trimmed text over `selectors`, tried in order."""
    for selector in selectors:
        for element in document.query_selector_all(selector):
            text = (element.text_content() or "").strip()
            if text:
                return text
    return None


def extract_title(document) -> Optional[str]:
    title = pick_text(document, TITLE_SELECTORS)
    if title:
        return title
    return clean_document_title(document.title) or None


def extract_description(document) -> Optional[str]:
    text = pick_text(document, DESCRIPTION_SELECTORS)
    return normalize_whitespace(text) if text else None


def extract_posting_url(document, url: Optional[str] = None) -> Optional[str]:
    if url:
        return url
    canonical = document.query_selector('link[rel="canonical"]')
    if canonical is not None:
        return canonical.get_attribute("href") or None
    return None


def extract_job_posting(document, url: Optional[str] = None) -> JobPosting:
    """
    Best-effort extraction of posting attributes from a document.

    Works on a SnapshotDocument (parsed HTML) or a PageDocument (live page).
    """
    posting: JobPosting = {
        "job_title": extract_title(document),
        "company": pick_text(document, COMPANY_SELECTORS),
        "location": pick_text(document, LOCATION_SELECTORS),
        "job_description": extract_description(document),
        "posting_url": extract_posting_url(document, url),
    }
    found = [key for key, value in posting.items() if value]
    logger.debug(f"Posting extraction found: {found}")
    return posting


def fetch_job_posting(url: str, timeout: int = POSTING_FETCH_TIMEOUT) -> JobPosting:
    """
    Download a posting page and extract it.

    Raises requests.RequestException on network / HTTP errors.
    """
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    try:
        r = requests.get(url, timeout=timeout, headers=headers)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to fetch posting {url}: {e}")
        raise

    return extract_job_posting(SnapshotDocument(r.text), url=url)


# Test
if __name__ == "__main__":
    import json
    import sys

    logging.basicConfig(level=logging.INFO)
    test_url = sys.argv[1] if len(sys.argv) > 1 else "https://example.com/jobs/123"
    print(f"Testing URL: {test_url}")
    print(json.dumps(fetch_job_posting(test_url), indent=2))
