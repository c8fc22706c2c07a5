"""
Browser client for live job application pages.

Usage:
    from browser import BrowserClient

    with BrowserClient(headless=True) as browser:
        browser.open_job_page("https://...")
        result = autofill_form(browser.document, profile)
        browser.screenshot("after_fill.png")
"""

import logging
import time
from pathlib import Path
from typing import Optional

from playwright.sync_api import Browser, BrowserContext, Page, sync_playwright

from .config import (
    BROWSER_ARGS,
    PAGE_LOAD_TIMEOUT,
    SCREENSHOTS_DIR,
    STEALTH_SCRIPT,
    USER_AGENT,
)
from .page_document import PageDocument

logger = logging.getLogger(__name__)


class BrowserClient:
    """Playwright (Chromium) session with one page."""

    def __init__(self, headless: bool = True):
        self.headless = headless
        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._screenshot_counter = 0

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def start(self):
        """Start browser instance."""
        self.playwright = sync_playwright().start()
        self.browser = self.playwright.chromium.launch(
            headless=self.headless,
            args=BROWSER_ARGS,
        )
        self.context = self.browser.new_context(
            viewport={"width": 1400, "height": 900},
            user_agent=USER_AGENT,
        )
        self.page = self.context.new_page()
        self.page.add_init_script(STEALTH_SCRIPT)
        logger.info("Browser started")

    def close(self):
        """Close browser and cleanup."""
        if self.browser:
            self.browser.close()
        if self.playwright:
            self.playwright.stop()
        logger.info("Browser closed")

    @property
    def document(self) -> PageDocument:
        return PageDocument(self.page)

    def open_job_page(self, url: str, settle_seconds: float = 0) -> bool:
        """
        Open a job page URL.

        Returns:
            True if page loaded successfully
        """
        logger.info(f"Opening: {url}")
        try:
            self.page.goto(url, wait_until="domcontentloaded", timeout=PAGE_LOAD_TIMEOUT * 1000)
            if settle_seconds:
                time.sleep(settle_seconds)  # let client-side forms render
            logger.info(f"Page title: {self.page.title()}")
            return True
        except Exception as e:
            logger.error(f"Error opening page {url}: {e}")
            return False

    def screenshot(self, name: Optional[str] = None, full_page: bool = False) -> Path:
        """Save a screenshot under SCREENSHOTS_DIR and return its path."""
        if name is None:
            self._screenshot_counter += 1
            name = f"screenshot_{self._screenshot_counter}.png"
        if not name.endswith(".png"):
            name += ".png"

        SCREENSHOTS_DIR.mkdir(parents=True, exist_ok=True)
        path = SCREENSHOTS_DIR / name
        self.page.screenshot(path=str(path), full_page=full_page)
        logger.info(f"Screenshot saved: {path}")
        return path
