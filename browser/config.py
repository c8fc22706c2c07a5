# Browser automation configuration

import os
from pathlib import Path

from dotenv import load_dotenv

# Directories
BROWSER_DIR = Path(__file__).parent
PROJECT_ROOT = BROWSER_DIR.parent
SCREENSHOTS_DIR = PROJECT_ROOT / "screenshots"

# Local overrides (AUTOFILL_HIGHLIGHT_MS=..., PAGE_LOAD_TIMEOUT=...)
load_dotenv(PROJECT_ROOT / ".env")

# Timeouts (seconds)
PAGE_LOAD_TIMEOUT = int(os.getenv("PAGE_LOAD_TIMEOUT", "60"))
FORM_SETTLE_WAIT = float(os.getenv("FORM_SETTLE_WAIT", "2"))
POSTING_FETCH_TIMEOUT = int(os.getenv("POSTING_FETCH_TIMEOUT", "20"))

# Browser settings
USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"

BROWSER_ARGS = [
    '--disable-blink-features=AutomationControlled',
    '--no-sandbox',
    '--disable-dev-shm-usage',
]

# Anti-detection script
STEALTH_SCRIPT = """
    Object.defineProperty(navigator, 'webdriver', {
        get: () => undefined
    });
    Object.defineProperty(navigator, 'languages', {
        get: () => ['en-US', 'en']
    });
"""

# Autofill highlight (visual only)
HIGHLIGHT_STYLE_ID = "job-autofill-style"
HIGHLIGHT_CLASS = "job-autofill-highlight"
HIGHLIGHT_DURATION_MS = int(os.getenv("AUTOFILL_HIGHLIGHT_MS", "1000"))
HIGHLIGHT_CSS = f"""
    .{HIGHLIGHT_CLASS} {{
      outline: 2px solid #2563eb;
      transition: outline 0.3s ease;
    }}
"""
