"""Browser session management"""

import logging
import time
from pathlib import Path

from playwright.sync_api import sync_playwright

log = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

FEED_URL = "https://www.linkedin.com/feed/"


def launch_browser(bot_settings):
    """
    Launch persistent browser context and return (playwright, context, page).
    Reuses login session across runs.
    """
    session_dir = Path(bot_settings.session_path)
    session_dir.mkdir(parents=True, exist_ok=True)
    log.info("Launching browser (session directory: %s)", session_dir)

    p = sync_playwright().start()

    context = p.chromium.launch_persistent_context(
        user_data_dir=str(session_dir),
        headless=bot_settings.headless,
        viewport={"width": 1280, "height": 900},
        user_agent=USER_AGENT,
        locale="en-US",
    )
    page = context.pages[0] if context.pages else context.new_page()
    page.set_extra_http_headers({"Accept-Language": "en-US,en;q=0.9"})

    return p, context, page


def close_browser(playwright, context):
    try:
        context.close()
    finally:
        playwright.stop()


def is_logged_in(page):
    url = page.url
    return "/login" not in url and "/checkpoint" not in url and "/authwall" not in url


def wait_for_login(page, timeout_s=300, poll_s=5):
    """
    Open the feed; if LinkedIn asks for a login, wait for the operator to
    complete it in the browser window. The session is kept in the profile.
    """
    page.goto(FEED_URL, wait_until="domcontentloaded", timeout=30000)
    if is_logged_in(page):
        log.info("Already logged in")
        return True

    log.warning("Not logged in - please log into LinkedIn in the browser window (waiting %ds)", timeout_s)
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        time.sleep(poll_s)
        if "/feed" in page.url:
            log.info("Login detected")
            return True
    return False
