"""Button interactions"""

import logging

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from linkedin_autoapply.utils.timing import human_delay

log = logging.getLogger(__name__)

# Location typeaheads LinkedIn has used over time
AUTOCOMPLETE_SELECTORS = [
    '.basic-typeahead__selectable',
    '[role="listbox"] [role="option"]',
    '.search-typeahead-v2__hit',
    '.fb-single-typeahead-entity',
    '.artdeco-typeahead__result',
    'div[data-basic-typeahead-option]',
]

ERROR_SELECTORS = [
    '[role="dialog"] .artdeco-inline-feedback--error',
    '[role="dialog"] [role="alert"]',
    '[role="dialog"] .error-message',
]

DISMISS_SELECTORS = [
    '[role="dialog"] button[aria-label="Dismiss"]',
    'button[aria-label="Dismiss"]',
    '.artdeco-modal__dismiss',
]

DISCARD_SELECTORS = [
    'button[data-test-dialog-secondary-btn]',
    '[role="alertdialog"] button:has-text("Discard")',
    'button:has-text("Discard")',
]


def click_element(page, locator, label="button", timing=None):
    """Click an element located from a snapshot - False if it is gone or disabled"""
    timing = timing or {}
    try:
        if locator.count() == 0:
            log.warning("'%s' no longer in the page", label)
            return False

        btn = locator.first
        if btn.is_disabled():
            log.warning("'%s' button found but DISABLED - required fields are probably empty", label)
            for err_sel in ERROR_SELECTORS:
                errors = page.locator(err_sel)
                if errors.count() > 0:
                    log.warning("  Error message: %s", errors.first.inner_text()[:100])
            return False

        btn.scroll_into_view_if_needed()
        human_delay(timing.get("focus_delay_min", 200), timing.get("focus_delay_max", 400))
        btn.click()
        log.debug("Clicked '%s'", label)
        return True
    except PlaywrightError as e:
        log.warning("Error clicking '%s': %s", label, e)
        return False


def click_first_suggestion(page, timeout_ms):
    """Wait for a location autocomplete list and click its first entry"""
    combined = ", ".join(AUTOCOMPLETE_SELECTORS)
    try:
        page.wait_for_selector(combined, state="visible", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        return False

    for selector in AUTOCOMPLETE_SELECTORS:
        options = page.locator(selector)
        if options.count() > 0 and options.first.is_visible():
            options.first.click()
            log.debug("Picked autocomplete suggestion via %s", selector)
            return True
    return False


def _click_first_visible(page, selectors):
    for selector in selectors:
        candidates = page.locator(selector)
        if candidates.count() > 0 and candidates.first.is_visible():
            candidates.first.click()
            return True
    return False


def close_modal(page, timing=None):
    """Dismiss the Easy Apply dialog and discard the draft application"""
    timing = timing or {}
    try:
        if not _click_first_visible(page, DISMISS_SELECTORS):
            return False
        human_delay(timing.get("modal_transition_min", 1500), timing.get("modal_transition_max", 2500))
        if _click_first_visible(page, DISCARD_SELECTORS):
            human_delay(timing.get("dropdown_close_min", 300), timing.get("dropdown_close_max", 500))
        return True
    except PlaywrightError as e:
        log.warning("Error closing modal: %s", e)
        return False
