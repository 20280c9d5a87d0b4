"""Keyboard interactions"""

import logging
import random

from linkedin_autoapply.utils.timing import human_delay

log = logging.getLogger(__name__)


def keyboard_fill_input(page, element, value, timing=None, label="field"):
    """Fill input using keyboard (more human-like)

    Focuses the element, selects whatever it holds, and types the new value
    one character at a time. Raises on Playwright errors so the caller can
    count the field as failed.
    """
    timing = timing or {}

    element.scroll_into_view_if_needed()
    element.focus()
    human_delay(timing.get("focus_delay_min", 200), timing.get("focus_delay_max", 400))

    # Clear existing value
    page.keyboard.press("Control+a")
    page.keyboard.press("Backspace")
    human_delay(100, 200)

    # Type new value with realistic delays
    delay = random.randint(timing.get("key_delay_min", 50), timing.get("key_delay_max", 150))
    element.press_sequentially(value, delay=delay)
    human_delay(timing.get("post_input_min", 200), timing.get("post_input_max", 400))
    log.debug("Typed %d chars into %s", len(value), label)


def keyboard_press(page, key, timing=None):
    """Press a single key followed by a short human pause"""
    timing = timing or {}
    page.keyboard.press(key)
    human_delay(timing.get("key_delay_min", 50) * 2, timing.get("key_delay_max", 150) * 2)
