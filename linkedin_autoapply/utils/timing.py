"""Timing utilities"""

import random
import time


def human_delay(min_ms=300, max_ms=800):
    """Random human-like delay"""
    delay = random.uniform(min_ms, max_ms) / 1000
    time.sleep(delay)


def interruptible_delay(min_ms, max_ms, stop_event=None):
    """Random delay that returns early when stop_event is set.

    Returns True if the full delay elapsed, False if interrupted.
    """
    delay = random.uniform(min_ms, max_ms) / 1000
    if stop_event is None:
        time.sleep(delay)
        return True
    return not stop_event.wait(delay)


def format_elapsed_time(seconds):
    """Format elapsed time in human-readable format"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        mins = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{mins}m {secs}s"
    else:
        hours = int(seconds // 3600)
        mins = int((seconds % 3600) // 60)
        return f"{hours}h {mins}m"
