"""Application dialog state machine"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List
from urllib.parse import urlparse

from linkedin_autoapply.state.detector import (
    ActionButton,
    DialogStatus,
    detect,
    page_shows_success,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10

REASON_UNEXPECTED_NAVIGATION = "unexpected_navigation"
REASON_DIALOG_DISMISSED = "dialog_dismissed"
REASON_MAX_STEPS = "max_steps"


class DriverState(Enum):
    SEARCHING = "searching"
    DIALOG_PRESENT = "dialog_present"
    FILLING = "filling"
    ADVANCING = "advancing"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    ERROR = "error"


@dataclass
class DriverResult:
    state: DriverState
    steps: int = 0
    advances: int = 0
    reason: str = ""
    history: List[DriverState] = field(default_factory=list)

    @property
    def succeeded(self):
        return self.state is DriverState.SUCCESS


def host_matches(url, expected_host):
    host = (urlparse(url or "").hostname or "").lower()
    expected = expected_host.lower()
    return host == expected or host.endswith("." + expected)


class ApplicationDialogDriver:
    """
    Drive an open Easy Apply dialog to submission within a step budget.

    Each step re-detects the dialog from scratch, fills what is empty, and
    presses the best advance button (Submit > Review > Next). Every button
    press counts as one advance; every loop iteration counts as one step.
    """

    def __init__(self, document, filler, max_steps=DEFAULT_MAX_STEPS, expected_host="linkedin.com"):
        self.document = document
        self.filler = filler
        self.max_steps = max_steps
        self.expected_host = expected_host

    def run(self, job_context=None):
        history = [DriverState.SEARCHING]
        advances = 0
        dialog_seen = False

        def finish(state, step, reason=""):
            history.append(state)
            if state is DriverState.SUCCESS:
                log.info("Application submitted after %d step(s), %d advance(s)", step, advances)
            else:
                log.warning("Dialog driver stopped: %s (%s) at step %d", state.value, reason, step)
            return DriverResult(state, step, advances, reason, history)

        for step in range(1, self.max_steps + 1):
            if not host_matches(self.document.current_url(), self.expected_host):
                return finish(DriverState.ERROR, step, REASON_UNEXPECTED_NAVIGATION)

            state = detect(self.document)

            if state.status is DialogStatus.NOT_PRESENT:
                if not dialog_seen:
                    log.debug("Step %d: waiting for the application dialog", step)
                    self.document.settle()
                    continue
                if page_shows_success(self.document):
                    return finish(DriverState.SUCCESS, step)
                return finish(DriverState.ERROR, step, REASON_DIALOG_DISMISSED)

            dialog_seen = True

            if state.status is DialogStatus.SUCCESS:
                self._click_done(state)
                return finish(DriverState.SUCCESS, step)

            history.append(DriverState.DIALOG_PRESENT)
            if state.error_text:
                log.info("Step %d: validation error shown: %s", step, state.error_text[:100])

            if state.stuck:
                log.info("Step %d: advance buttons disabled, filling before retrying", step)

            history.append(DriverState.FILLING)
            self.filler.fill_all(state.dialog, job_context)
            self.filler.resolve_checkboxes(state.dialog, job_context)

            # Buttons often enable only after the fields are filled
            state = detect(self.document)
            if state.status is DialogStatus.SUCCESS:
                self._click_done(state)
                return finish(DriverState.SUCCESS, step)
            if state.status is DialogStatus.NOT_PRESENT:
                continue

            kind, button = state.advance_button()
            if button is None:
                log.warning("Step %d: no enabled advance button after filling. Buttons: %s", step, ", ".join(state.all_buttons))
                continue

            history.append(DriverState.ADVANCING)
            log.info("Step %d: clicking %s", step, kind.value)
            if not self.document.click(button):
                log.warning("Step %d: %s click did not register", step, kind.value)
                continue
            advances += 1
            self.document.settle()

            after = detect(self.document, retry_stuck=False)
            if after.status is DialogStatus.SUCCESS:
                self._click_done(after)
                return finish(DriverState.SUCCESS, step)
            if (
                after.status is DialogStatus.NOT_PRESENT
                and kind is ActionButton.SUBMIT
                and page_shows_success(self.document)
            ):
                return finish(DriverState.SUCCESS, step)

        return finish(DriverState.EXHAUSTED, self.max_steps, REASON_MAX_STEPS)

    def _click_done(self, state):
        """Best-effort close of the confirmation dialog"""
        button = state.buttons.get(ActionButton.DONE) or state.buttons.get(ActionButton.DISMISS)
        if button is None:
            return
        try:
            self.document.click(button)
        except Exception as e:
            log.debug("Could not close confirmation dialog: %s", e)
