"""Application outcome and bot status notifications"""

import logging
from typing import Protocol

log = logging.getLogger(__name__)


class Notifier(Protocol):
    def application_sent(self, job, details: str = "") -> None: ...

    def application_failed(self, job, reason: str) -> None: ...

    def bot_status(self, status: str, details: str = "") -> None: ...

    def critical_error(self, message: str) -> None: ...


class LogNotifier:
    """Default notifier: writes outcomes to the run log."""

    def application_sent(self, job, details=""):
        log.info("Application sent: %s at %s %s", job.title, job.company, details)

    def application_failed(self, job, reason):
        log.warning("Application failed: %s at %s (%s)", job.title, job.company, reason)

    def bot_status(self, status, details=""):
        log.info("Bot %s %s", status, details)

    def critical_error(self, message):
        log.error("Critical: %s", message)


def notify_safely(notifier, method, *args):
    """Call a notifier method, logging transport failures instead of raising."""
    if notifier is None:
        return False
    try:
        getattr(notifier, method)(*args)
        return True
    except Exception as e:
        log.warning("Notifier %s.%s failed: %s", type(notifier).__name__, method, e)
        return False
