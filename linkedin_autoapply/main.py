#!/usr/bin/env python3
"""
LinkedIn Easy Apply Bot - Main Orchestration

Searches jobs, pre-filters them, and drives each Easy Apply dialog to
submission. One browser page, one job at a time.
"""

import argparse
import dataclasses
import logging
import random
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum

from linkedin_autoapply import config
from linkedin_autoapply.browser.job_page import JobPage, landed_on_wrong_page
from linkedin_autoapply.browser.playwright_document import PlaywrightDocument
from linkedin_autoapply.browser.session import close_browser, launch_browser, wait_for_login
from linkedin_autoapply.data.state_store import JsonApplicationStore
from linkedin_autoapply.debug.unresolved_collector import flush_unresolved_fields
from linkedin_autoapply.interaction.form_filler import FormFiller
from linkedin_autoapply.llm import build_providers
from linkedin_autoapply.reasoning.answer_resolver import AnswerResolver
from linkedin_autoapply.reasoning.prefilter import JobPrefilter
from linkedin_autoapply.state.machine import (
    REASON_UNEXPECTED_NAVIGATION,
    ApplicationDialogDriver,
)
from linkedin_autoapply.utils.logging import log_result, setup_logging
from linkedin_autoapply.utils.notify import LogNotifier, notify_safely
from linkedin_autoapply.utils.timing import format_elapsed_time, interruptible_delay

log = logging.getLogger(__name__)

# Skip / failure reason constants
SKIP_ALREADY_APPLIED = "already_applied"
SKIP_ALREADY_APPLIED_LINKEDIN = "already_applied_linkedin"
SKIP_NOT_EASY_APPLY = "not_easy_apply"
SKIP_NO_EASY_APPLY_BUTTON = "no_easy_apply"
FAIL_NAVIGATION = "navigation_failed"
FAIL_WRONG_BUTTON = "clicked_wrong_button"


class ApplyStatus(Enum):
    APPLIED = "APPLIED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ApplyOutcome:
    status: ApplyStatus
    reason: str = ""
    steps: int = 0


@dataclass
class RunStats:
    applied: int = 0
    skipped: int = 0
    failed: int = 0
    pages: int = 0

    def record(self, outcome):
        if outcome.status is ApplyStatus.APPLIED:
            self.applied += 1
        elif outcome.status is ApplyStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


class ApplicationRunner:
    """
    Orchestrates one bot run.

    Collaborators are injected so the flow can run against fakes:
    job_page (search / open / click Easy Apply), document (the dialog the
    driver works on), resolver, store and notifier.
    """

    def __init__(self, settings, job_page, document, resolver, store, notifier=None,
                 prefilter=None, stop_event=None, timing=None, debug_unresolved=False,
                 delay=interruptible_delay):
        self.settings = settings
        self.job_page = job_page
        self.document = document
        self.resolver = resolver
        self.store = store
        self.notifier = notifier if notifier is not None else LogNotifier()
        self.prefilter = prefilter or JobPrefilter(settings.job_filter, resolver)
        self.stop_event = stop_event or threading.Event()
        self.timing = timing or config.get_timing()
        self.debug_unresolved = debug_unresolved
        self.delay = delay

        self.filler = FormFiller(
            document,
            resolver,
            radio_fallback=settings.bot.radio_fallback,
            timing=self.timing,
            collect_unresolved=debug_unresolved,
        )

    # -- one job ------------------------------------------------------------

    def apply_to_job(self, job):
        """Apply to one posting. Never raises; every path ends in an outcome."""
        try:
            return self._apply(job)
        except Exception as e:
            log.exception("Error applying to %s: %s", job.title, e)
            self._close_dialog()
            return self._fail(job, f"error: {e}")

    def _apply(self, job):
        if self.store.has_applied(job.job_id):
            log.info("Already applied: %s", job.title)
            return self._skip(job, SKIP_ALREADY_APPLIED)

        if job.already_applied:
            log.info("Already applied (LinkedIn): %s", job.title)
            self.store.record_applied(job, source="linkedin")
            return self._finish(job, ApplyOutcome(ApplyStatus.SKIPPED, SKIP_ALREADY_APPLIED_LINKEDIN))

        if not job.easy_apply:
            return self._skip(job, SKIP_NOT_EASY_APPLY)

        decision = self.prefilter.check_listing(job)
        if not decision.accepted:
            log.info("Skipping %s: %s", job.title, decision.reason)
            return self._skip(job, decision.reason)

        log.info("Applying to: %s at %s (job %s)", job.title, job.company, job.job_id)
        return self._apply_on_page(job)

    def _apply_on_page(self, job):
        if not self.job_page.open(job):
            return self._fail(job, FAIL_NAVIGATION)

        applied, why = self.job_page.is_already_applied()
        if applied:
            log.info("Already applied on LinkedIn (%s): %s", why, job.title)
            self.store.record_applied(job, source="linkedin")
            return self._finish(job, ApplyOutcome(ApplyStatus.SKIPPED, SKIP_ALREADY_APPLIED_LINKEDIN))

        description = self.job_page.description()
        decision = self.prefilter.check_description(job, description)
        if not decision.accepted:
            log.info("Skipping %s: %s", job.title, decision.reason)
            return self._skip(job, decision.reason)

        if not self.job_page.click_easy_apply():
            log.info("No Easy Apply button found: %s", job.title)
            return self._skip(job, SKIP_NO_EASY_APPLY_BUTTON)

        url = self.document.current_url()
        if landed_on_wrong_page(url):
            log.warning("Clicked wrong button! Ended up at: %s", url)
            self.document.go_back()
            return self._fail(job, FAIL_WRONG_BUTTON)

        driver = ApplicationDialogDriver(
            self.document,
            self.filler,
            max_steps=self.settings.bot.max_steps,
            expected_host=self.settings.bot.expected_host,
        )
        result = driver.run(job.context(description))

        if result.succeeded:
            self.store.record_applied(job)
            notify_safely(self.notifier, "application_sent", job, f"({result.steps} steps)")
            return self._finish(job, ApplyOutcome(ApplyStatus.APPLIED, steps=result.steps))

        self._close_dialog()
        if result.reason == REASON_UNEXPECTED_NAVIGATION:
            self.document.go_back()
        return self._fail(job, result.reason, steps=result.steps)

    def _close_dialog(self):
        try:
            self.document.close_dialog()
        except Exception as e:
            log.warning("Could not close the dialog: %s", e)

    def _skip(self, job, reason):
        self.store.record_skipped(job, reason)
        return self._finish(job, ApplyOutcome(ApplyStatus.SKIPPED, reason))

    def _fail(self, job, reason, steps=0):
        try:
            self.store.record_failed(job, reason)
        except Exception as e:
            log.warning("Could not record failure for job %s: %s", job.job_id, e)
        notify_safely(self.notifier, "application_failed", job, reason)
        return self._finish(job, ApplyOutcome(ApplyStatus.FAILED, reason, steps))

    def _finish(self, job, outcome):
        log_result(
            job.view_url,
            outcome.status.value,
            reason=outcome.reason,
            steps_completed=outcome.steps,
            path=self.settings.bot.result_log,
            job_id=job.job_id,
            title=job.title,
            company=job.company,
        )
        if self.debug_unresolved:
            flush_unresolved_fields()
        return outcome

    # -- whole run ----------------------------------------------------------

    def should_stop(self):
        if self.stop_event.is_set():
            log.info("Stop requested")
            return True
        if self.store.is_daily_limit_reached():
            log.info("Daily limit of %d applications reached", self.settings.bot.daily_limit)
            return True
        return False

    def _pace(self, applied_count):
        delays = self.settings.delays
        if delays.session_break_after and applied_count % delays.session_break_after == 0:
            log.info("Taking a session break after %d applications", applied_count)
            self.delay(delays.session_break_min, delays.session_break_max, self.stop_event)
        else:
            self.delay(delays.between_applications_min, delays.between_applications_max, self.stop_event)

    def run(self, search_terms=None):
        terms = list(search_terms or self.settings.search.terms)
        if self.settings.search.randomize:
            random.shuffle(terms)

        stats = RunStats()
        switch_after = self.settings.search.switch_after

        for term in terms:
            if self.should_stop():
                break
            applied_for_term = 0
            log.info("Search term: %r", term)

            for page_number in range(self.settings.search.max_pages):
                if self.should_stop():
                    break
                if not self.job_page.search(term, page_number):
                    break
                jobs = self.job_page.job_cards()
                if not jobs:
                    log.info("No more jobs for %r", term)
                    break
                stats.pages += 1
                log.info("Found %d jobs on page %d", len(jobs), page_number + 1)

                for job in jobs:
                    if self.should_stop():
                        break
                    outcome = self.apply_to_job(job)
                    stats.record(outcome)
                    if outcome.status is ApplyStatus.APPLIED:
                        applied_for_term += 1
                        self._pace(stats.applied)
                    if applied_for_term >= switch_after:
                        break

                if applied_for_term >= switch_after:
                    log.info("Applied to %d jobs for %r, switching term", applied_for_term, term)
                    break

        return stats


def build_parser():
    parser = argparse.ArgumentParser(
        description="LinkedIn Easy Apply Bot - Automated application submission",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Speed Modes:
  --speed dev       faster UI timings for testing
  --speed super     fastest timings that still pass the safety floors
  (default)         Production speed - safest, most human-like

Examples:
  python -m linkedin_autoapply.main
  python -m linkedin_autoapply.main --env-file prod.env
  python -m linkedin_autoapply.main --speed dev --term "Python Developer"
        """,
    )
    parser.add_argument("--env-file", help="Load settings from this .env file")
    parser.add_argument("--speed", choices=["dev", "super"], help="UI timing profile")
    parser.add_argument(
        "--term",
        action="append",
        help="Search term (repeatable); overrides SEARCH_TERMS",
    )
    parser.add_argument(
        "--debug-unresolved",
        action="store_true",
        help="Record unresolved and defaulted fields to debug_unresolved.jsonl",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    settings = config.load_settings(env_file=args.env_file)
    if args.term:
        settings = dataclasses.replace(
            settings, search=dataclasses.replace(settings.search, terms=tuple(args.term))
        )
    try:
        config.validate_settings(settings)
    except config.ConfigError as e:
        log.error("%s", e)
        return 2

    timing = config.get_timing(args.speed)

    store = JsonApplicationStore(settings.bot.save_path, settings.bot.daily_limit)
    primary, backup = build_providers(settings.ai)
    resolver = AnswerResolver(settings.profile, primary, backup)
    notifier = LogNotifier()

    start_time = time.time()
    try:
        playwright, context, page = launch_browser(settings.bot)
    except Exception as e:
        log.exception("Could not launch the browser: %s", e)
        notify_safely(notifier, "critical_error", f"Browser launch failed: {e}")
        return 1
    stop_event = threading.Event()
    try:
        if not wait_for_login(page):
            log.error("Login not completed - stopping")
            notify_safely(notifier, "critical_error", "Login not completed")
            return 1

        runner = ApplicationRunner(
            settings,
            JobPage(page, settings, timing),
            PlaywrightDocument(page, timing),
            resolver,
            store,
            notifier=notifier,
            stop_event=stop_event,
            timing=timing,
            debug_unresolved=args.debug_unresolved,
        )
        notify_safely(notifier, "bot_status", "started", ", ".join(settings.search.terms))
        try:
            stats = runner.run()
        except KeyboardInterrupt:
            stop_event.set()
            log.info("Interrupted")
            notify_safely(notifier, "bot_status", "stopped", "interrupted")
            return 130
        except Exception as e:
            log.exception("Run aborted: %s", e)
            notify_safely(notifier, "critical_error", f"Run aborted: {e}")
            return 1

        summary = f"{stats.applied} applied, {stats.skipped} skipped, {stats.failed} failed"
        log.info(
            "Run finished in %s: %s across %d pages",
            format_elapsed_time(time.time() - start_time), summary, stats.pages,
        )
        log.info("Totals: %s", store.stats())
        notify_safely(notifier, "bot_status", "finished", summary)
        return 0
    finally:
        if args.debug_unresolved:
            flush_unresolved_fields()
        close_browser(playwright, context)


if __name__ == "__main__":
    sys.exit(main())
