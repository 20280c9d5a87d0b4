"""Job pre-filter: reject postings before any form is filled"""

import json
import logging
import re
from dataclasses import dataclass

from linkedin_autoapply.reasoning.prompts import build_requirements_prompt

log = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

# Requirements above the operator's experience by more than this are rejected
EXPERIENCE_SLACK_YEARS = 2


@dataclass(frozen=True)
class PrefilterDecision:
    accepted: bool
    reason: str = ""


ACCEPT = PrefilterDecision(True)


def _first_contained(haystack, needles):
    lowered = (haystack or "").lower()
    for needle in needles:
        if needle and needle.lower() in lowered:
            return needle
    return None


def parse_requirements(text):
    """Pull the JSON object out of a model reply, or None."""
    if not text:
        return None
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


class JobPrefilter:
    def __init__(self, settings, resolver=None):
        self.settings = settings
        self.resolver = resolver

    def check_listing(self, job):
        """Title and company exclusions, checked before the job page is opened"""
        bad_title = _first_contained(job.title, self.settings.bad_job_titles)
        if bad_title:
            return PrefilterDecision(False, f"bad_job_title: {bad_title}")

        bad_company = _first_contained(job.company, self.settings.company_bad_words)
        if bad_company:
            return PrefilterDecision(False, f"bad_company: {bad_company}")

        return ACCEPT

    def check_description(self, job, description):
        """Description bad words, then optional AI requirements scoring"""
        if self.settings.complete_requirements:
            decision = self.check_requirements(description)
            if not decision.accepted:
                return decision

        bad_word = _first_contained(description, self.settings.bad_words)
        if bad_word:
            return PrefilterDecision(False, f"bad_word: {bad_word}")

        return ACCEPT

    def check_requirements(self, description):
        """Reject when the AI-reported years required exceed experience + slack.

        Unanalyzable jobs are accepted.
        """
        current = self.settings.current_experience
        if self.resolver is None or current == -1 or not description:
            return ACCEPT

        requirements = parse_requirements(self.resolver.complete(build_requirements_prompt(description)))
        if requirements is None:
            log.info("Could not analyze job requirements - accepting")
            return ACCEPT

        try:
            years_required = float(requirements.get("years_required") or 0)
        except (TypeError, ValueError):
            return ACCEPT

        if years_required > current + EXPERIENCE_SLACK_YEARS:
            return PrefilterDecision(
                False, f"Requires {years_required:g} years, you have {current}"
            )
        return ACCEPT
