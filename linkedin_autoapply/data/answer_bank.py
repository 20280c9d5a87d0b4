"""Preset answer table - known profile facts, no job-specific data

Rules are checked in order over the lower-cased question text; the first
matching rule decides. A rule that produces None defers to the AI (the profile
has no value for it). A rule that produces "" is an authoritative blank answer.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

_STATE_RE = re.compile(r"\bstate\b")
_PAY_RE = re.compile(r"\bpay\b")
_CITY_RE = re.compile(r"\bcity\b")
_RACE_RE = re.compile(r"\brace\b")


@dataclass(frozen=True)
class PresetRule:
    name: str
    matches: Callable[[str], bool]
    answer: Callable[[str], Optional[str]]


def _has(*needles):
    return lambda q: any(n in q for n in needles)


def _value(value):
    """Profile value, or None when unset so the AI gets asked."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _salary_answer(profile, q):
    if any(w in q for w in ("max", "maximum", "upper")):
        amount = profile.max_salary or round(profile.desired_salary * 1.25)
    elif any(w in q for w in ("expected", "desired", "requirement", "min", "base")):
        amount = profile.desired_salary
    elif "current" in q:
        amount = profile.current_salary
    else:
        amount = profile.desired_salary
    return str(amount) if amount else None


def _notice_answer(profile):
    if profile.notice_period == 0:
        return "Immediately"
    return f"{profile.notice_period} days"


def _is_referral_question(q):
    return any(w in q for w in ("recommend", "referr", "employee", "refer"))


def _is_yes_no_question(q):
    return any(w in q for w in ("are you", "do you", "have you", "can you"))


def build_preset_rules(profile) -> List[PresetRule]:
    """Ordered preset rules bound to one operator profile."""
    p = profile
    return [
        # Identity
        PresetRule("first_name", _has("first name"), lambda q: _value(p.first_name)),
        PresetRule("last_name", _has("last name"), lambda q: _value(p.last_name)),
        PresetRule("middle_name", _has("middle name"), lambda q: _value(p.middle_name)),
        PresetRule("full_name", _has("full name"), lambda q: _value(p.full_name)),
        # Contact
        PresetRule("phone", _has("phone", "mobile"), lambda q: _value(p.phone_number)),
        # Referrer's email is never ours
        PresetRule(
            "referral_email",
            lambda q: "email" in q and _is_referral_question(q),
            lambda q: "",
        ),
        PresetRule("email", _has("email"), lambda q: _value(p.email)),
        PresetRule("referral", _has("recommend", "referr", "referred by"), lambda q: ""),
        # Location
        PresetRule("city", lambda q: bool(_CITY_RE.search(q)), lambda q: _value(p.current_city)),
        PresetRule(
            "state",
            lambda q: bool(_STATE_RE.search(q)) or "province" in q,
            lambda q: _value(p.state),
        ),
        PresetRule("zipcode", _has("zip", "postal"), lambda q: _value(p.zipcode)),
        PresetRule("country", _has("country"), lambda q: _value(p.country)),
        PresetRule("street", _has("street", "address"), lambda q: _value(p.street)),
        # Experience
        PresetRule(
            "years_of_experience",
            _has("years of experience", "how many years"),
            lambda q: _value(p.years_of_experience),
        ),
        # Visa need
        PresetRule(
            "require_visa",
            lambda q: any(w in q for w in ("visa", "sponsorship", "authorized to work"))
            and any(w in q for w in ("require", "need")),
            lambda q: _value(p.require_visa),
        ),
        PresetRule(
            "salary",
            lambda q: "salary" in q or "compensation" in q or bool(_PAY_RE.search(q)),
            lambda q: _salary_answer(p, q),
        ),
        PresetRule(
            "notice_period",
            _has("notice", "start date", "when can you"),
            lambda q: _notice_answer(p),
        ),
        # Links
        PresetRule("linkedin", _has("linkedin"), lambda q: _value(p.linkedin_url)),
        PresetRule("website", _has("website", "portfolio", "github"), lambda q: _value(p.website)),
        # Equal opportunity
        PresetRule("disability", _has("disability", "disabled"), lambda q: _value(p.disability_status)),
        PresetRule("veteran", _has("veteran"), lambda q: _value(p.veteran_status)),
        PresetRule("gender", _has("gender"), lambda q: _value(p.gender)),
        PresetRule(
            "ethnicity",
            lambda q: "ethnicity" in q or bool(_RACE_RE.search(q)),
            lambda q: _value(p.ethnicity),
        ),
        # Citizenship
        PresetRule(
            "citizenship",
            _has("citizen", "authorization", "work status"),
            lambda q: _value(p.citizenship_status),
        ),
        PresetRule(
            "highest_degree",
            lambda q: "highest" in q and ("degree" in q or "education" in q),
            lambda q: "Master's Degree" if p.has_masters else "Bachelor's Degree",
        ),
        # Yes/No heuristics
        PresetRule(
            "relocate_or_travel",
            lambda q: _is_yes_no_question(q) and ("relocate" in q or "travel" in q),
            lambda q: "Yes",
        ),
        PresetRule(
            "currently_employed",
            lambda q: _is_yes_no_question(q) and "currently employed" in q,
            lambda q: "Yes" if p.recent_employer else "No",
        ),
        PresetRule(
            "legally_authorized",
            lambda q: _is_yes_no_question(q) and "legally authorized" in q,
            lambda q: "Yes" if p.require_visa == "No" else "No",
        ),
    ]


def preset_answer(question, rules):
    """
    Look up a preset answer for a question.

    Returns: (matched: bool, value: str|None, rule_name: str|None)
    matched with value None means the rule applies but the profile is empty.
    """
    q = (question or "").lower()
    if not q.strip():
        return (False, None, None)
    for rule in rules:
        if rule.matches(q):
            return (True, rule.answer(q), rule.name)
    return (False, None, None)
