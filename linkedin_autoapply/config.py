"""Configuration, timing profiles and environment loading"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when required settings are missing or invalid."""


# ========================================
# TIMING PROFILES
# ========================================
# All delays are in milliseconds (ms)
# Each delay keeps its randomization via human_delay()

TIMING_PROFILES = {
    "default": {
        # Keyboard interaction delays
        "key_delay_min": 50,
        "key_delay_max": 150,
        "focus_delay_min": 200,
        "focus_delay_max": 400,
        # Autocomplete / dropdown delays
        "autocomplete_wait_ms": 2000,
        "dropdown_close_min": 300,
        "dropdown_close_max": 500,
        # Modal and UI transition delays
        "modal_transition_min": 1500,
        "modal_transition_max": 2500,
        # Post-click settle window
        "settle_min": 2000,
        "settle_max": 3000,
        # Text input delays
        "post_input_min": 200,
        "post_input_max": 400,
    },
    "dev_test": {
        "key_delay_min": 30,
        "key_delay_max": 90,
        "focus_delay_min": 120,
        "focus_delay_max": 240,
        "autocomplete_wait_ms": 1500,
        "dropdown_close_min": 180,
        "dropdown_close_max": 300,
        "modal_transition_min": 800,
        "modal_transition_max": 1200,
        "settle_min": 1200,
        "settle_max": 1800,
        "post_input_min": 120,
        "post_input_max": 240,
    },
    "super_dev": {
        "key_delay_min": 25,
        "key_delay_max": 40,
        "focus_delay_min": 100,
        "focus_delay_max": 150,
        "autocomplete_wait_ms": 1200,
        "dropdown_close_min": 150,
        "dropdown_close_max": 200,
        "modal_transition_min": 400,
        "modal_transition_max": 450,
        "settle_min": 800,
        "settle_max": 1000,
        "post_input_min": 60,
        "post_input_max": 120,
    },
}

# ========================================
# SAFETY VALIDATIONS
# ========================================
_MIN_KEY_DELAY_MS = 25
_MIN_MODAL_TRANSITION_MS = 400
_MIN_DROPDOWN_CLOSE_MS = 150

SPEED_MODES = {
    None: "default",
    "dev": "dev_test",
    "super": "super_dev",
}


def timing_violations(profile):
    """Return human-readable violations of the minimum-delay floors"""
    violations = []
    for key, value in profile.items():
        if key.startswith("key_delay") and value < _MIN_KEY_DELAY_MS:
            violations.append(f"{key}={value}ms < {_MIN_KEY_DELAY_MS}ms minimum")
        if "modal" in key and value < _MIN_MODAL_TRANSITION_MS:
            violations.append(f"{key}={value}ms < {_MIN_MODAL_TRANSITION_MS}ms minimum")
        if key == "dropdown_close_min" and value < _MIN_DROPDOWN_CLOSE_MS:
            violations.append(f"{key}={value}ms < {_MIN_DROPDOWN_CLOSE_MS}ms minimum")
    return violations


def get_timing(speed=None):
    """Get the timing profile for a speed mode, falling back to default on violations"""
    name = SPEED_MODES.get(speed, "default")
    profile = dict(TIMING_PROFILES[name])

    violations = timing_violations(profile)
    if violations:
        log.warning("Timing profile %r violates safety floors, using default:", name)
        for violation in violations:
            log.warning("  - %s", violation)
        return dict(TIMING_PROFILES["default"])

    if name != "default":
        log.info("Speed mode %r enabled (timing profile %s)", speed, name)
    return profile


# ========================================
# ENVIRONMENT PARSING
# ========================================


def _env_get(env: Mapping[str, str], key: str, default: str = "") -> str:
    value = env.get(key)
    if value is None:
        return default
    return str(value).strip()


def parse_json(raw: str, default):
    """Parse a JSON env value, tolerating the double-escaping some deploy tools add."""
    if not raw:
        return default

    value = raw
    if '\\"' in value or "\\\\" in value:
        value = value.replace('\\"', '"').replace("\\\\", "\\")

    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        log.warning("Failed to parse JSON env value %r: %s", raw[:100], exc)
        return default


def parse_list(raw: str, default=None) -> tuple[str, ...]:
    parsed = parse_json(raw, default if default is not None else [])
    if isinstance(parsed, str):
        parsed = [parsed]
    if not isinstance(parsed, list):
        log.warning("Expected a JSON list, got %s; using default", type(parsed).__name__)
        parsed = default or []
    return tuple(str(item) for item in parsed)


def parse_bool(raw: str, default: bool = False) -> bool:
    if raw == "":
        return default
    return raw.lower() == "true"


def parse_int(raw: str, default: int) -> int:
    try:
        return int(raw, 10)
    except ValueError:
        return default


# ========================================
# SETTINGS SNAPSHOT
# ========================================


@dataclass(frozen=True)
class Profile:
    """Operator facts consumed by the preset table and AI prompts."""

    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    current_city: str = ""
    street: str = ""
    state: str = ""
    zipcode: str = ""
    country: str = "United States"
    ethnicity: str = ""
    gender: str = ""
    disability_status: str = "Decline"
    veteran_status: str = "Decline"
    years_of_experience: str = "3"
    require_visa: str = "Yes"
    website: str = ""
    linkedin_url: str = ""
    citizenship_status: str = ""
    desired_salary: int = 0
    max_salary: int = 0
    current_salary: int = 0
    salary_currency: str = "USD"
    notice_period: int = 0
    recent_employer: str = ""
    current_experience: int = -1
    has_masters: bool = False
    headline: str = ""
    summary: str = ""
    user_info: str = ""

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def summary_text(self) -> str:
        """Profile block embedded in every AI prompt."""
        name = " ".join(
            part for part in (self.first_name, self.middle_name, self.last_name) if part
        )
        location = ", ".join(
            part for part in (self.current_city, self.state, self.country) if part
        )
        lines = [
            f"Name: {name}",
            f"Phone: {self.phone_number}",
            f"Location: {location}",
            f"Years of Experience: {self.years_of_experience}",
            f"Current Experience Level: {self.current_experience} years",
            f"Education: {'Masters Degree' if self.has_masters else 'Bachelors Degree'}",
            f"Visa Sponsorship Required: {self.require_visa}",
            f"Citizenship Status: {self.citizenship_status}",
            f"Notice Period: {self.notice_period} days",
            f"Desired Salary: ${self.desired_salary}",
            f"Website: {self.website}",
            f"LinkedIn: {self.linkedin_url}",
            "",
            f"Professional Headline: {self.headline}",
            "",
            f"Summary: {self.summary}",
            "",
            "Additional Information:",
            self.user_info,
        ]
        return "\n".join(lines).strip()


@dataclass(frozen=True)
class BotSettings:
    email: str = ""
    daily_limit: int = 100
    headless: bool = False
    save_path: str = "./data/"
    session_path: str = "./data/session"
    max_steps: int = 10
    radio_fallback: str = "first"
    expected_host: str = "linkedin.com"
    result_log: str = "log.jsonl"


@dataclass(frozen=True)
class SearchSettings:
    terms: tuple[str, ...] = ("Software Engineer",)
    location: str = ""
    switch_after: int = 30
    randomize: bool = False
    max_pages: int = 10


@dataclass(frozen=True)
class SearchFilters:
    sort_by: str = "Most recent"
    date_posted: str = "Past week"
    easy_apply_only: bool = True
    experience_level: tuple[str, ...] = ()
    job_type: tuple[str, ...] = ("Full-time",)
    on_site: tuple[str, ...] = ()


@dataclass(frozen=True)
class JobFilterSettings:
    bad_words: tuple[str, ...] = ()
    bad_job_titles: tuple[str, ...] = ()
    company_bad_words: tuple[str, ...] = ()
    current_experience: int = -1
    complete_requirements: bool = False


@dataclass(frozen=True)
class AISettings:
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    openrouter_api_key: str = ""
    openrouter_model: str = "xiaomi/mimo-v2-flash:free"
    timeout: float = 60.0

    @property
    def enabled(self) -> bool:
        return bool(self.gemini_api_key or self.openrouter_api_key)


@dataclass(frozen=True)
class DelaySettings:
    # Between applications, in milliseconds
    between_applications_min: int = 5000
    between_applications_max: int = 15000
    session_break_after: int = 10
    session_break_min: int = 30000
    session_break_max: int = 60000


@dataclass(frozen=True)
class Settings:
    bot: BotSettings = field(default_factory=BotSettings)
    search: SearchSettings = field(default_factory=SearchSettings)
    filters: SearchFilters = field(default_factory=SearchFilters)
    job_filter: JobFilterSettings = field(default_factory=JobFilterSettings)
    profile: Profile = field(default_factory=Profile)
    ai: AISettings = field(default_factory=AISettings)
    delays: DelaySettings = field(default_factory=DelaySettings)


def load_settings(env: Mapping[str, str] | None = None, env_file: str | Path | None = None) -> Settings:
    """Build the immutable settings snapshot for one run.

    Reads the process environment (after loading ``env_file`` or ``./.env``
    when present) unless an explicit mapping is supplied.
    """
    if env is None:
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(override=False)
        env = os.environ

    def get(key, default=""):
        return _env_get(env, key, default)

    production = get("ENVIRONMENT", get("NODE_ENV", "development")).lower() == "production"
    current_experience = parse_int(get("CURRENT_EXPERIENCE"), -1)

    bot = BotSettings(
        email=get("USER_ID"),
        daily_limit=parse_int(get("DAILY_LIMIT"), 100),
        headless=parse_bool(get("HEADLESS"), False),
        save_path=get("SAVE_PATH", "./data/"),
        session_path=get("SESSION_PATH", "./data/session"),
        max_steps=parse_int(get("MAX_STEPS"), 10),
        radio_fallback=get("RADIO_FALLBACK", "first").lower(),
        expected_host=get("EXPECTED_HOST", "linkedin.com"),
        result_log=get("RESULT_LOG", "log.jsonl"),
    )
    search = SearchSettings(
        terms=parse_list(get("SEARCH_TERMS"), ["Software Engineer"]),
        location=get("SEARCH_LOCATION"),
        switch_after=parse_int(get("SWITCH_AFTER"), 30),
        randomize=parse_bool(get("RANDOMIZE_SEARCH"), False),
        max_pages=parse_int(get("MAX_PAGES"), 10),
    )
    filters = SearchFilters(
        sort_by=get("SORT_BY", "Most recent"),
        date_posted=get("DATE_POSTED", "Past week"),
        easy_apply_only=parse_bool(get("EASY_APPLY_ONLY"), True),
        experience_level=parse_list(get("EXPERIENCE_LEVEL")),
        job_type=parse_list(get("JOB_TYPE"), ["Full-time"]),
        on_site=parse_list(get("ON_SITE")),
    )
    job_filter = JobFilterSettings(
        bad_words=parse_list(get("BAD_WORDS")),
        bad_job_titles=parse_list(get("BAD_JOB_TITLES")),
        company_bad_words=parse_list(get("COMPANY_BAD_WORDS")),
        current_experience=current_experience,
        complete_requirements=parse_bool(get("COMPLETE_REQUIREMENTS"), False),
    )
    profile = Profile(
        first_name=get("FIRST_NAME"),
        middle_name=get("MIDDLE_NAME"),
        last_name=get("LAST_NAME"),
        email=bot.email,
        phone_number=get("PHONE_NUMBER"),
        current_city=get("CURRENT_CITY"),
        street=get("STREET"),
        state=get("STATE"),
        zipcode=get("ZIPCODE"),
        country=get("COUNTRY", "United States"),
        ethnicity=get("ETHNICITY"),
        gender=get("GENDER"),
        disability_status=get("DISABILITY_STATUS", "Decline"),
        veteran_status=get("VETERAN_STATUS", "Decline"),
        years_of_experience=get("YEARS_OF_EXPERIENCE", "3"),
        require_visa=get("REQUIRE_VISA", "Yes"),
        website=get("WEBSITE"),
        linkedin_url=get("LINKEDIN_URL"),
        citizenship_status=get("CITIZENSHIP_STATUS"),
        desired_salary=parse_int(get("DESIRED_SALARY"), 0),
        max_salary=parse_int(get("MAX_SALARY"), 0),
        current_salary=parse_int(get("CURRENT_SALARY"), 0),
        salary_currency=get("SALARY_CURRENCY", "USD"),
        notice_period=parse_int(get("NOTICE_PERIOD"), 0),
        recent_employer=get("RECENT_EMPLOYER"),
        current_experience=current_experience,
        has_masters=parse_bool(get("HAS_MASTERS"), False),
        headline=get("LINKEDIN_HEADLINE"),
        summary=get("LINKEDIN_SUMMARY"),
        user_info=get("USER_INFO"),
    )
    ai = AISettings(
        gemini_api_key=get("GEMINI_API_KEY"),
        gemini_model=get("GEMINI_MODEL", "gemini-2.5-flash"),
        openrouter_api_key=get("OPENROUTER_API_KEY") or get("OPENROUTE_API_KEY"),
        openrouter_model=get("OPENROUTER_MODEL", "xiaomi/mimo-v2-flash:free"),
        timeout=float(parse_int(get("AI_TIMEOUT"), 60)),
    )
    # Production pacing keeps a free-tier AI key under its per-minute quota
    delays = DelaySettings(
        between_applications_min=120000 if production else 5000,
        between_applications_max=180000 if production else 15000,
        session_break_after=parse_int(get("SESSION_BREAK_AFTER"), 10),
    )

    return Settings(
        bot=bot,
        search=search,
        filters=filters,
        job_filter=job_filter,
        profile=profile,
        ai=ai,
        delays=delays,
    )


def validate_settings(settings: Settings) -> None:
    """Raise ConfigError listing every missing required setting."""
    errors = []
    if not settings.bot.email:
        errors.append("USER_ID (email) is required")
    if not settings.search.terms:
        errors.append("At least one search term is required in SEARCH_TERMS")
    if settings.bot.radio_fallback not in ("first", "skip"):
        errors.append("RADIO_FALLBACK must be 'first' or 'skip'")
    if settings.bot.max_steps < 1:
        errors.append("MAX_STEPS must be at least 1")

    if errors:
        raise ConfigError("Configuration errors:\n  - " + "\n  - ".join(errors))
