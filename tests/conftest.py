"""Shared fixtures: offline, deterministic, no browser and no network."""

from __future__ import annotations

import pytest

from linkedin_autoapply.config import Profile, Settings
from linkedin_autoapply.debug.unresolved_collector import clear_unresolved_fields

_AI_KEYS = ("GEMINI_API_KEY", "OPENROUTER_API_KEY", "OPENROUTE_API_KEY")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Every test runs in a temp working directory with no AI keys set.

    The runner appends to log.jsonl and debug_unresolved.jsonl in the
    current directory, so those land in tmp_path too.
    """
    for key in _AI_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_unresolved_fields()
    yield
    clear_unresolved_fields()


@pytest.fixture
def profile():
    return Profile(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone_number="5551234567",
        current_city="Austin",
        state="TX",
        zipcode="78701",
        years_of_experience="5",
        require_visa="No",
        desired_salary=120000,
        notice_period=14,
        linkedin_url="https://www.linkedin.com/in/ada",
        recent_employer="Analytical Engines",
        user_info="Backend engineer, Python and Go.",
    )


@pytest.fixture
def settings(profile):
    return Settings(profile=profile)
