import os

import pytest

from linkedin_autoapply import config
from linkedin_autoapply.config import (
    ConfigError,
    get_timing,
    load_settings,
    parse_bool,
    parse_int,
    parse_json,
    parse_list,
    timing_violations,
    validate_settings,
)


def test_parse_json_handles_double_escaping():
    assert parse_json('[\\"Python Developer\\", \\"Backend\\"]', []) == ["Python Developer", "Backend"]


def test_parse_json_bad_value_uses_default():
    assert parse_json("[oops", ["x"]) == ["x"]
    assert parse_json("", ["x"]) == ["x"]


def test_parse_list_wraps_a_bare_string():
    assert parse_list('"Remote"') == ("Remote",)
    assert parse_list('{"a": 1}', ["fallback"]) == ("fallback",)


@pytest.mark.parametrize("raw, expected", [("true", True), ("TRUE", True), ("false", False), ("yes", False), ("", True)])
def test_parse_bool(raw, expected):
    assert parse_bool(raw, default=True) is expected


def test_parse_int():
    assert parse_int("25", 0) == 25
    assert parse_int("", 7) == 7
    assert parse_int("ten", 7) == 7


def test_load_settings_from_mapping():
    env = {
        "USER_ID": "ada@example.com",
        "FIRST_NAME": "Ada",
        "SEARCH_TERMS": '["Python Developer", "Backend Engineer"]',
        "BAD_WORDS": '["clearance"]',
        "DAILY_LIMIT": "25",
        "HEADLESS": "true",
        "CURRENT_EXPERIENCE": "4",
        "DESIRED_SALARY": "90000",
        "MAX_STEPS": "12",
        "RADIO_FALLBACK": "Skip",
        "OPENROUTE_API_KEY": "legacy-key",
    }

    settings = load_settings(env)

    assert settings.bot.email == "ada@example.com"
    assert settings.profile.email == "ada@example.com"
    assert settings.search.terms == ("Python Developer", "Backend Engineer")
    assert settings.job_filter.bad_words == ("clearance",)
    assert settings.bot.daily_limit == 25
    assert settings.bot.headless is True
    assert settings.bot.max_steps == 12
    assert settings.bot.radio_fallback == "skip"
    assert settings.job_filter.current_experience == 4
    assert settings.profile.current_experience == 4
    assert settings.profile.desired_salary == 90000
    assert settings.ai.openrouter_api_key == "legacy-key"
    assert settings.ai.enabled


def test_defaults():
    settings = load_settings({})

    assert settings.search.terms == ("Software Engineer",)
    assert settings.bot.daily_limit == 100
    assert settings.bot.max_steps == 10
    assert settings.filters.easy_apply_only is True
    assert settings.profile.require_visa == "Yes"
    assert not settings.ai.enabled
    assert settings.delays.between_applications_min == 5000


def test_production_pacing():
    settings = load_settings({"ENVIRONMENT": "production"})

    assert settings.delays.between_applications_min == 120000
    assert settings.delays.between_applications_max == 180000


def test_env_file_is_loaded(tmp_path, monkeypatch):
    monkeypatch.delenv("DAILY_LIMIT", raising=False)
    env_file = tmp_path / "bot.env"
    env_file.write_text("DAILY_LIMIT=7\n", encoding="utf-8")

    try:
        settings = load_settings(env_file=env_file)
    finally:
        os.environ.pop("DAILY_LIMIT", None)

    assert settings.bot.daily_limit == 7


def test_validate_lists_every_problem():
    settings = load_settings({"SEARCH_TERMS": "[]", "RADIO_FALLBACK": "random", "MAX_STEPS": "0"})

    with pytest.raises(ConfigError) as excinfo:
        validate_settings(settings)

    message = str(excinfo.value)
    assert "USER_ID" in message
    assert "SEARCH_TERMS" in message
    assert "RADIO_FALLBACK" in message
    assert "MAX_STEPS" in message


def test_valid_settings_pass():
    validate_settings(load_settings({"USER_ID": "ada@example.com"}))


def test_speed_modes_pass_the_safety_floors():
    for name in config.TIMING_PROFILES:
        assert timing_violations(config.TIMING_PROFILES[name]) == []
    assert get_timing("dev") == config.TIMING_PROFILES["dev_test"]
    assert get_timing() == config.TIMING_PROFILES["default"]


def test_unsafe_profile_falls_back_to_default(monkeypatch):
    unsafe = dict(config.TIMING_PROFILES["super_dev"], key_delay_min=5)
    monkeypatch.setitem(config.TIMING_PROFILES, "super_dev", unsafe)

    assert get_timing("super") == config.TIMING_PROFILES["default"]
