import json
from datetime import date

from linkedin_autoapply.data.jobs import JobPosting
from linkedin_autoapply.data.state_store import JsonApplicationStore


class Clock:
    def __init__(self, today):
        self.today = today

    def __call__(self):
        return self.today


def job(job_id):
    return JobPosting(str(job_id), title=f"Job {job_id}", company="Acme")


def test_applied_jobs_survive_a_restart(tmp_path):
    store = JsonApplicationStore(tmp_path, daily_limit=5)
    store.record_applied(job(1))

    reopened = JsonApplicationStore(tmp_path, daily_limit=5)

    assert reopened.has_applied("1")
    assert not reopened.has_applied("2")
    saved = json.loads((tmp_path / "applied_jobs.json").read_text(encoding="utf-8"))
    assert saved["jobs"]["1"]["source"] == "bot"


def test_daily_limit(tmp_path):
    store = JsonApplicationStore(tmp_path, daily_limit=2)

    store.record_applied(job(1))
    assert not store.is_daily_limit_reached()
    store.record_applied(job(2))

    assert store.is_daily_limit_reached()
    assert store.remaining_today() == 0


def test_jobs_applied_on_linkedin_do_not_use_the_quota(tmp_path):
    store = JsonApplicationStore(tmp_path, daily_limit=1)

    store.record_applied(job(1), source="linkedin")

    assert store.has_applied("1")
    assert not store.is_daily_limit_reached()
    assert store.stats()["total_applied"] == 1
    assert store.stats()["today_applied"] == 0


def test_counters_reset_on_a_new_day(tmp_path):
    clock = Clock(date(2026, 3, 1))
    store = JsonApplicationStore(tmp_path, daily_limit=1, today=clock)
    store.record_applied(job(1))
    store.record_skipped(job(2), "bad_word: x")
    store.record_failed(job(3), "max_steps")
    assert store.is_daily_limit_reached()

    clock.today = date(2026, 3, 2)

    assert not store.is_daily_limit_reached()
    assert store.stats() == {
        "total_applied": 1,
        "today_applied": 0,
        "today_skipped": 0,
        "today_failed": 0,
        "remaining": 1,
    }


def test_corrupt_files_start_fresh(tmp_path):
    (tmp_path / "applied_jobs.json").write_text("{not json", encoding="utf-8")

    store = JsonApplicationStore(tmp_path)

    assert store.stats()["total_applied"] == 0
