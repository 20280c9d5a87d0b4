"""Applied-job records and daily counters"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

log = logging.getLogger(__name__)


class ApplicationStore(Protocol):
    def has_applied(self, job_id: str) -> bool: ...

    def record_applied(self, job, source: str = "bot") -> None: ...

    def record_skipped(self, job, reason: str) -> None: ...

    def record_failed(self, job, reason: str) -> None: ...

    def is_daily_limit_reached(self) -> bool: ...

    def stats(self) -> dict: ...


def _load_json(path, default):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return default
    except (OSError, json.JSONDecodeError) as e:
        log.error("Error loading %s: %s", path, e)
        return default


def _save_json(path, data):
    """Write atomically via a temp file"""
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    os.replace(tmp, path)


class JsonApplicationStore:
    """
    Applied jobs and per-day counters kept as two JSON files under save_path.

    Daily counters reset when the UTC date changes.
    """

    def __init__(self, save_path, daily_limit=100, today=None):
        self.root = Path(save_path)
        self.root.mkdir(parents=True, exist_ok=True)
        self.daily_limit = daily_limit
        self._today = today or (lambda: datetime.now(timezone.utc).date())

        self.applied_path = self.root / "applied_jobs.json"
        self.daily_path = self.root / "daily_stats.json"

        self.applied = _load_json(self.applied_path, {"jobs": {}, "count": 0})
        self.applied.setdefault("jobs", {})
        if not isinstance(self.applied.get("count"), int):
            self.applied["count"] = len(self.applied["jobs"])
        self.daily = _load_json(self.daily_path, {})
        self._roll_day()

    def _roll_day(self):
        today = self._today().isoformat()
        if self.daily.get("date") != today:
            if self.daily.get("date"):
                log.info("New day detected (%s). Resetting daily stats.", today)
            self.daily = {"date": today, "applied": 0, "skipped": 0, "failed": 0}
            self._save()

    def _save(self):
        _save_json(self.applied_path, self.applied)
        _save_json(self.daily_path, self.daily)

    def has_applied(self, job_id):
        return str(job_id) in self.applied["jobs"]

    def record_applied(self, job, source="bot"):
        self._roll_day()
        self.applied["jobs"][str(job.job_id)] = {
            "title": job.title,
            "company": job.company,
            "url": job.view_url,
            "source": source,
            "appliedAt": datetime.now(timezone.utc).isoformat(),
        }
        self.applied["count"] += 1
        # Jobs LinkedIn already shows as applied don't use today's quota
        if source == "bot":
            self.daily["applied"] += 1
        self._save()

    def record_skipped(self, job, reason):
        self._roll_day()
        self.daily["skipped"] += 1
        self._save()

    def record_failed(self, job, reason):
        self._roll_day()
        self.daily["failed"] += 1
        self._save()

    def is_daily_limit_reached(self):
        self._roll_day()
        return self.daily["applied"] >= self.daily_limit

    def remaining_today(self):
        self._roll_day()
        return max(0, self.daily_limit - self.daily["applied"])

    def stats(self):
        self._roll_day()
        return {
            "total_applied": self.applied["count"],
            "today_applied": self.daily["applied"],
            "today_skipped": self.daily["skipped"],
            "today_failed": self.daily["failed"],
            "remaining": self.remaining_today(),
        }
