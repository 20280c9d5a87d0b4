"""Logging setup and the per-job JSONL result log"""

import json
import logging
from datetime import datetime, timezone

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level="INFO"):
    """Configure root logging once for the CLI."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
    # httpx logs every request at INFO, which floods the run log
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_result(job_url, status, reason="", steps_completed=0, path="log.jsonl", **extra):
    """Log application result to JSONL file"""
    result = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "job_url": job_url,
        "status": status,
        "steps_completed": steps_completed,
    }
    if reason:
        result["failure_reason"] = reason
    result.update(extra)

    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(result) + "\n")

    if reason:
        log.info("[%s] %s (%s)", status, job_url, reason)
    else:
        log.info("[%s] %s", status, job_url)
