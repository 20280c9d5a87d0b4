"""
Debug-only unresolved field collector

Read-only observability into fields the filler could not answer precisely:
fields with no answer at all, and selects/radios that fell back to a default
option. It does NOT change what gets written to the form.

Usage:
    1. Enable with --debug-unresolved CLI flag
    2. Call record_unresolved_field() when resolution fails or falls back
    3. Call flush_unresolved_fields() when a job reaches a terminal outcome

Output:
    debug_unresolved.jsonl - one JSON object per unresolved field
"""

import json
from datetime import datetime, timezone
from typing import Dict, List, Optional

_unresolved_buffer: List[Dict] = []


def record_unresolved_field(
    *,
    job_title: str,
    company: str,
    field_type: str,
    question_text: str,
    options: Optional[List[str]],
    answer: Optional[str],
    action: str,
):
    """
    Record an unresolved field to the in-memory buffer.

    Args:
        job_title: Title of the job being applied to
        company: Company of the job being applied to
        field_type: Field kind (text, select, radio_group, ...)
        question_text: Question/label text from UI
        options: Available options (for radio/select) or None
        answer: The resolver's answer, if any
        action: What the filler did instead (e.g. first_option_fallback, left_empty)
    """
    _unresolved_buffer.append(
        {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "job_title": job_title,
            "company": company,
            "field_type": field_type,
            "question_text": question_text,
            "options": options,
            "answer": answer,
            "action": action,
        }
    )


def pending_unresolved_fields():
    """Snapshot of the records buffered since the last flush."""
    return list(_unresolved_buffer)


def flush_unresolved_fields(path="debug_unresolved.jsonl"):
    """
    Flush all buffered unresolved fields to the debug log.

    Append-only. One JSON object per line. Returns the number of records written.
    """
    if not _unresolved_buffer:
        return 0

    count = len(_unresolved_buffer)
    with open(path, "a", encoding="utf-8") as f:
        for record in _unresolved_buffer:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    _unresolved_buffer.clear()
    return count


def clear_unresolved_fields():
    """Drop buffered records without writing them."""
    _unresolved_buffer.clear()
