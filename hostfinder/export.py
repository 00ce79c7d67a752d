"""
CSV export of the kept results.

Columns are the fixed base set followed by one column per stats key seen on
any exported candidate, in order of first appearance. Every cell, headers
included, is quoted, with embedded quotes doubled.

Public API:
    stats_headers(entries)   → list[(header, key)]
    build_rows(entries)      → (headers, rows)
    to_csv(entries)          → str
    export_filename(now)     → str
    export_csv(store)        → (filename, csv_text)
"""

import csv
import io
import logging
import re
import time
from collections.abc import Sequence
from typing import Any

from hostfinder.errors import ExportError
from hostfinder.models import Candidate
from hostfinder.render import display_score, stat_label
from hostfinder.store import ResultStore

log = logging.getLogger(__name__)

BASE_HEADERS = ["Score", "Platform", "Username", "Source", "Reasoning", "Profile URL"]
FILENAME_PREFIX = "host-finder-results"


def stats_headers(entries: Sequence[Candidate]) -> list[tuple[str, str]]:
    """
    (header, stats key) pairs across all entries.

    Keys that capitalize to the same header share a column; the first key
    seen names it.
    """
    seen: dict[str, str] = {}
    for c in entries:
        for key in c.stats:
            header = stat_label(key)
            if header not in seen:
                seen[header] = key
    return list(seen.items())


def _header_key(header: str) -> str:
    return re.sub(r"\s+", "", header.lower())


def _stat_cell(stats: dict[str, Any], header: str, key: str) -> Any:
    for candidate_key in (key, _header_key(header), header):
        value = stats.get(candidate_key)
        if value is not None:
            return value
    return ""


def build_rows(entries: Sequence[Candidate]) -> tuple[list[str], list[list[Any]]]:
    columns = stats_headers(entries)
    headers = BASE_HEADERS + [header for header, _ in columns]
    rows = []
    for c in entries:
        row: list[Any] = [
            "" if c.score is None else display_score(c.score),
            c.platform,
            c.username,
            c.source,
            c.reasoning,
            c.profile_url,
        ]
        row.extend(_stat_cell(c.stats, header, key) for header, key in columns)
        rows.append(row)
    return headers, rows


def to_csv(entries: Sequence[Candidate]) -> str:
    headers, rows = build_rows(entries)
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows([[str(cell) for cell in row] for row in rows])
    return buf.getvalue().rstrip("\n")


def export_filename(now: float | None = None) -> str:
    """Millisecond timestamp keeps repeated exports in one session distinct."""
    ts = time.time() if now is None else now
    return f"{FILENAME_PREFIX}-{int(ts * 1000)}.csv"


def export_csv(store: ResultStore, now: float | None = None) -> tuple[str, str]:
    entries = store.included_entries()
    if not entries:
        raise ExportError("No results selected for export")

    filename = export_filename(now)
    text = to_csv(entries)
    log.info("Exported %d of %d results → %s", len(entries), len(store), filename)
    return filename, text
