"""
HTML rendering of search results.

Every untrusted value passes through escape_html() (or safe_url() for link
targets) before it is composed into markup. Nothing here touches Streamlit;
the UI only places the strings this module returns.

Public API:
    escape_html(value)           → str
    safe_url(value)              → str
    score_bucket(score)          → "high" | "medium" | "low"
    platform_icon(platform)      → str
    format_number(value)         → str
    stat_lines(stats)            → list[(label, value)]
    render_card(candidate, pos)  → str
    ResultsView(store)           cached per-card markup kept in sync with a store
    table_rows(store)            → list[dict] for the table layout
    apply_table_edits(store, edits)  Keep-column edits from the table into the store
"""

import html
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

from hostfinder.models import Candidate
from hostfinder.store import ResultStore

HIGH_SCORE   = 70
MEDIUM_SCORE = 50

PLATFORM_ICONS = {
    "reddit":    "🔴",
    "twitter":   "🐦",
    "instagram": "📸",
    "tiktok":    "🎵",
    "linkedin":  "💼",
}
FALLBACK_ICON = "📱"

# (stats key, label, suffix) in display order
STAT_ORDER = [
    ("karma",       "Karma",       ""),
    ("comments",    "Comments",    ""),
    ("followers",   "Followers",   ""),
    ("engagement",  "Engagement",  "%"),
    ("likes",       "Likes",       ""),
    ("connections", "Connections", ""),
]

EMPTY_PLACEHOLDER = '<p class="empty-results">No results found</p>'

STYLES = """
<style>
.result-card { border: 1px solid #e2e8f0; border-radius: 12px; padding: 1rem 1.25rem; margin-bottom: 0.5rem; }
.result-card.removed { opacity: 0.45; }
.result-top { display: flex; gap: 0.5rem; align-items: center; }
.score-badge { font-weight: 700; border-radius: 8px; padding: 0.1rem 0.6rem; color: #fff; }
.score-badge.high { background: #16a34a; }
.score-badge.medium { background: #d97706; }
.score-badge.low { background: #6b7280; }
.platform-badge { display: flex; gap: 0.25rem; font-size: 0.85rem; }
.status-pill { margin-left: auto; font-size: 0.75rem; border-radius: 999px; padding: 0.1rem 0.5rem; }
.status-pill.kept { background: #dcfce7; }
.status-pill.removed { background: #fee2e2; }
.username { margin: 0.5rem 0 0.1rem 0; }
.source { color: #64748b; margin: 0; }
.stats-row { display: flex; flex-wrap: wrap; gap: 1rem; font-size: 0.85rem; }
.stat-label { color: #64748b; }
.empty-results { text-align: center; color: #64748b; padding: 2rem; }
</style>
"""


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------

def escape_html(value: Any) -> str:
    """Escape text for element content or a quoted attribute."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def safe_url(value: Any) -> str:
    """Escape a link target; anything other than http(s) becomes "#"."""
    url = "" if value is None else str(value).strip()
    if urlparse(url).scheme.lower() not in ("http", "https"):
        return "#"
    return escape_html(url)


# ---------------------------------------------------------------------------
# Field formatting
# ---------------------------------------------------------------------------

def score_bucket(score: float | None) -> str:
    if not isinstance(score, (int, float)) or isinstance(score, bool):
        return "low"
    if score >= HIGH_SCORE:
        return "high"
    if score >= MEDIUM_SCORE:
        return "medium"
    return "low"


def display_score(score: float | None) -> str:
    if score is None:
        return "n/a"
    if float(score).is_integer():
        return str(int(score))
    return str(score)


def platform_icon(platform: str) -> str:
    return PLATFORM_ICONS.get(platform, FALLBACK_ICON)


def format_number(value: Any) -> str:
    """1234567 → "1,234,567"; non-numeric values are returned as text."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


def stat_label(key: str) -> str:
    return key[:1].upper() + key[1:]


def stat_lines(stats: Mapping[str, Any]) -> list[tuple[str, str]]:
    """
    Label/value pairs for the stats present on one candidate.

    Known keys come first in STAT_ORDER; any other keys follow in the order
    the service sent them. Missing and None values produce no line.
    """
    lines = []
    known = set()
    for key, label, suffix in STAT_ORDER:
        known.add(key)
        value = stats.get(key)
        if value is None:
            continue
        lines.append((label, f"{value}{suffix}" if suffix else format_number(value)))

    for key, value in stats.items():
        if key in known or value is None:
            continue
        lines.append((stat_label(key), format_number(value)))
    return lines


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

def _stats_markup(stats: Mapping[str, Any]) -> str:
    return "".join(
        f'<div class="stat-item"><span class="stat-label">{escape_html(label)}:</span> {escape_html(value)}</div>'
        for label, value in stat_lines(stats)
    )


def render_card(candidate: Candidate, position: int) -> str:
    # Kept on one line per element: Streamlit's markdown pass treats
    # indented lines as code blocks.
    removed = "" if candidate.included else " removed"
    status  = ("kept", "Kept") if candidate.included else ("removed", "Removed")
    parts = [
        f'<div class="result-card{removed}" style="--index: {int(position)}" data-index="{int(position)}">',
        '<div class="result-top">',
        f'<div class="score-badge {score_bucket(candidate.score)}">{escape_html(display_score(candidate.score))}</div>',
        f'<div class="platform-badge"><span>{platform_icon(candidate.platform)}</span>'
        f'<span>{escape_html(candidate.platform)}</span></div>',
        f'<span class="status-pill {status[0]}">{status[1]}</span>',
        "</div>",
        f'<h3 class="username">{escape_html(candidate.username)}</h3>',
        f'<p class="source">{escape_html(candidate.source)}</p>',
        f'<p class="reasoning">{escape_html(candidate.reasoning)}</p>',
        f'<div class="stats-row">{_stats_markup(candidate.stats)}</div>',
        f'<a href="{safe_url(candidate.profile_url)}" target="_blank" rel="noopener noreferrer" '
        'class="profile-link">View Profile →</a>',
        "</div>",
    ]
    return "".join(parts)


class ResultsView:
    """
    Per-card markup derived from a ResultStore.

    render_all() rebuilds every card after a new search. Toggles reach the
    view through the store's listener hook and rebuild only that card, so
    the other cards keep their exact markup.
    """

    def __init__(self, store: ResultStore):
        self.store  = store
        self._cards: list[str] = []
        store.subscribe(self.update)

    def __len__(self) -> int:
        return len(self._cards)

    def render_all(self) -> None:
        self._cards = [render_card(c, i) for i, c in enumerate(self.store)]

    def update(self, position: int, included: bool) -> None:
        if 0 <= position < len(self._cards):
            self._cards[position] = render_card(self.store[position], position)

    def card(self, position: int) -> str:
        return self._cards[position]

    def markup(self) -> str:
        if not self._cards:
            return EMPTY_PLACEHOLDER
        return "".join(self._cards)


# ---------------------------------------------------------------------------
# Table layout
# ---------------------------------------------------------------------------

def table_rows(store: ResultStore) -> list[dict[str, Any]]:
    """One plain-text row per candidate; the table widget does its own escaping."""
    return [
        {
            "Keep":        c.included,
            "Score":       c.score,
            "Bucket":      score_bucket(c.score),
            "Platform":    f"{platform_icon(c.platform)} {c.platform}",
            "Username":    c.username,
            "Source":      c.source,
            "Stats":       " · ".join(f"{label}: {value}" for label, value in stat_lines(c.stats)),
            "Profile URL": c.profile_url,
        }
        for c in store
    ]


def apply_table_edits(store: ResultStore, edited_rows: Mapping[Any, Mapping[str, Any]]) -> None:
    """
    Push Keep-column edits from the table widget into the store.

    edited_rows maps row position to the changed cells, as the data editor
    reports it. Edits to other columns are ignored.
    """
    for position, changes in edited_rows.items():
        if "Keep" in changes:
            store.set_included(int(position), bool(changes["Keep"]))
