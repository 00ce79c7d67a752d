import pytest
from hostfinder.models import Candidate
from hostfinder.render import (
    EMPTY_PLACEHOLDER,
    FALLBACK_ICON,
    ResultsView,
    apply_table_edits,
    escape_html,
    format_number,
    platform_icon,
    render_card,
    safe_url,
    score_bucket,
    stat_lines,
    table_rows,
)
from hostfinder.export import export_csv
from hostfinder.store import ResultStore


@pytest.fixture
def store():
    s = ResultStore()
    s.replace_all([
        {"platform": "reddit", "username": "u/alice", "score": 88, "stats": {"karma": 12000, "comments": 340}},
        {"platform": "twitter", "username": "@bob", "score": 64, "stats": {"followers": 4500, "engagement": 3.2}},
        {"platform": "mastodon", "username": "carol", "score": 12},
    ])
    return s


class TestEscaping:
    """Test the escaping helpers."""

    def test_escape_tags(self):
        """Test that markup characters are escaped."""
        assert escape_html("<b>x</b>") == "&lt;b&gt;x&lt;/b&gt;"

    def test_escape_quotes_and_ampersand(self):
        """Test that attribute-breaking characters are escaped."""
        assert escape_html('a "b" & \'c\'') == "a &quot;b&quot; &amp; &#x27;c&#x27;"

    def test_escape_none(self):
        """Test that None renders as empty text."""
        assert escape_html(None) == ""

    def test_safe_url_keeps_https(self):
        """Test that a normal profile URL is preserved."""
        assert safe_url("https://reddit.com/u/alice?a=1&b=2") == "https://reddit.com/u/alice?a=1&amp;b=2"

    @pytest.mark.parametrize("url", ["javascript:alert(1)", "data:text/html,hi", "", None])
    def test_safe_url_rejects_other_schemes(self, url):
        """Test that non-http targets are replaced."""
        assert safe_url(url) == "#"

    def test_safe_url_escapes_quotes(self):
        """Test that a quote cannot break out of the href attribute."""
        assert '"' not in safe_url('https://x.com/"><script>')


class TestFormatting:
    """Test score buckets, icons and stats formatting."""

    @pytest.mark.parametrize(
        "score, bucket",
        [(100, "high"), (70, "high"), (69, "medium"), (50, "medium"), (49, "low"), (39, "low"), (0, "low"), (None, "low")],
    )
    def test_score_bucket(self, score, bucket):
        """Test the 70/50 bucket policy."""
        assert score_bucket(score) == bucket

    def test_known_platform_icon(self):
        """Test lookup of a known platform."""
        assert platform_icon("reddit") == "🔴"

    def test_unknown_platform_icon(self):
        """Test fallback icon for unknown platforms."""
        assert platform_icon("mastodon") == FALLBACK_ICON

    def test_format_number(self):
        """Test thousands separators."""
        assert format_number(1234567) == "1,234,567"
        assert format_number(999) == "999"
        assert format_number(1500.0) == "1,500"
        assert format_number("n/a") == "n/a"

    def test_stat_lines_preferred_order(self):
        """Test that known stats follow the fixed order regardless of input order."""
        lines = stat_lines({"likes": 20, "karma": 5, "engagement": 4.5})
        assert lines == [("Karma", "5"), ("Engagement", "4.5%"), ("Likes", "20")]

    def test_stat_lines_skip_absent(self):
        """Test that absent and None stats produce no lines."""
        assert stat_lines({"followers": None}) == []
        assert stat_lines({}) == []

    def test_stat_lines_unknown_keys_last(self):
        """Test that unrecognised stats follow the known ones."""
        lines = stat_lines({"subscribers": 1200, "karma": 10})
        assert lines == [("Karma", "10"), ("Subscribers", "1,200")]


class TestRenderCard:
    """Test single-card markup."""

    def test_username_is_escaped(self):
        """Test that markup in a username is shown as text."""
        html = render_card(Candidate(username="<b>x</b>"), 0)
        assert "&lt;b&gt;x&lt;/b&gt;" in html
        assert "<b>x</b>" not in html

    def test_untrusted_fields_escaped(self):
        """Test that source, reasoning and platform are escaped."""
        c = Candidate(platform="<i>p</i>", source="<script>s</script>", reasoning="<img src=x>")
        html = render_card(c, 0)
        assert "<script>" not in html
        assert "<img" not in html
        assert "<i>p</i>" not in html

    def test_profile_link(self):
        """Test that the profile URL is used as the link target."""
        html = render_card(Candidate(profile_url="https://x.com/bob"), 0)
        assert 'href="https://x.com/bob"' in html

    def test_score_bucket_class(self):
        """Test that the score badge carries its bucket class."""
        html = render_card(Candidate(score=72), 0)
        assert 'class="score-badge high">72<' in html

    def test_removed_state(self):
        """Test removed styling for an excluded candidate."""
        html = render_card(Candidate(included=False), 4)
        assert 'class="result-card removed"' in html
        assert 'data-index="4"' in html
        assert "status-pill removed" in html

    def test_stats_only_present_keys(self):
        """Test that only present stats are listed."""
        html = render_card(Candidate(stats={"followers": 4500}), 0)
        assert "Followers:" in html
        assert "4,500" in html
        assert "Karma:" not in html

    def test_no_indented_lines(self):
        """Test that markup has no indented lines for the markdown renderer."""
        html = render_card(Candidate(username="a", stats={"karma": 1}), 0)
        assert "\n" not in html


class TestResultsView:
    """Test full and partial rendering from a store."""

    def test_render_all(self, store):
        """Test one card per candidate."""
        view = ResultsView(store)
        view.render_all()
        assert len(view) == 3
        assert "u/alice" in view.card(0)

    def test_partial_update_touches_one_card(self, store):
        """Test that a toggle rebuilds only the toggled card."""
        view = ResultsView(store)
        view.render_all()
        before = [view.card(i) for i in range(3)]

        store.set_included(1, False)

        assert view.card(0) is before[0]
        assert view.card(2) is before[2]
        assert view.card(1) != before[1]
        assert "result-card removed" in view.card(1)

    def test_rerender_is_idempotent(self, store):
        """Test that rebuilding from state gives the same markup."""
        view = ResultsView(store)
        view.render_all()
        store.set_included(0, False)
        partial = view.markup()
        view.render_all()
        assert view.markup() == partial

    def test_empty_placeholder(self):
        """Test that zero results render the placeholder."""
        view = ResultsView(ResultStore())
        view.render_all()
        assert view.markup() == EMPTY_PLACEHOLDER

    def test_new_search_rerender(self, store):
        """Test that a replaced store re-renders from scratch."""
        view = ResultsView(store)
        view.render_all()
        store.replace_all([{"username": "dave"}])
        view.render_all()
        assert len(view) == 1
        assert "dave" in view.markup()


class TestTableRows:
    """Test the table layout rows."""

    def test_row_per_candidate(self, store):
        """Test row count and keep flags."""
        store.set_included(2, False)
        rows = table_rows(store)
        assert [r["Keep"] for r in rows] == [True, True, False]

    def test_row_fields(self, store):
        """Test bucket, platform and stats columns."""
        row = table_rows(store)[1]
        assert row["Bucket"] == "medium"
        assert row["Platform"] == "🐦 twitter"
        assert row["Stats"] == "Followers: 4,500 · Engagement: 3.2%"

    def test_unknown_platform_row(self, store):
        """Test fallback icon in the table."""
        assert table_rows(store)[2]["Platform"] == f"{FALLBACK_ICON} mastodon"


class TestApplyTableEdits:
    """Test Keep-column edits coming back from the table widget."""

    def test_unkeep_row(self, store):
        """Test that clearing Keep on row 0 removes it from the selection and export."""
        apply_table_edits(store, {0: {"Keep": False}})
        assert [c.username for c in store.included_entries()] == ["@bob", "carol"]

        _, text = export_csv(store)
        assert "u/alice" not in text
        assert "@bob" in text

    def test_updates_card_markup(self, store):
        """Test that table edits reach the card view through the store."""
        view = ResultsView(store)
        view.render_all()
        apply_table_edits(store, {"1": {"Keep": False}})
        assert "result-card removed" in view.card(1)

    def test_re_keep_and_other_columns(self, store):
        """Test that re-keeping works and non-Keep edits are ignored."""
        store.set_included(2, False)
        apply_table_edits(store, {2: {"Keep": True}, 0: {"Username": "changed"}})
        assert len(store.included_entries()) == 3
        assert store[0].username == "u/alice"

    def test_out_of_range_row_ignored(self, store):
        """Test that a stale row index changes nothing."""
        apply_table_edits(store, {7: {"Keep": False}})
        assert len(store.included_entries()) == 3
