"""
DiaryPlus Backend — Yearbook and Markdown Export Rendering
============================================================

What:  Pure rendering helpers: redaction, yearbook entry preparation, the
       PDF/EPUB writers and the markdown files of the project export.
"""

import datetime as dt
import io
import zipfile

import pytest

from diaryplus.models.daily_log import DailyLog, WeeklyReview
from diaryplus.models.goal import Goal, KeyResult
from diaryplus.models.investor_update import InvestorUpdate
from diaryplus.models.journal import JournalEntry
from diaryplus.schemas.yearbook import YearbookRequest
from diaryplus.services.export_service import (
    _unique,
    key_result_progress,
    render_goal,
    render_investor_update,
    render_log,
    render_review,
)
from diaryplus.services.yearbook_service import (
    SEALED_PLACEHOLDER,
    YearbookEntry,
    default_title,
    prepare_entries,
    redact_sensitive,
    render_epub,
    render_pdf,
)


def make_request(**overrides):
    body = {
        "projectId": "00000000-0000-0000-0000-000000000001",
        "startDate": "2024-01-01",
        "endDate": "2024-12-31",
    }
    body.update(overrides)
    return YearbookRequest.model_validate(body)


def make_entry(day, content, **fields):
    return JournalEntry(entry_date=day, content=content, is_encrypted=False, **fields)


# ══════════════════════════════════════════════════════════════════════════
# Yearbook
# ══════════════════════════════════════════════════════════════════════════

class TestRedaction:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("card 4111 1111 1111 1111 ok", "card [REDACTED-CARD] ok"),
            ("ssn 123-45-6789", "ssn [REDACTED-SSN]"),
            ("mail ada@example.com now", "mail [REDACTED-EMAIL] now"),
            ("call 555-867-5309", "call [REDACTED-PHONE]"),
            ("call 555.867.5309", "call [REDACTED-PHONE]"),
        ],
    )
    def test_patterns(self, text, expected):
        assert redact_sensitive(text) == expected

    def test_plain_text_untouched(self):
        text = "Closed the round at 2pm, 12 investors."
        assert redact_sensitive(text) == text


class TestEntryPreparation:

    def test_default_title(self):
        assert default_title(dt.date(2024, 1, 1), dt.date(2024, 12, 31)) == "My 2024 Journal"
        assert default_title(dt.date(2023, 6, 1), dt.date(2024, 5, 31)) == "My Journal 2023-2024"

    def test_sealed_entries_use_placeholder(self):
        sealed = JournalEntry(entry_date=dt.date(2024, 2, 1), content='{"encrypted": "ab"}', is_encrypted=True)
        [prepared] = prepare_entries([sealed], make_request())
        assert prepared.body == SEALED_PLACEHOLDER

    def test_options_drop_mood_and_location(self):
        entry = make_entry(dt.date(2024, 2, 1), "text", mood=4, location_name="Lisbon")
        [kept] = prepare_entries([entry], make_request())
        [dropped] = prepare_entries([entry], make_request(includeMood=False, includeLocation=False))

        assert kept.meta == "Mood: 4/5 | Location: Lisbon"
        assert dropped.meta == ""

    def test_redaction_applies_to_title_and_body(self):
        entry = make_entry(dt.date(2024, 2, 1), "ping bob@corp.io", title="Call 555-123-4567")
        [prepared] = prepare_entries([entry], make_request(redactSensitive=True))
        assert prepared.title == "Call [REDACTED-PHONE]"
        assert prepared.body == "ping [REDACTED-EMAIL]"


class TestYearbookWriters:

    def setup_method(self):
        self.entries = [
            YearbookEntry(dt.date(2024, 1, 5), "New year", "First <b>entry</b>\n\nSecond para", mood=4),
            YearbookEntry(dt.date(2024, 1, 20), None, "Short one"),
            YearbookEntry(dt.date(2024, 3, 2), "Spring", "Launch day", location="Berlin"),
        ]

    def test_pdf_is_a_pdf(self):
        content = render_pdf("My 2024 Journal", dt.date(2024, 1, 1), dt.date(2024, 12, 31), self.entries, "elegant")
        assert content.startswith(b"%PDF")
        assert len(content) > 1000

    def test_pdf_unknown_cover_style_uses_default(self):
        content = render_pdf("T", dt.date(2024, 1, 1), dt.date(2024, 1, 31), self.entries[:1], "neon")
        assert content.startswith(b"%PDF")

    def test_epub_layout(self):
        content = render_epub("My 2024 Journal", dt.date(2024, 1, 1), dt.date(2024, 12, 31), self.entries, "abc-123")
        book = zipfile.ZipFile(io.BytesIO(content))
        names = book.namelist()

        assert names[0] == "mimetype"
        assert book.getinfo("mimetype").compress_type == zipfile.ZIP_STORED
        assert book.read("mimetype") == b"application/epub+zip"
        assert "META-INF/container.xml" in names
        assert "OEBPS/chapter-2024-01.xhtml" in names
        assert "OEBPS/chapter-2024-03.xhtml" in names
        assert "OEBPS/chapter-2024-02.xhtml" not in names

        january = book.read("OEBPS/chapter-2024-01.xhtml").decode()
        assert "January 2024" in january
        assert "First &lt;b&gt;entry&lt;/b&gt;" in january
        assert "Mood: 4/5" in january

        opf = book.read("OEBPS/content.opf").decode()
        assert "urn:uuid:abc-123" in opf
        assert "<dc:title>My 2024 Journal</dc:title>" in opf


# ══════════════════════════════════════════════════════════════════════════
# Markdown export
# ══════════════════════════════════════════════════════════════════════════

class TestMarkdownFiles:

    def test_render_log(self):
        log = DailyLog(
            date=dt.date(2024, 6, 3), title="Shipped", content_md="Body", tags=["a", "b"],
            mood=None, time_spent_minutes=90,
        )
        text = render_log(log)
        assert text.startswith("# Shipped\n\n**Date:** 2024-06-03\n")
        assert "**Tags:** a, b" in text
        assert "**Mood:** N/A" in text
        assert "**Time Spent:** 90 minutes" in text

    def test_render_review(self):
        review = WeeklyReview(
            week_start=dt.date(2024, 6, 3), week_end=dt.date(2024, 6, 9), content_md="Summary",
            created_at=dt.datetime(2024, 6, 10, 8, tzinfo=dt.timezone.utc),
        )
        text = render_review(review)
        assert text.startswith("# Weekly Review: 2024-06-03 to 2024-06-09")
        assert "*Generated on: 2024-06-10*" in text

    def test_render_goal_table(self):
        goal = Goal(objective="Grow revenue", status="active", due_date=None)
        goal.key_results = [
            KeyResult(name="MRR", target=10000, current=2500, unit="USD"),
            KeyResult(name="Churn", target=0, current=3, unit="%"),
        ]
        text = render_goal(goal)
        assert "**Due Date:** No due date set" in text
        assert "| MRR | 2500 | 10000 | USD | 25% |" in text
        assert "| Churn | 3 | 0 | % | 0% |" in text

    def test_render_goal_without_key_results(self):
        goal = Goal(objective="Rest", status="completed", due_date=dt.date(2024, 12, 31))
        goal.key_results = []
        assert "No key results defined" in render_goal(goal)

    def test_key_result_progress_is_capped(self):
        assert key_result_progress(KeyResult(name="x", target=10, current=25)) == 100
        assert key_result_progress(KeyResult(name="x", target=3, current=1)) == 33

    def test_key_result_progress_rounds_halves_up(self):
        assert key_result_progress(KeyResult(name="x", target=8, current=1)) == 13

    def test_render_investor_update_public_link(self):
        update = InvestorUpdate(
            month=6, year=2024, content_md="Great month", is_public=True, public_slug="2024-06-abcd1234",
        )
        text = render_investor_update(update)
        assert text.startswith("# Investor Update - June 2024")
        assert "**Public:** Yes" in text
        assert "/public/2024-06-abcd1234" in text

    def test_render_private_investor_update_has_no_link(self):
        update = InvestorUpdate(month=1, year=2024, content_md="x", is_public=False, public_slug="s")
        assert "Public URL" not in render_investor_update(update)

    def test_unique_names(self):
        used = {}
        assert _unique("daily-logs/2024-06-03-standup.md", used) == "daily-logs/2024-06-03-standup.md"
        assert _unique("daily-logs/2024-06-03-standup.md", used) == "daily-logs/2024-06-03-standup-2.md"
        assert _unique("daily-logs/2024-06-03-standup.md", used) == "daily-logs/2024-06-03-standup-3.md"
