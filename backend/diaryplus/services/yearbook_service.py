"""
DiaryPlus Backend — Yearbook Service
======================================

What:  Compiles the caller's journal entries for a date range into a PDF
       (reportlab) or an EPUB (zip container), stores the file and records
       a YearbookGeneration row.
Who:   routes/yearbook.py (generate, list, download, delete).

Content rules:
    - Only the caller's own entries, oldest first.
    - Sealed (vault) entries keep their date and title; their text is
      replaced by a placeholder.
    - Mood and location are printed only when requested.
    - With redaction on, card numbers, SSNs, emails and phone numbers in
      titles and text become [REDACTED-*] markers.

EPUB layout (EPUB 2):
    mimetype                 stored first, uncompressed
    META-INF/container.xml
    OEBPS/content.opf
    OEBPS/toc.ncx
    OEBPS/title.xhtml
    OEBPS/chapter-YYYY-MM.xhtml   one per month with entries
"""

import asyncio
import calendar
import datetime as dt
import io
import logging
import re
import uuid
import zipfile
from dataclasses import dataclass
from itertools import groupby
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import utcnow
from diaryplus.exceptions import NotFoundError
from diaryplus.models.journal import JournalEntry
from diaryplus.models.yearbook import YearbookGeneration
from diaryplus.schemas.yearbook import (
    YearbookGenerationResponse,
    YearbookListResponse,
    YearbookRequest,
    YearbookResult,
)
from diaryplus.services.file_service import file_service
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)

STORAGE_CATEGORY = "yearbooks"
DOWNLOAD_PATH = "/api/yearbook/download/"
SEALED_PLACEHOLDER = "This entry is sealed in the Private Vault."
MEDIA_TYPES = {"pdf": "application/pdf", "epub": "application/epub+zip"}

COVER_COLORS = {
    "minimal": "#111827",
    "elegant": "#667eea",
    "modern": "#0EA5E9",
}

# Order matters: card numbers before phone numbers
REDACTIONS = (
    (re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b"), "[REDACTED-CARD]"),
    (re.compile(r"\b\d{3}-\d{2}-\d{4}\b"), "[REDACTED-SSN]"),
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "[REDACTED-EMAIL]"),
    (re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"), "[REDACTED-PHONE]"),
)


def redact_sensitive(text: str) -> str:
    for pattern, marker in REDACTIONS:
        text = pattern.sub(marker, text)
    return text


def default_title(start: dt.date, end: dt.date) -> str:
    if start.year == end.year:
        return f"My {start.year} Journal"
    return f"My Journal {start.year}-{end.year}"


@dataclass
class YearbookEntry:
    """An entry prepared for rendering (options and redaction applied)."""

    entry_date: dt.date
    title: Optional[str]
    body: str
    mood: Optional[int] = None
    location: Optional[str] = None

    @property
    def meta(self) -> str:
        parts = []
        if self.mood is not None:
            parts.append(f"Mood: {self.mood}/5")
        if self.location:
            parts.append(f"Location: {self.location}")
        return " | ".join(parts)


def prepare_entries(entries: Sequence[JournalEntry], request: YearbookRequest) -> List[YearbookEntry]:
    prepared = []
    for entry in entries:
        title = entry.title
        body = SEALED_PLACEHOLDER if entry.is_encrypted else entry.content
        if request.redact_sensitive:
            title = redact_sensitive(title) if title else title
            body = redact_sensitive(body)
        prepared.append(
            YearbookEntry(
                entry_date=entry.entry_date,
                title=title,
                body=body,
                mood=entry.mood if request.include_mood else None,
                location=entry.location_name if request.include_location else None,
            )
        )
    return prepared


def _paragraphs(text: str) -> List[str]:
    """Blank-line separated blocks, escaped, with single newlines kept as breaks."""
    blocks = [b.strip() for b in re.split(r"\n\s*\n", text) if b.strip()]
    return [escape(b).replace("\n", "<br/>") for b in blocks]


def _date_range_label(start: dt.date, end: dt.date) -> str:
    return f"{start.strftime('%B %d, %Y')} - {end.strftime('%B %d, %Y')}"


# ── PDF ───────────────────────────────────────────────────────────────────

def render_pdf(
    title: str,
    start: dt.date,
    end: dt.date,
    entries: Sequence[YearbookEntry],
    cover_style: str = "minimal",
) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, title=title)
    styles = getSampleStyleSheet()
    accent = colors.HexColor(COVER_COLORS.get(cover_style, COVER_COLORS["minimal"]))

    cover_title = ParagraphStyle(
        "CoverTitle",
        parent=styles["Title"],
        fontSize=30,
        leading=36,
        textColor=accent,
        spaceAfter=24,
    )
    cover_sub = ParagraphStyle("CoverSub", parent=styles["Normal"], fontSize=13, alignment=1)
    date_heading = ParagraphStyle(
        "EntryDate",
        parent=styles["Heading2"],
        textColor=accent,
        spaceBefore=12,
    )
    meta_style = ParagraphStyle(
        "EntryMeta", parent=styles["Italic"], fontSize=9, textColor=colors.grey
    )

    story = [
        Spacer(1, 2.5 * inch),
        Paragraph(escape(title), cover_title),
        Paragraph(escape(_date_range_label(start, end)), cover_sub),
        Spacer(1, 0.2 * inch),
        Paragraph(f"{len(entries)} entries", cover_sub),
        PageBreak(),
    ]
    for entry in entries:
        story.append(Paragraph(entry.entry_date.strftime("%A, %B %d, %Y"), date_heading))
        if entry.title:
            story.append(Paragraph(escape(entry.title), styles["Heading3"]))
        if entry.meta:
            story.append(Paragraph(escape(entry.meta), meta_style))
        for block in _paragraphs(entry.body):
            story.append(Paragraph(block, styles["BodyText"]))
        story.append(Spacer(1, 0.3 * inch))

    doc.build(story)
    return buffer.getvalue()


# ── EPUB ──────────────────────────────────────────────────────────────────

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def _xhtml(title: str, body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" '
        '"http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">\n'
        '<html xmlns="http://www.w3.org/1999/xhtml">\n'
        f"<head><title>{escape(title)}</title></head>\n"
        f"<body>\n{body}</body>\n</html>\n"
    )


def _chapter_body(label: str, entries: Sequence[YearbookEntry]) -> str:
    parts = [f"<h1>{escape(label)}</h1>\n"]
    for entry in entries:
        parts.append(f"<h2>{entry.entry_date.strftime('%A, %B %d, %Y')}</h2>\n")
        if entry.title:
            parts.append(f"<h3>{escape(entry.title)}</h3>\n")
        if entry.meta:
            parts.append(f"<p><em>{escape(entry.meta)}</em></p>\n")
        for block in _paragraphs(entry.body):
            parts.append(f"<p>{block}</p>\n")
    return "".join(parts)


def render_epub(
    title: str,
    start: dt.date,
    end: dt.date,
    entries: Sequence[YearbookEntry],
    book_id: str,
) -> bytes:
    chapters = []
    for (year, month), month_entries in groupby(
        entries, key=lambda e: (e.entry_date.year, e.entry_date.month)
    ):
        label = f"{calendar.month_name[month]} {year}"
        chapters.append((f"chapter-{year:04d}-{month:02d}", label, list(month_entries)))

    manifest = ['<item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>',
                '<item id="title" href="title.xhtml" media-type="application/xhtml+xml"/>']
    spine = ['<itemref idref="title"/>']
    nav_points = []
    for order, (chapter_id, label, _) in enumerate(chapters, start=1):
        manifest.append(
            f'<item id="{chapter_id}" href="{chapter_id}.xhtml" media-type="application/xhtml+xml"/>'
        )
        spine.append(f'<itemref idref="{chapter_id}"/>')
        nav_points.append(
            f'<navPoint id="nav-{order}" playOrder="{order}">'
            f"<navLabel><text>{escape(label)}</text></navLabel>"
            f'<content src="{chapter_id}.xhtml"/></navPoint>'
        )

    opf = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<package xmlns="http://www.idpf.org/2007/opf" unique-identifier="BookId" version="2.0">\n'
        '<metadata xmlns:dc="http://purl.org/dc/elements/1.1/">\n'
        f"<dc:title>{escape(title)}</dc:title>\n"
        "<dc:language>en</dc:language>\n"
        f'<dc:identifier id="BookId">urn:uuid:{book_id}</dc:identifier>\n'
        f"<dc:date>{utcnow().date().isoformat()}</dc:date>\n"
        "</metadata>\n"
        f"<manifest>\n{chr(10).join(manifest)}\n</manifest>\n"
        f'<spine toc="ncx">\n{chr(10).join(spine)}\n</spine>\n'
        "</package>\n"
    )
    ncx = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">\n'
        f'<head><meta name="dtb:uid" content="urn:uuid:{book_id}"/></head>\n'
        f"<docTitle><text>{escape(title)}</text></docTitle>\n"
        f"<navMap>\n{chr(10).join(nav_points)}\n</navMap>\n"
        "</ncx>\n"
    )
    cover = (
        f"<h1>{escape(title)}</h1>\n"
        f"<p>{escape(_date_range_label(start, end))}</p>\n"
        f"<p>{len(entries)} entries</p>\n"
    )

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as book:
        # Readers sniff the first member; it must be stored, not deflated
        book.writestr(zipfile.ZipInfo("mimetype"), "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        book.writestr("META-INF/container.xml", CONTAINER_XML, compress_type=zipfile.ZIP_DEFLATED)
        book.writestr("OEBPS/content.opf", opf, compress_type=zipfile.ZIP_DEFLATED)
        book.writestr("OEBPS/toc.ncx", ncx, compress_type=zipfile.ZIP_DEFLATED)
        book.writestr("OEBPS/title.xhtml", _xhtml(title, cover), compress_type=zipfile.ZIP_DEFLATED)
        for chapter_id, label, month_entries in chapters:
            book.writestr(
                f"OEBPS/{chapter_id}.xhtml",
                _xhtml(label, _chapter_body(label, month_entries)),
                compress_type=zipfile.ZIP_DEFLATED,
            )
    return buffer.getvalue()


@dataclass
class YearbookFile:
    content: bytes
    media_type: str
    filename: str


class YearbookService:
    async def generate(
        self, db: AsyncSession, user_id: uuid.UUID, body: YearbookRequest
    ) -> YearbookResult:
        await require_membership(db, body.project_id, user_id)
        result = await db.execute(
            select(JournalEntry)
            .where(
                JournalEntry.project_id == body.project_id,
                JournalEntry.user_id == user_id,
                JournalEntry.entry_date >= body.start_date,
                JournalEntry.entry_date <= body.end_date,
            )
            .order_by(JournalEntry.entry_date, JournalEntry.created_at)
        )
        entries = list(result.scalars().all())
        if not entries:
            raise NotFoundError(
                resource="journal entries",
                message="No entries found for the selected date range",
            )

        title = (body.title or "").strip() or default_title(body.start_date, body.end_date)
        prepared = prepare_entries(entries, body)
        generation_id = uuid.uuid4()

        # Rendering is CPU-bound; keep it off the event loop
        if body.format == "pdf":
            content = await asyncio.to_thread(
                render_pdf, title, body.start_date, body.end_date, prepared, body.cover_style
            )
        else:
            content = await asyncio.to_thread(
                render_epub, title, body.start_date, body.end_date, prepared, str(generation_id)
            )

        filename = file_service.new_filename("yearbook", body.format)
        size = await file_service.store_file(STORAGE_CATEGORY, filename, content)

        generation = YearbookGeneration(
            id=generation_id,
            project_id=body.project_id,
            user_id=user_id,
            format=body.format,
            start_date=body.start_date,
            end_date=body.end_date,
            title=title,
            entry_count=len(prepared),
            file_size=size,
            filename=filename,
            options={
                "include_photos": body.include_photos,
                "include_location": body.include_location,
                "include_mood": body.include_mood,
                "redact_sensitive": body.redact_sensitive,
                "cover_style": body.cover_style,
            },
            status="completed",
            download_count=0,
        )
        db.add(generation)
        try:
            await db.flush()
        except Exception:
            await file_service.cleanup_file(STORAGE_CATEGORY, filename)
            raise

        logger.info(
            "Yearbook %s generated: %s, %d entries, %d bytes",
            generation.id,
            body.format,
            len(prepared),
            size,
        )
        return YearbookResult(
            id=generation.id,
            title=title,
            format=body.format,
            entry_count=len(prepared),
            file_size=size,
            download_url=f"{DOWNLOAD_PATH}{filename}",
        )

    async def list_generations(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> YearbookListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(YearbookGeneration)
            .where(
                YearbookGeneration.project_id == project_id,
                YearbookGeneration.user_id == user_id,
            )
            .order_by(YearbookGeneration.created_at.desc())
        )
        return YearbookListResponse(
            generations=[YearbookGenerationResponse.model_validate(g) for g in result.scalars().all()]
        )

    async def download(self, db: AsyncSession, filename: str, user_id: uuid.UUID) -> YearbookFile:
        result = await db.execute(
            select(YearbookGeneration).where(
                YearbookGeneration.filename == filename,
                YearbookGeneration.user_id == user_id,
            )
        )
        generation = result.scalar_one_or_none()
        if generation is None:
            raise NotFoundError(resource="yearbook")

        content = await file_service.read_file(STORAGE_CATEGORY, filename)
        generation.download_count = (generation.download_count or 0) + 1
        generation.last_downloaded_at = utcnow()
        await db.flush()
        return YearbookFile(
            content=content,
            media_type=MEDIA_TYPES.get(generation.format, "application/octet-stream"),
            filename=filename,
        )

    async def delete_generation(
        self, db: AsyncSession, generation_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        generation = await load_scoped(
            db, YearbookGeneration, generation_id, user_id, "yearbook", author_only=True
        )
        filename = generation.filename
        await db.delete(generation)
        await db.flush()
        await file_service.cleanup_file(STORAGE_CATEGORY, filename)


yearbook_service = YearbookService()
