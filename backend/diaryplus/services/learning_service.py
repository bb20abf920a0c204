"""
DiaryPlus Backend — Learning Service
======================================

What:  The reading list (books, articles, podcasts...), highlights kept from
       those items, and flashcard decks reviewed with the SM-2 spaced
       repetition schedule.

SM-2 (rating r in 0..5):
    r >= 3   repetitions += 1
             interval = 1 (first), 6 (second), interval * ease rounded half up after
             ease += 0.1 - (5 - r) * (0.08 + (5 - r) * 0.02)
    r <  3   repetitions = 0, interval = 1, ease unchanged
    ease never drops below 1.3; next_review = now + interval days

Deck stats:
    due       next_review unset or in the past
    new       never successfully reviewed (repetitions == 0)
    learning  repetitions > 0 and interval < 21 days
    mature    interval >= 21 days

Cards from highlights:
    note present        front = note, back = highlight text
    more than 10 words  the middle word is blanked out ("Fill in the blank: ...")
    otherwise           front asks for the key insight of the item title
    Only the caller's own highlights are converted.
"""

import datetime as dt
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import as_utc, utcnow
from diaryplus.exceptions import ValidationError
from diaryplus.models.flashcard import Flashcard
from diaryplus.models.learning import Highlight, LearningItem
from diaryplus.rounding import round_half_up
from diaryplus.schemas.flashcard import (
    FlashcardCreate,
    FlashcardListResponse,
    FlashcardResponse,
    FlashcardReviewRequest,
    FlashcardStats,
)
from diaryplus.schemas.learning import (
    READING_PROGRESS,
    FlashcardsFromHighlightsRequest,
    FlashcardsFromHighlightsResponse,
    HighlightCreate,
    HighlightListResponse,
    HighlightResponse,
    LearningItemCreate,
    LearningItemListResponse,
    LearningItemResponse,
    LearningItemUpdate,
    SourceItem,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)

MIN_EASE = 1.3
MATURE_INTERVAL = 21
BLANK = "______"
BLANK_MIN_WORDS = 11


@dataclass
class Schedule:
    repetitions: int
    interval: int
    ease_factor: float


def sm2(rating: int, repetitions: int, interval: int, ease_factor: float) -> Schedule:
    if rating >= 3:
        repetitions += 1
        if repetitions == 1:
            interval = 1
        elif repetitions == 2:
            interval = 6
        else:
            interval = round_half_up(max(interval, 1) * ease_factor)
        ease_factor += 0.1 - (5 - rating) * (0.08 + (5 - rating) * 0.02)
    else:
        repetitions = 0
        interval = 1
    return Schedule(repetitions, interval, max(MIN_EASE, ease_factor))


def deck_stats(cards: Sequence[Flashcard], now: dt.datetime) -> FlashcardStats:
    stats = FlashcardStats(total=len(cards))
    for card in cards:
        next_review = as_utc(card.next_review)
        if next_review is None or next_review <= now:
            stats.due += 1
        if card.repetitions == 0:
            stats.new += 1
        elif card.interval < MATURE_INTERVAL:
            stats.learning += 1
        if card.interval >= MATURE_INTERVAL:
            stats.mature += 1
    return stats


def card_from_highlight(text: str, note: Optional[str], item_title: str) -> Tuple[str, str]:
    """(front, back) for a flashcard generated from one highlight."""
    if note:
        return note, text
    words = text.split()
    if len(words) >= BLANK_MIN_WORDS:
        middle = len(words) // 2
        answer = words[middle]
        words[middle] = BLANK
        return f"Fill in the blank: {' '.join(words)}", answer
    return f"What is the key insight about: {item_title}?", text


def item_response(item: LearningItem) -> LearningItemResponse:
    response = LearningItemResponse.model_validate(item)
    response.highlights_count = len(item.highlights)
    response.reading_progress = READING_PROGRESS.get(item.status, 0)
    return response


class LearningService:

    # ── Reading list ──────────────────────────────────────────────────────

    async def list_items(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        status: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> LearningItemListResponse:
        await require_membership(db, project_id, user_id)
        query = select(LearningItem).where(LearningItem.project_id == project_id)
        if status:
            query = query.where(LearningItem.status == status)
        if kind:
            query = query.where(LearningItem.kind == kind)
        result = await db.execute(query.order_by(LearningItem.created_at.desc()))
        return LearningItemListResponse(items=[item_response(i) for i in result.scalars().all()])

    async def create_item(
        self, db: AsyncSession, user_id: uuid.UUID, body: LearningItemCreate
    ) -> LearningItemResponse:
        await require_membership(db, body.project_id, user_id)
        item = LearningItem(
            project_id=body.project_id,
            user_id=user_id,
            kind=body.kind,
            title=body.title.strip(),
            author=body.author,
            source_url=body.source_url,
            isbn=body.isbn,
            status=body.status,
            rating=body.rating,
            started_at=body.started_at,
            finished_at=body.finished_at,
            notes_md=body.notes_md,
            highlights=[],
        )
        db.add(item)
        await db.flush()
        logger.info("Learning item %s added (%s)", item.id, item.kind)
        return item_response(item)

    async def update_item(
        self, db: AsyncSession, item_id: uuid.UUID, user_id: uuid.UUID, body: LearningItemUpdate
    ) -> LearningItemResponse:
        item = await load_scoped(db, LearningItem, item_id, user_id, "learning_item", author_only=True)
        apply_update(item, body)
        await db.flush()
        return item_response(item)

    async def delete_item(self, db: AsyncSession, item_id: uuid.UUID, user_id: uuid.UUID) -> None:
        item = await load_scoped(db, LearningItem, item_id, user_id, "learning_item", author_only=True)
        await db.delete(item)
        await db.flush()

    # ── Highlights ────────────────────────────────────────────────────────

    async def list_highlights(
        self, db: AsyncSession, item_id: uuid.UUID, user_id: uuid.UUID
    ) -> HighlightListResponse:
        await load_scoped(db, LearningItem, item_id, user_id, "learning_item")
        result = await db.execute(
            select(Highlight).where(Highlight.item_id == item_id).order_by(Highlight.created_at)
        )
        return HighlightListResponse(
            highlights=[HighlightResponse.model_validate(h) for h in result.scalars().all()]
        )

    async def create_highlight(
        self, db: AsyncSession, user_id: uuid.UUID, body: HighlightCreate
    ) -> HighlightResponse:
        item = await load_scoped(db, LearningItem, body.item_id, user_id, "learning_item")
        highlight = Highlight(
            project_id=item.project_id,
            user_id=user_id,
            item_id=item.id,
            text=body.text,
            note=body.note,
            page_number=body.page_number,
            location=body.location,
        )
        db.add(highlight)
        await db.flush()
        return HighlightResponse.model_validate(highlight)

    # ── Flashcards ────────────────────────────────────────────────────────

    async def cards_from_highlights(
        self, db: AsyncSession, user_id: uuid.UUID, body: FlashcardsFromHighlightsRequest
    ) -> FlashcardsFromHighlightsResponse:
        item = await load_scoped(db, LearningItem, body.item_id, user_id, "learning_item")
        query = select(Highlight).where(Highlight.item_id == item.id, Highlight.user_id == user_id)
        if body.highlight_ids:
            query = query.where(Highlight.id.in_(body.highlight_ids))
        result = await db.execute(query.order_by(Highlight.created_at))
        highlights = list(result.scalars().all())
        if not highlights:
            raise ValidationError(message="No highlights found to convert", field="highlight_ids")

        now = utcnow()
        cards: List[Flashcard] = []
        for highlight in highlights:
            front, back = card_from_highlight(highlight.text, highlight.note, item.title)
            cards.append(
                Flashcard(
                    project_id=item.project_id,
                    user_id=user_id,
                    front=front,
                    back=back,
                    deck_name=body.deck_name.strip(),
                    ease_factor=2.5,
                    interval=0,
                    repetitions=0,
                    next_review=now,
                    source_highlight_id=highlight.id,
                )
            )
        db.add_all(cards)
        await db.flush()
        logger.info("Generated %d flashcard(s) from learning item %s", len(cards), item.id)
        return FlashcardsFromHighlightsResponse(
            flashcards=[FlashcardResponse.model_validate(c) for c in cards],
            count=len(cards),
            source_item=SourceItem(id=item.id, title=item.title, author=item.author),
        )

    async def list_cards(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        deck: Optional[str] = None,
        due_only: bool = False,
    ) -> FlashcardListResponse:
        await require_membership(db, project_id, user_id)
        query = select(Flashcard).where(Flashcard.project_id == project_id)
        if deck:
            query = query.where(Flashcard.deck_name == deck)
        result = await db.execute(query.order_by(Flashcard.created_at.desc()))
        cards = list(result.scalars().all())

        now = utcnow()
        stats = deck_stats(cards, now)
        if due_only:
            cards = [c for c in cards if c.next_review is None or as_utc(c.next_review) <= now]
        return FlashcardListResponse(
            cards=[FlashcardResponse.model_validate(c) for c in cards],
            stats=stats,
        )

    async def create_card(
        self, db: AsyncSession, user_id: uuid.UUID, body: FlashcardCreate
    ) -> FlashcardResponse:
        await require_membership(db, body.project_id, user_id)
        card = Flashcard(
            project_id=body.project_id,
            user_id=user_id,
            front=body.front,
            back=body.back,
            deck_name=body.deck_name.strip(),
            ease_factor=2.5,
            interval=0,
            repetitions=0,
            next_review=utcnow(),
        )
        db.add(card)
        await db.flush()
        return FlashcardResponse.model_validate(card)

    async def delete_card(self, db: AsyncSession, card_id: uuid.UUID, user_id: uuid.UUID) -> None:
        card = await load_scoped(db, Flashcard, card_id, user_id, "flashcard")
        await db.delete(card)
        await db.flush()

    async def review_card(
        self, db: AsyncSession, card_id: uuid.UUID, user_id: uuid.UUID, body: FlashcardReviewRequest
    ) -> FlashcardResponse:
        card = await load_scoped(db, Flashcard, card_id, user_id, "flashcard")
        schedule = sm2(body.rating, card.repetitions, card.interval, card.ease_factor)

        now = utcnow()
        card.repetitions = schedule.repetitions
        card.interval = schedule.interval
        card.ease_factor = schedule.ease_factor
        card.last_reviewed = now
        card.next_review = now + dt.timedelta(days=schedule.interval)
        await db.flush()

        logger.info(
            "Flashcard %s reviewed (rating=%d): interval=%dd ease=%.2f",
            card.id,
            body.rating,
            schedule.interval,
            schedule.ease_factor,
        )
        return FlashcardResponse.model_validate(card)


learning_service = LearningService()
