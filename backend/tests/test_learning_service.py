"""
DiaryPlus Backend — Flashcard Scheduling Tests
================================================

What:  SM-2 interval/ease updates, the deck statistics buckets and the
       front/back chosen for cards generated from highlights.
"""

import datetime as dt

import pytest

from diaryplus.models.flashcard import Flashcard
from diaryplus.services.learning_service import (
    BLANK,
    MIN_EASE,
    card_from_highlight,
    deck_stats,
    sm2,
)


class TestSM2:

    def test_first_successful_review(self):
        schedule = sm2(rating=4, repetitions=0, interval=0, ease_factor=2.5)
        assert schedule.repetitions == 1
        assert schedule.interval == 1
        assert schedule.ease_factor == pytest.approx(2.5)

    def test_second_successful_review_is_six_days(self):
        schedule = sm2(rating=4, repetitions=1, interval=1, ease_factor=2.5)
        assert schedule.repetitions == 2
        assert schedule.interval == 6

    def test_later_reviews_multiply_by_ease(self):
        schedule = sm2(rating=4, repetitions=2, interval=6, ease_factor=2.5)
        assert schedule.repetitions == 3
        assert schedule.interval == 15

    def test_half_day_interval_rounds_up_and_ease_keeps_precision(self):
        schedule = sm2(rating=4, repetitions=2, interval=5, ease_factor=2.5)
        assert schedule.interval == 13
        schedule = sm2(rating=3, repetitions=2, interval=6, ease_factor=2.345)
        assert schedule.ease_factor == pytest.approx(2.205, abs=1e-9)

    def test_perfect_recall_raises_ease(self):
        assert sm2(5, 0, 0, 2.5).ease_factor == pytest.approx(2.6)

    def test_hard_recall_lowers_ease(self):
        assert sm2(3, 0, 0, 2.5).ease_factor == pytest.approx(2.36)

    @pytest.mark.parametrize("rating", [0, 1, 2])
    def test_failed_recall_resets(self, rating):
        schedule = sm2(rating, repetitions=5, interval=40, ease_factor=2.2)
        assert schedule.repetitions == 0
        assert schedule.interval == 1
        assert schedule.ease_factor == pytest.approx(2.2)

    def test_ease_never_drops_below_minimum(self):
        assert sm2(3, 4, 10, MIN_EASE).ease_factor == MIN_EASE


class TestDeckStats:

    def _card(self, repetitions, interval, next_review):
        return Flashcard(
            front="Q", back="A", deck_name="General",
            ease_factor=2.5, repetitions=repetitions, interval=interval,
            next_review=next_review,
        )

    def test_buckets(self):
        now = dt.datetime(2024, 5, 1, 12, tzinfo=dt.timezone.utc)
        cards = [
            self._card(0, 0, None),                                   # new, due
            self._card(2, 6, now - dt.timedelta(hours=1)),            # learning, due
            self._card(3, 15, now + dt.timedelta(days=3)),            # learning
            self._card(6, 30, now + dt.timedelta(days=20)),           # mature
            self._card(7, 45, dt.datetime(2024, 4, 30, 12)),          # mature, naive → UTC, due
        ]
        stats = deck_stats(cards, now)
        assert stats.total == 5
        assert stats.due == 3
        assert stats.new == 1
        assert stats.learning == 2
        assert stats.mature == 2

    def test_empty_deck(self):
        stats = deck_stats([], dt.datetime.now(dt.timezone.utc))
        assert stats.total == stats.due == stats.new == stats.learning == stats.mature == 0


class TestCardFromHighlight:

    def test_note_becomes_the_question(self):
        assert card_from_highlight("Ship weekly", "What cadence?", "Shape Up") == (
            "What cadence?",
            "Ship weekly",
        )

    def test_long_passage_blanks_the_middle_word(self):
        text = "one two three four five six seven eight nine ten eleven"
        front, back = card_from_highlight(text, None, "Counting")
        assert back == "six"
        assert front == f"Fill in the blank: one two three four five {BLANK} seven eight nine ten eleven"

    def test_ten_words_ask_for_the_insight(self):
        text = "one two three four five six seven eight nine ten"
        assert card_from_highlight(text, None, "Counting") == (
            "What is the key insight about: Counting?",
            text,
        )

    def test_empty_note_is_ignored(self):
        front, _ = card_from_highlight("Short line", "", "Essays")
        assert front == "What is the key insight about: Essays?"
