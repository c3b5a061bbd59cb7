"""
Tests for the quiz session state machine.

Covers:
- question lifecycle and the delayed auto-advance
- partial credit from hints
- streak and the one-shot celebration
- skips, rolling score and teardown
"""
import random

import pytest

from quiz_config import CELEBRATION_S, REVEAL_DELAY_S, STREAK_GOAL
from quiz_dataset import CapitalStore, EmptyCollectionError
from quiz_session import HistoryEntry, QuizSession, QuizState, percentage, rolling_score
from quiz_translations import Language

from conftest import make_capital


def answer_correctly(session, clock, hints=0):
    for _ in range(hints):
        session.request_hint()
    result = session.submit(session.active_entity.capital)
    clock.advance(REVEAL_DELAY_S)
    session.scheduler.run_pending()
    return result


def answer_wrongly(session, clock):
    result = session.submit("xq")
    clock.advance(REVEAL_DELAY_S)
    session.scheduler.run_pending()
    return result


class TestLifecycle:
    def test_start_presents_a_capital(self, session):
        entity = session.start()
        assert session.state is QuizState.PRESENTING
        assert session.active_entity == entity
        assert session.hint_tier == 0

    def test_session_keeps_only_the_id(self, session):
        entity = session.start()
        assert session.data.active_id == entity.id
        assert session.store.get(entity.id) is session.active_entity

    def test_blank_submission_is_rejected(self, session):
        session.start()
        session.set_input("   ")
        assert not session.can_submit
        assert session.submit() is None
        assert session.state is QuizState.PRESENTING
        assert session.data.questions_answered == 0
        assert len(session.data.history) == 0

    def test_correct_answer_reveals_then_advances_after_delay(self, session, clock):
        session.start()
        result = session.submit(session.active_entity.capital.upper())
        assert result.correct
        assert result.credit == 1.0
        assert session.state is QuizState.REVEALING
        assert session.data.cumulative_score == 1.0
        assert session.data.questions_answered == 1
        assert list(session.data.history) == [HistoryEntry(True, 0)]

        clock.advance(REVEAL_DELAY_S - 0.5)
        session.scheduler.run_pending()
        assert session.state is QuizState.REVEALING

        clock.advance(0.5)
        session.scheduler.run_pending()
        assert session.state is QuizState.PRESENTING
        assert session.last_evaluation is None
        assert session.data.raw_input == ""

    def test_input_is_locked_while_revealing(self, session, clock):
        session.start()
        session.submit(session.active_entity.capital)
        assert session.submit("anything") is None
        assert not session.skip()
        assert session.request_hint() is None
        assert session.data.questions_answered == 1

    def test_wrong_answer_keeps_texts_for_review(self, session, clock):
        session.start()
        expected = session.active_entity.capital
        result = session.submit("  xq ")
        assert not result.correct
        assert result.credit == 0.0
        assert session.data.cumulative_score == 0.0
        assert list(session.data.history) == [HistoryEntry(False, 0, "xq", expected)]

    def test_listeners_see_every_transition(self, session, clock):
        events = []
        session.add_listener(lambda s, e: events.append((e.previous, e.state, e.entity_changed)))
        session.start()
        answer_correctly(session, clock)
        assert events == [
            (QuizState.IDLE, QuizState.PRESENTING, True),
            (QuizState.PRESENTING, QuizState.EVALUATING, False),
            (QuizState.EVALUATING, QuizState.REVEALING, False),
            (QuizState.REVEALING, QuizState.PRESENTING, True),
        ]

    def test_empty_store_cannot_start(self, translator, scheduler):
        session = QuizSession(CapitalStore([]), translator, scheduler)
        with pytest.raises(EmptyCollectionError):
            session.start()


class TestHints:
    def test_tiers_go_up_and_stop_at_three(self, session):
        session.start()
        tiers = []
        for _ in range(3):
            session.request_hint()
            tiers.append(session.hint_tier)
        assert tiers == [1, 2, 3]

        before = session.hint
        assert session.request_hint() == before
        assert session.hint_tier == 3
        assert session.hint == before

    def test_choices_include_the_answer(self, session):
        entity = session.start()
        for _ in range(3):
            hint = session.request_hint()
        assert entity.capital in hint.choices
        assert len(hint.choices) == 3

    def test_tier_two_answer_earns_half(self, session, clock):
        session.start()
        result = answer_correctly(session, clock, hints=2)
        assert result.credit == 0.5
        assert session.data.cumulative_score == 0.5
        assert list(session.data.history) == [HistoryEntry(True, 2)]

    def test_credits_accumulate(self, session, clock):
        session.start()
        answer_correctly(session, clock, hints=0)
        answer_correctly(session, clock, hints=1)
        answer_correctly(session, clock, hints=3)
        answer_wrongly(session, clock)
        assert session.data.cumulative_score == pytest.approx(2.0)
        assert session.stats().correct_answers == 3

    def test_tier_resets_on_new_question(self, session, clock):
        session.start()
        session.request_hint()
        session.request_hint()
        answer_correctly(session, clock)
        assert session.hint_tier == 0
        assert session.hint is None

    def test_tier_resets_on_skip(self, session):
        session.start()
        session.request_hint()
        session.skip()
        assert session.hint_tier == 0


class TestStreak:
    def test_hinted_answer_breaks_streak(self, session, clock):
        session.start()
        for _ in range(14):
            answer_correctly(session, clock)
        assert session.data.streak == 14
        answer_correctly(session, clock, hints=1)
        assert session.data.streak == 0
        assert not session.celebrating

    def test_wrong_answer_breaks_streak(self, session, clock):
        session.start()
        answer_correctly(session, clock)
        answer_wrongly(session, clock)
        assert session.data.streak == 0

    def test_fifteen_in_a_row_celebrates_once(self, store, translator, scheduler, clock):
        calls = []
        session = QuizSession(
            store, translator, scheduler, language=Language.EN, on_celebrate=calls.append
        )
        session.start()
        for _ in range(15):
            answer_correctly(session, clock)
        assert session.celebrating
        assert calls == [session]

        answer_correctly(session, clock)
        assert calls == [session]
        assert session.data.streak == 16

    def test_ending_celebration_resets_streak(self, session, clock):
        session.start()
        for _ in range(15):
            answer_correctly(session, clock)
        session.end_celebration()
        assert not session.celebrating
        assert session.data.streak == 0

    def test_celebration_ends_on_its_own(self, session, clock):
        session.start()
        for _ in range(15):
            answer_correctly(session, clock)
        assert session.celebrating
        clock.advance(CELEBRATION_S)
        session.scheduler.run_pending()
        assert not session.celebrating
        assert session.data.streak == 0

    def test_ignored_celebration_does_not_let_streak_run_past_goal(self, session, clock):
        session.start()
        for _ in range(25):
            answer_correctly(session, clock)
        assert not session.celebrating
        assert session.data.streak < STREAK_GOAL

    def test_dismissal_cancels_the_timer(self, session, clock):
        session.start()
        for _ in range(15):
            answer_correctly(session, clock)
        session.end_celebration()
        for _ in range(3):
            answer_correctly(session, clock)
        clock.advance(CELEBRATION_S)
        session.scheduler.run_pending()
        assert session.data.streak == 3

    def test_close_cancels_the_celebration_timer(self, session, clock):
        session.start()
        for _ in range(15):
            answer_correctly(session, clock)
        session.close()
        assert session.scheduler.pending == 0
        clock.advance(CELEBRATION_S)
        session.scheduler.run_pending()
        assert session.celebrating


class TestSkip:
    def test_skip_records_plain_miss(self, session):
        session.start()
        assert session.skip()
        assert list(session.data.history) == [HistoryEntry(False, None, None, None)]
        assert session.data.questions_answered == 1
        assert session.state is QuizState.PRESENTING

    def test_skip_resets_streak(self, session, clock):
        session.start()
        answer_correctly(session, clock)
        session.skip()
        assert session.data.streak == 0

    def test_skip_picks_with_replacement(self, store, translator, scheduler):
        session = QuizSession(store, translator, scheduler, rng=random.Random(0))
        session.start()
        seen_same = seen_other = False
        for _ in range(60):
            before = session.data.active_id
            session.skip()
            if session.data.active_id == before:
                seen_same = True
            else:
                seen_other = True
        assert seen_other
        assert seen_same


class TestRollingScore:
    def test_three_of_four(self):
        history = [HistoryEntry(True), HistoryEntry(True), HistoryEntry(False), HistoryEntry(True)]
        assert rolling_score(history) == 75

    def test_empty_history(self, session):
        assert session.rolling_score() == 0

    def test_halves_round_up(self):
        assert percentage(1, 8) == 13
        assert percentage(1, 3) == 33

    def test_history_is_capped_at_twenty(self, session, clock):
        session.start()
        for _ in range(5):
            answer_correctly(session, clock)
        for _ in range(20):
            session.skip()
        assert len(session.data.history) == 20
        assert session.rolling_score() == 0
        assert session.data.questions_answered == 25

    def test_stats_snapshot(self, session, clock):
        session.start()
        answer_correctly(session, clock)
        answer_wrongly(session, clock)
        answer_correctly(session, clock, hints=2)
        stats = session.stats()
        assert stats.score == 1.5
        assert stats.questions_answered == 3
        assert stats.accuracy == 67
        assert stats.rolling_score == 67
        assert stats.streak == 0
        assert len(stats.history) == 3


class TestLanguage:
    def test_dutch_name_is_expected_in_dutch(self, translator, scheduler, clock):
        session = QuizSession(CapitalStore(_paris_store()), translator, scheduler, language=Language.NL)
        session.start()
        result = session.submit("Parijs")
        assert result.correct
        assert result.expected == "Parijs"
        assert session.feedback == "Juist! Parijs is de hoofdstad van Frankrijk."

    def test_english_feedback_for_wrong_answer(self, translator, scheduler):
        session = QuizSession(CapitalStore(_paris_store()), translator, scheduler, language=Language.EN)
        session.start()
        session.submit("Rome")
        assert session.feedback == "Incorrect. The capital of France is Paris."

    def test_english_name_still_accepted_in_dutch(self, translator, scheduler):
        session = QuizSession(CapitalStore(_paris_store()), translator, scheduler, language=Language.NL)
        session.start()
        assert session.submit("paris").correct

    def test_toggle(self, session):
        assert session.toggle_language() is Language.NL
        assert session.toggle_language() is Language.EN


class TestClose:
    def test_close_cancels_pending_advance(self, session, clock):
        session.start()
        active = session.data.active_id
        session.submit(session.active_entity.capital)
        session.close()
        clock.advance(REVEAL_DELAY_S * 2)
        session.scheduler.run_pending()
        assert session.state is QuizState.CLOSED
        assert session.data.active_id == active
        assert session.scheduler.pending == 0

    def test_closed_session_cannot_restart(self, session):
        session.start()
        session.close()
        session.close()
        with pytest.raises(RuntimeError):
            session.start()


def _paris_store():
    return [make_capital("FR", "Paris", "France")]
