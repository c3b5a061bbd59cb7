"""The quiz session: question lifecycle, scoring, streak and history.

    IDLE --start--> PRESENTING --submit--> EVALUATING --> REVEALING
                      ^   |                                  |
                      |   +--skip--> PRESENTING (new capital) |
                      +------------ after REVEAL_DELAY_S -----+

Any state --close--> CLOSED.

The session holds the active capital by id only; the capital itself always
comes from the store.
"""
import logging
import math
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, Iterable, List, Optional, Tuple

from quiz_answers import is_correct_answer
from quiz_config import CELEBRATION_S, REVEAL_DELAY_S, ROLLING_WINDOW, STREAK_GOAL
from quiz_dataset import CapitalStore, GeoEntity
from quiz_hints import Hint, build_hint, choose_alternatives, next_tier, score_multiplier
from quiz_scheduler import Handle, Scheduler
from quiz_translations import Language, Translator

logger = logging.getLogger(__name__)


class QuizState(str, Enum):
    IDLE = "idle"
    PRESENTING = "presenting"
    EVALUATING = "evaluating"
    REVEALING = "revealing"
    CLOSED = "closed"


@dataclass(frozen=True)
class HistoryEntry:
    was_correct: bool
    # None for skipped questions
    hint_tier: Optional[int] = None
    submitted_text: Optional[str] = None
    expected_text: Optional[str] = None


@dataclass
class SessionState:
    active_id: Optional[str] = None
    raw_input: str = ""
    cumulative_score: float = 0.0
    questions_answered: int = 0
    correct_answers: int = 0
    streak: int = 0
    history: Deque[HistoryEntry] = field(default_factory=lambda: deque(maxlen=ROLLING_WINDOW))
    hint_tier: int = 0
    language: Language = Language.NL


@dataclass(frozen=True)
class Evaluation:
    correct: bool
    credit: float
    hint_tier: int
    submitted: str
    expected: str
    country: str


@dataclass(frozen=True)
class SessionStats:
    score: float
    questions_answered: int
    correct_answers: int
    accuracy: int
    streak: int
    rolling_score: int
    history: Tuple[HistoryEntry, ...]


@dataclass(frozen=True)
class SessionEvent:
    previous: QuizState
    state: QuizState
    entity_changed: bool = False


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage, 0 when there is nothing to divide by."""
    if not whole:
        return 0
    return _round_half_up(100.0 * part / whole)


def rolling_score(history: Iterable[HistoryEntry], window: int = ROLLING_WINDOW) -> int:
    """Percentage correct over the last window entries, 0 for an empty history."""
    recent = list(history)[-window:]
    return percentage(sum(1 for h in recent if h.was_correct), len(recent))


class QuizSession:
    def __init__(
        self,
        store: CapitalStore,
        translator: Optional[Translator] = None,
        scheduler: Optional[Scheduler] = None,
        language: Language = Language.NL,
        rng: Optional[random.Random] = None,
        reveal_delay: float = REVEAL_DELAY_S,
        streak_goal: int = STREAK_GOAL,
        celebration_duration: float = CELEBRATION_S,
        on_celebrate: Optional[Callable[["QuizSession"], None]] = None,
    ):
        self.store = store
        self.translator = translator or Translator()
        self.scheduler = scheduler or Scheduler()
        self.reveal_delay = reveal_delay
        self.streak_goal = streak_goal
        self.celebration_duration = celebration_duration
        self.on_celebrate = on_celebrate
        self._rng = rng or random.Random()
        self._state = QuizState.IDLE
        self.data = SessionState(language=language)
        self.celebrating = False
        self.last_evaluation: Optional[Evaluation] = None
        self._choice_ids: Tuple[str, ...] = ()
        self._advance_handle: Optional[Handle] = None
        self._celebration_handle: Optional[Handle] = None
        self._listeners: List[Callable[["QuizSession", SessionEvent], None]] = []

    # ---------- Observation ----------
    @property
    def state(self) -> QuizState:
        return self._state

    @property
    def active_entity(self) -> Optional[GeoEntity]:
        if self.data.active_id is None:
            return None
        return self.store.get(self.data.active_id)

    @property
    def language(self) -> Language:
        return self.data.language

    @property
    def hint_tier(self) -> int:
        return self.data.hint_tier

    @property
    def hint(self) -> Optional[Hint]:
        entity = self.active_entity
        if entity is None:
            return None
        choices = [self.store.get(i) for i in self._choice_ids]
        return build_hint(self.data.hint_tier, entity, self.translator, self.data.language, choices)

    @property
    def can_submit(self) -> bool:
        return self._state is QuizState.PRESENTING and bool(self.data.raw_input.strip())

    @property
    def feedback(self) -> str:
        ev = self.last_evaluation
        if ev is None:
            return ""
        t, lang = self.translator, self.data.language
        if ev.correct:
            return f"{t.ui(lang, 'correct')} {ev.expected} {t.ui(lang, 'is_capital_of')} {ev.country}."
        return f"{t.ui(lang, 'incorrect')} {t.ui(lang, 'capital_of')} {ev.country} {t.ui(lang, 'is')} {ev.expected}."

    def rolling_score(self) -> int:
        return rolling_score(self.data.history)

    def stats(self) -> SessionStats:
        d = self.data
        return SessionStats(
            score=d.cumulative_score,
            questions_answered=d.questions_answered,
            correct_answers=d.correct_answers,
            accuracy=percentage(d.correct_answers, d.questions_answered),
            streak=d.streak,
            rolling_score=self.rolling_score(),
            history=tuple(d.history),
        )

    def add_listener(self, listener: Callable[["QuizSession", SessionEvent], None]) -> None:
        self._listeners.append(listener)

    # ---------- Transitions ----------
    def _set_state(self, state: QuizState, entity_changed: bool = False) -> None:
        event = SessionEvent(previous=self._state, state=state, entity_changed=entity_changed)
        self._state = state
        logger.debug("%s -> %s%s", event.previous.value, state.value, " (new capital)" if entity_changed else "")
        for listener in list(self._listeners):
            listener(self, event)

    def _present_new(self) -> None:
        entity = self.store.select_random()
        self.data.active_id = entity.id
        self.data.raw_input = ""
        self.data.hint_tier = 0
        self._choice_ids = ()
        self.last_evaluation = None
        self._set_state(QuizState.PRESENTING, entity_changed=True)

    def start(self) -> GeoEntity:
        """Pick the first capital and open the input.

        Raises EmptyCollectionError when the store is empty.
        """
        if self._state is QuizState.CLOSED:
            raise RuntimeError("session is closed")
        if self._state is QuizState.IDLE:
            logger.info("Starting quiz session with %d capitals", len(self.store))
            self._present_new()
        return self.active_entity

    def set_input(self, text: str) -> None:
        self.data.raw_input = text or ""

    def submit(self, text: Optional[str] = None) -> Optional[Evaluation]:
        """Evaluate the typed answer and schedule the next question.

        Blank input and submissions outside PRESENTING are ignored (None).
        """
        if text is not None:
            self.set_input(text)
        if not self.can_submit:
            logger.debug("Submission ignored in state %s", self._state.value)
            return None

        self._set_state(QuizState.EVALUATING)
        entity = self.active_entity
        d = self.data
        expected = self.translator.capital(d.language, entity.capital)
        correct = is_correct_answer(d.raw_input, entity, expected)
        tier = d.hint_tier
        credit = score_multiplier(tier) if correct else 0.0

        d.cumulative_score += credit
        submitted = d.raw_input.strip()
        if correct:
            d.history.append(HistoryEntry(True, tier))
            d.correct_answers += 1
        else:
            d.history.append(HistoryEntry(False, tier, submitted, expected))
        d.questions_answered += 1

        if correct and tier == 0:
            d.streak += 1
            if d.streak == self.streak_goal:
                self._celebrate()
        else:
            d.streak = 0

        self.last_evaluation = Evaluation(
            correct=correct,
            credit=credit,
            hint_tier=tier,
            submitted=submitted,
            expected=expected,
            country=self.translator.country(d.language, entity.country),
        )
        logger.debug("Answer %r for %s: correct=%s credit=%.2f", submitted, entity.id, correct, credit)

        self._set_state(QuizState.REVEALING)
        self._advance_handle = self.scheduler.call_later(self.reveal_delay, self._advance)
        return self.last_evaluation

    def _advance(self, now: float) -> None:
        self._advance_handle = None
        if self._state is QuizState.REVEALING:
            self._present_new()

    def skip(self) -> bool:
        """Count the question as wrong and move straight to a new capital."""
        if self._state is not QuizState.PRESENTING:
            return False
        self.data.history.append(HistoryEntry(False, None))
        self.data.streak = 0
        self.data.questions_answered += 1
        logger.debug("Skipped %s", self.data.active_id)
        self._present_new()
        return True

    def request_hint(self) -> Optional[Hint]:
        """Reveal the next hint tier; nothing changes past the last tier."""
        if self._state is not QuizState.PRESENTING:
            return None
        tier = next_tier(self.data.hint_tier)
        if tier == self.data.hint_tier:
            return self.hint
        if tier >= 3 and not self._choice_ids:
            choices = choose_alternatives(
                self.active_entity, self.store, self.translator, self.data.language, self._rng
            )
            self._choice_ids = tuple(c.id for c in choices)
        self.data.hint_tier = tier
        return self.hint

    def set_language(self, language: Language) -> None:
        self.data.language = language

    def toggle_language(self) -> Language:
        self.data.language = self.data.language.other()
        return self.data.language

    # ---------- Celebration ----------
    def _celebrate(self) -> None:
        self.celebrating = True
        logger.info("Streak of %d reached", self.data.streak)
        self._celebration_handle = self.scheduler.call_later(self.celebration_duration, self._finish_celebration)
        if self.on_celebrate is not None:
            self.on_celebrate(self)

    def end_celebration(self) -> None:
        """Celebration finished or dismissed: clear it and restart the streak."""
        if not self.celebrating:
            return
        if self._celebration_handle is not None:
            self._celebration_handle.cancel()
            self._celebration_handle = None
        self.celebrating = False
        self.data.streak = 0

    def _finish_celebration(self, now: float) -> None:
        self._celebration_handle = None
        logger.debug("Celebration finished")
        self.end_celebration()

    # ---------- Teardown ----------
    def close(self) -> None:
        if self._state is QuizState.CLOSED:
            return
        if self._advance_handle is not None:
            self._advance_handle.cancel()
            self._advance_handle = None
        if self._celebration_handle is not None:
            self._celebration_handle.cancel()
            self._celebration_handle = None
        logger.info(
            "Closing quiz session after %d questions (score %.2f)",
            self.data.questions_answered,
            self.data.cumulative_score,
        )
        self._set_state(QuizState.CLOSED)
