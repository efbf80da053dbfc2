"""
Study session: records responses and advances the picker
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ...ledger import PerformanceLedger
from ...models import Rating, VocabularyEntry, WordPerformance
from ...utils import Timer
from .picker import SessionPicker, SessionState, SessionStatus

logger = logging.getLogger(__name__)


@dataclass
class ResponseOutcome:
    """Result of recording a single rating"""

    performance: WordPerformance
    was_first_attempt: bool
    next_entry: VocabularyEntry | None


class StudySession:
    """One bounded run of flashcard reviews for a single learner"""

    def __init__(
        self,
        catalog: list[VocabularyEntry],
        ledger: PerformanceLedger,
        picker: SessionPicker | None = None,
        save_callback: Callable[[PerformanceLedger], object] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.catalog = list(catalog)
        self.ledger = ledger
        self.picker = picker or SessionPicker()
        self._save = save_callback
        self._clock = clock
        self.state = SessionState()
        self.timer = Timer()
        self.created_at = clock()

    @property
    def current(self) -> VocabularyEntry | None:
        return self.state.current

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    @property
    def session_length(self) -> int:
        return self.picker.session_length

    def is_finished(self) -> bool:
        return self.state.status is SessionStatus.EXHAUSTED

    def start(self) -> VocabularyEntry | None:
        """Start (or restart) the session and pick the first card"""
        self.reset()
        self.timer.start()
        return self.pick_next()

    def pick_next(self) -> VocabularyEntry | None:
        """Ask the picker for the next card"""
        entry = self.picker.pick_next(self.state, self.catalog, self.ledger, self._clock())
        if entry is None:
            self.timer.stop()
        return entry

    def record_response(self, rating: Rating | str) -> ResponseOutcome | None:
        """
        Record the learner's rating for the current card

        Args:
            rating: easy, medium or hard

        Returns:
            ResponseOutcome, or None when no card is active
        """
        entry = self.state.current
        if entry is None:
            logger.debug("record_response called without an active card")
            return None

        rating = Rating.from_value(rating)

        result = self.ledger.record_response(entry, rating, self._clock())
        self.state.count_rating(rating)

        if self._save is not None:
            self._save(self.ledger)

        next_entry = self.pick_next()

        return ResponseOutcome(
            performance=result.performance,
            was_first_attempt=result.was_first_attempt,
            next_entry=next_entry,
        )

    def reset(self) -> None:
        """Reset counters and history, returning the session to idle"""
        self.state = self.picker.reset(self.state)
        self.timer = Timer()

    def accuracy(self) -> float:
        """Share of easy ratings in this session, in percent"""
        if self.state.answered == 0:
            return 0.0
        return self.state.easy / self.state.answered * 100
