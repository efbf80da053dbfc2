"""
Session picker: chooses the next flashcard for a study session
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ...ledger import PerformanceLedger
from ...models import Rating, VocabularyEntry
from ...spaced_repetition import PriorityScorer

logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    """Lifecycle of a study session"""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    EXHAUSTED = "exhausted"


@dataclass
class SessionState:
    """Ephemeral per-session state, never persisted"""

    answered: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0
    history: list[str] = field(default_factory=list)
    current: VocabularyEntry | None = None
    status: SessionStatus = SessionStatus.IDLE

    def count_rating(self, rating: Rating) -> None:
        """Increment the answered total and the rating bucket"""
        self.answered += 1
        setattr(self, rating.value, getattr(self, rating.value) + 1)

    def recent_ids(self, window: int) -> list[str]:
        return self.history[-window:] if window > 0 else []


class SessionPicker:
    """Priority-scored, randomized top-K picker with a no-repeat window"""

    def __init__(
        self,
        scorer: PriorityScorer | None = None,
        session_length: int = 20,
        history_window: int = 5,
        top_k: int = 3,
        rng: random.Random | None = None,
    ):
        self.scorer = scorer or PriorityScorer()
        self.session_length = session_length
        self.history_window = history_window
        self.top_k = max(1, top_k)
        self.rng = rng or random.Random()

    def pick_next(
        self,
        state: SessionState,
        catalog: list[VocabularyEntry],
        ledger: PerformanceLedger,
        now: datetime | None = None,
    ) -> VocabularyEntry | None:
        """
        Select the next card and update the session state

        Args:
            state: Session state to advance
            catalog: Entries available in this session
            ledger: Performance ledger used for scoring
            now: Reference time for scoring

        Returns:
            The chosen entry, or None if the session is exhausted
        """
        if state.status is SessionStatus.EXHAUSTED:
            state.current = None
            return None

        if state.answered >= self.session_length or not catalog:
            logger.debug(
                f"Session exhausted: answered={state.answered}, catalog={len(catalog)}"
            )
            state.status = SessionStatus.EXHAUSTED
            state.current = None
            return None

        recent = set(state.recent_ids(self.history_window))
        candidates = [entry for entry in catalog if entry.id not in recent]
        if not candidates:
            # Catalog smaller than the window: allow repeats rather than stall
            candidates = list(catalog)

        ranked = self.scorer.rank(candidates, ledger, now)
        top_entries = [entry for entry, _ in ranked[: self.top_k]]
        selected = self.rng.choice(top_entries)

        state.history.append(selected.id)
        state.current = selected
        state.status = SessionStatus.IN_PROGRESS

        logger.debug(
            f"Picked '{selected.id}' from top {len(top_entries)} of {len(candidates)} candidates"
        )
        return selected

    def reset(self, state: SessionState) -> SessionState:
        """Return a fresh idle state"""
        return SessionState()
