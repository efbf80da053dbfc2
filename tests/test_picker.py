"""
Unit tests for the session picker
"""

import random
from datetime import datetime

import pytest

from vocabmaster.core.session.picker import SessionPicker, SessionState, SessionStatus
from vocabmaster.ledger import PerformanceLedger
from vocabmaster.models import Definition, Rating, VocabularyEntry

NOW = datetime(2024, 6, 1, 12, 0)


def make_catalog(*words: str) -> list[VocabularyEntry]:
    return [
        VocabularyEntry(
            id=word.lower(),
            word=word,
            meanings=(Definition("noun", f"Meaning of {word}"),),
            category="General",
        )
        for word in words
    ]


class TestSessionPicker:
    """Test SessionPicker.pick_next"""

    @pytest.fixture
    def picker(self):
        return SessionPicker(rng=random.Random(42))

    @pytest.fixture
    def ledger(self):
        return PerformanceLedger()

    def test_first_pick_moves_to_in_progress(self, picker, ledger):
        """Scenario: any of A-E may come first when all are new"""
        catalog = make_catalog("A", "B", "C", "D", "E")
        state = SessionState()
        assert state.status is SessionStatus.IDLE

        entry = picker.pick_next(state, catalog, ledger, NOW)

        assert entry.id in {"a", "b", "c", "d", "e"}
        assert state.current is entry
        assert state.history == [entry.id]
        assert state.status is SessionStatus.IN_PROGRESS

    def test_new_words_pick_from_top_three(self, ledger):
        """Ties keep catalog order, so only the first three are eligible"""
        catalog = make_catalog("A", "B", "C", "D", "E")
        seen = set()
        for seed in range(50):
            picker = SessionPicker(rng=random.Random(seed))
            seen.add(picker.pick_next(SessionState(), catalog, ledger, NOW).id)

        assert seen <= {"a", "b", "c"}
        assert len(seen) > 1

    def test_no_repeat_within_window(self, picker, ledger):
        """With more than five words, the last five shown are never repeated"""
        catalog = make_catalog(*[f"W{i}" for i in range(8)])
        state = SessionState()

        for _ in range(picker.session_length):
            recent = set(state.history[-5:])
            entry = picker.pick_next(state, catalog, ledger, NOW)
            assert entry.id not in recent
            state.count_rating(Rating.MEDIUM)

    def test_window_fallback_with_five_words(self, picker, ledger):
        """Scenario: the sixth pick from five words falls back to the full catalog"""
        catalog = make_catalog("A", "B", "C", "D", "E")
        state = SessionState()

        first_five = [picker.pick_next(state, catalog, ledger, NOW).id for _ in range(5)]
        assert sorted(first_five) == ["a", "b", "c", "d", "e"]

        sixth = picker.pick_next(state, catalog, ledger, NOW)
        assert sixth is not None
        assert sixth.id in first_five

    def test_single_word_catalog_repeats(self, picker, ledger):
        catalog = make_catalog("Only")
        state = SessionState()

        assert picker.pick_next(state, catalog, ledger, NOW).id == "only"
        assert picker.pick_next(state, catalog, ledger, NOW).id == "only"

    def test_session_cap(self, picker, ledger):
        """After twenty answers the session is exhausted"""
        catalog = make_catalog(*[f"W{i}" for i in range(10)])
        state = SessionState()

        picks = 0
        while picker.pick_next(state, catalog, ledger, NOW) is not None:
            picks += 1
            state.count_rating(Rating.EASY)
            assert state.answered <= 20

        assert picks == 20
        assert state.status is SessionStatus.EXHAUSTED
        assert state.current is None

    def test_empty_catalog_exhausts(self, picker, ledger):
        state = SessionState()

        assert picker.pick_next(state, [], ledger, NOW) is None
        assert state.status is SessionStatus.EXHAUSTED

    def test_exhausted_is_terminal_until_reset(self, picker, ledger):
        catalog = make_catalog("A", "B")
        state = SessionState(status=SessionStatus.EXHAUSTED)

        assert picker.pick_next(state, catalog, ledger, NOW) is None

        fresh = picker.reset(state)
        assert fresh.status is SessionStatus.IDLE
        assert fresh.answered == 0
        assert fresh.history == []
        assert picker.pick_next(fresh, catalog, ledger, NOW) is not None

    def test_seeded_rng_is_deterministic(self, ledger):
        catalog = make_catalog(*[f"W{i}" for i in range(12)])

        def run(seed):
            picker = SessionPicker(rng=random.Random(seed))
            state = SessionState()
            return [picker.pick_next(state, catalog, ledger, NOW).id for _ in range(10)]

        assert run(7) == run(7)

    def test_higher_priority_word_is_preferred(self, ledger):
        """A struggling word outranks easy ones when top_k is 1"""
        catalog = make_catalog("Easy1", "Easy2", "Hard")
        for entry in catalog[:2]:
            ledger.record(entry, Rating.EASY, NOW)
        ledger.record(catalog[2], Rating.HARD, NOW)

        picker = SessionPicker(top_k=1, rng=random.Random(0))
        assert picker.pick_next(SessionState(), catalog, ledger, NOW).id == "hard"


class TestSessionState:
    """Test SessionState counters"""

    def test_count_rating(self):
        state = SessionState()
        state.count_rating(Rating.EASY)
        state.count_rating(Rating.HARD)
        state.count_rating(Rating.HARD)

        assert state.answered == 3
        assert (state.easy, state.medium, state.hard) == (1, 0, 2)

    def test_recent_ids(self):
        state = SessionState(history=["a", "b", "c", "d", "e", "f"])

        assert state.recent_ids(5) == ["b", "c", "d", "e", "f"]
        assert state.recent_ids(0) == []
