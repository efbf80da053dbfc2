"""
Multiple-choice quiz generation
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum

from .models import VocabularyEntry

logger = logging.getLogger(__name__)

OPTION_COUNT = 4


class QuizKind(Enum):
    """Question types"""

    GUESS_WORD = "guess_word"  # definition shown, pick the word
    GUESS_DEFINITION = "guess_definition"  # word shown, pick the definition


@dataclass
class QuizQuestion:
    """A four-option multiple-choice question"""

    kind: QuizKind
    entry: VocabularyEntry
    prompt: str
    options: list[str]
    correct_answer: str

    @property
    def correct_index(self) -> int:
        return self.options.index(self.correct_answer)

    def is_correct(self, option: str) -> bool:
        return option == self.correct_answer


class QuizGenerator:
    """Builds questions from a catalog; never reads the ledger"""

    def __init__(self, catalog: list[VocabularyEntry], rng: random.Random | None = None):
        self.catalog = list(catalog)
        self.rng = rng or random.Random()

    def _has_enough_words(self) -> bool:
        return len(self.catalog) >= OPTION_COUNT

    def _build_options(self, correct: str, pool: list[str]) -> list[str] | None:
        """Sample distractors without replacement and shuffle them with the answer"""
        distractors = list(dict.fromkeys(item for item in pool if item and item != correct))
        needed = OPTION_COUNT - 1
        if len(distractors) < needed:
            return None

        options = self.rng.sample(distractors, needed) + [correct]
        self.rng.shuffle(options)
        return options

    def guess_word_question(self, entry: VocabularyEntry | None) -> QuizQuestion | None:
        """Show a definition and ask for the matching word"""
        if entry is None or not self._has_enough_words():
            return None

        pool = [other.word for other in self.catalog if other.id != entry.id]
        options = self._build_options(entry.word, pool)
        if options is None:
            logger.debug(f"Not enough distractor words for '{entry.id}'")
            return None

        definition = entry.definition or "No definition available."
        return QuizQuestion(
            kind=QuizKind.GUESS_WORD,
            entry=entry,
            prompt=f'Which word means: "{definition}"',
            options=options,
            correct_answer=entry.word,
        )

    def guess_definition_question(
        self, entry: VocabularyEntry | None
    ) -> QuizQuestion | None:
        """Show a word and ask for the matching definition"""
        if entry is None or not self._has_enough_words():
            return None

        correct_definition = entry.definition
        if not correct_definition:
            return None

        pool = [other.definition for other in self.catalog if other.id != entry.id]
        options = self._build_options(correct_definition, pool)
        if options is None:
            logger.debug(f"Not enough distractor definitions for '{entry.id}'")
            return None

        return QuizQuestion(
            kind=QuizKind.GUESS_DEFINITION,
            entry=entry,
            prompt=f'What is the definition of "{entry.word}"?',
            options=options,
            correct_answer=correct_definition,
        )

    def generate(
        self, entry: VocabularyEntry | None = None, kind: QuizKind | None = None
    ) -> QuizQuestion | None:
        """Generate a question, choosing a random target and kind when omitted"""
        if not self._has_enough_words():
            return None

        entry = entry or self.rng.choice(self.catalog)
        kind = kind or self.rng.choice(list(QuizKind))

        if kind is QuizKind.GUESS_WORD:
            return self.guess_word_question(entry)
        return self.guess_definition_question(entry)
