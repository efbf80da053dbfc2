"""
Unit tests for quiz question generation
"""

import random

import pytest

from vocabmaster.catalog import SAMPLE_VOCABULARY
from vocabmaster.models import Definition, VocabularyEntry
from vocabmaster.quiz import QuizGenerator, QuizKind


def make_entry(word: str, definition: str = "") -> VocabularyEntry:
    return VocabularyEntry(
        id=word.lower(),
        word=word,
        meanings=(Definition("noun", definition or f"Meaning of {word}"),),
        category="General",
    )


class TestQuizGenerator:
    """Test QuizGenerator"""

    @pytest.fixture
    def generator(self):
        return QuizGenerator(SAMPLE_VOCABULARY, rng=random.Random(3))

    def test_too_few_words(self):
        generator = QuizGenerator([make_entry(w) for w in ["A", "B", "C"]])

        assert generator.generate() is None
        assert generator.guess_word_question(make_entry("A")) is None
        assert generator.guess_definition_question(make_entry("A")) is None

    def test_guess_word_question(self, generator):
        target = SAMPLE_VOCABULARY[0]
        question = generator.guess_word_question(target)

        assert question.kind is QuizKind.GUESS_WORD
        assert question.prompt == f'Which word means: "{target.definition}"'
        assert question.correct_answer == target.word
        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert question.options.count(target.word) == 1
        assert question.options[question.correct_index] == target.word

    def test_guess_definition_question(self, generator):
        target = SAMPLE_VOCABULARY[2]
        question = generator.guess_definition_question(target)

        assert question.kind is QuizKind.GUESS_DEFINITION
        assert question.prompt == f'What is the definition of "{target.word}"?'
        assert question.correct_answer == target.definition
        assert len(set(question.options)) == 4
        assert question.is_correct(target.definition)

    def test_generate_many_questions(self, generator):
        for _ in range(30):
            question = generator.generate()
            assert len(question.options) == 4
            assert len(set(question.options)) == 4
            assert sum(question.is_correct(option) for option in question.options) == 1

    def test_generate_with_explicit_kind(self, generator):
        question = generator.generate(SAMPLE_VOCABULARY[5], QuizKind.GUESS_DEFINITION)

        assert question.entry is SAMPLE_VOCABULARY[5]
        assert question.kind is QuizKind.GUESS_DEFINITION

    def test_duplicate_definitions_not_enough_distractors(self):
        """Distractor definitions must be distinct from each other and the answer"""
        catalog = [
            make_entry("A", "same"),
            make_entry("B", "same"),
            make_entry("C", "same"),
            make_entry("D", "other"),
        ]
        generator = QuizGenerator(catalog, rng=random.Random(0))

        assert generator.guess_definition_question(catalog[0]) is None
        assert generator.guess_word_question(catalog[0]) is not None

    def test_seeded_rng_is_deterministic(self):
        first = QuizGenerator(SAMPLE_VOCABULARY, rng=random.Random(11)).generate()
        second = QuizGenerator(SAMPLE_VOCABULARY, rng=random.Random(11)).generate()

        assert first.options == second.options
        assert first.entry == second.entry
