"""Tests for the hardest-card query and message formatting."""

from flashcards.cards import Card, CardCollection
from flashcards.errors import MalformedRowError, FileUnavailableError
from flashcards.merge import ImportReport
from flashcards.quiz import AnswerResult, Verdict
from flashcards.report import (
    format_answer,
    format_hardest,
    format_import,
    format_question,
    hardest_cards,
)


def make(*rows):
    cc = CardCollection()
    for term, definition, mistakes in rows:
        cc.add_card(term, definition, mistakes)
    return cc


class TestHardestCards:
    """Test the running-maximum scan."""

    def test_worked_example(self):
        cc = make(("cat", "gato", 0), ("dog", "perro", 2))
        result = hardest_cards(cc)
        assert result.terms == ["dog"]
        assert result.mistakes == 2
        cc.reset_all_mistakes()
        result = hardest_cards(cc)
        assert result.cards == []
        assert result.mistakes == 0

    def test_ties_in_insertion_order(self):
        cc = make(("a", "1", 3), ("b", "2", 1), ("c", "3", 3), ("d", "4", 3))
        result = hardest_cards(cc)
        assert result.terms == ["a", "c", "d"]
        assert result.mistakes == 3

    def test_higher_replaces_ties(self):
        cc = make(("a", "1", 1), ("b", "2", 1), ("c", "3", 4))
        assert hardest_cards(cc).terms == ["c"]

    def test_zero_never_qualifies(self):
        cc = make(("a", "1", 0), ("b", "2", 0))
        assert hardest_cards(cc).cards == []

    def test_empty(self):
        assert hardest_cards(CardCollection()).mistakes == 0


class TestFormatting:
    """Test user-facing messages."""

    def test_format_hardest_none(self):
        assert format_hardest(hardest_cards([])) == "There are no cards with errors."

    def test_format_hardest_single(self):
        cc = make(("dog", "perro", 2))
        assert format_hardest(hardest_cards(cc)) == (
            'The hardest card is "dog". You have 2 errors answering it.'
        )

    def test_format_hardest_many(self):
        cc = make(("a", "1", 3), ("b", "2", 3))
        assert format_hardest(hardest_cards(cc)) == (
            'The hardest cards are "a", "b". You have 3 errors answering them.'
        )

    def test_format_question(self):
        assert format_question(Card.create("cat", "gato")) == 'Print the definition of "cat":'

    def test_format_answers(self):
        card = Card.create("cat", "gato")
        assert format_answer(AnswerResult(card, "gato", Verdict.CORRECT)) == "Correct answer"
        assert format_answer(AnswerResult(card, "x", Verdict.WRONG)) == (
            'Wrong answer. The correct one is "gato".'
        )
        assert format_answer(AnswerResult(card, "perro", Verdict.WRONG_ELSEWHERE, "dog")) == (
            'Wrong answer. The correct one is "gato", '
            'you\'ve just written the definition of "dog".'
        )

    def test_format_import(self):
        report = ImportReport(imported=2)
        assert format_import(report) == ["2 cards have been loaded."]
        report.malformed.append(MalformedRowError("x", "expected 3 fields, got 1", 3))
        report.error = FileUnavailableError("f.txt", "boom")
        lines = format_import(report)
        assert lines[0] == "2 cards have been loaded."
        assert "line 3" in lines[1]
        assert lines[2].startswith("ERROR:")
