"""Reporting utilities: hardest-card query and user-facing messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .cards import Card
from .merge import ImportReport
from .quiz import AnswerResult, Verdict


@dataclass
class HardestCards:
    cards: List[Card] = field(default_factory=list)
    mistakes: int = 0

    @property
    def terms(self) -> List[str]:
        return [c.term for c in self.cards]


def hardest_cards(cards: Iterable[Card]) -> HardestCards:
    """Cards tied for the highest non-zero mistake count, in collection order."""
    result = HardestCards()
    for card in cards:
        if card.mistakes > result.mistakes:
            result = HardestCards(cards=[card], mistakes=card.mistakes)
        elif card.mistakes != 0 and card.mistakes == result.mistakes:
            result.cards.append(card)
    return result


def format_hardest(result: HardestCards) -> str:
    if not result.cards:
        return "There are no cards with errors."
    if len(result.cards) == 1:
        return (
            f'The hardest card is "{result.cards[0].term}". '
            f"You have {result.mistakes} errors answering it."
        )
    quoted = ", ".join(f'"{t}"' for t in result.terms)
    return f"The hardest cards are {quoted}. You have {result.mistakes} errors answering them."


def format_question(card: Card) -> str:
    return f'Print the definition of "{card.term}":'


def format_answer(result: AnswerResult) -> str:
    if result.verdict is Verdict.CORRECT:
        return "Correct answer"
    if result.verdict is Verdict.WRONG_ELSEWHERE:
        return (
            f'Wrong answer. The correct one is "{result.card.definition}", '
            f'you\'ve just written the definition of "{result.matched_term}".'
        )
    return f'Wrong answer. The correct one is "{result.card.definition}".'


def format_import(report: ImportReport) -> List[str]:
    """Count line first, then one line per problem encountered."""
    lines = [f"{report.imported} cards have been loaded."]
    for err in report.malformed:
        lines.append(f"Skipped {err}")
    if report.error is not None:
        lines.append(f"ERROR: {report.error}. Import incomplete.")
    return lines
