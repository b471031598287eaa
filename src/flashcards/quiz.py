"""Quiz sequencing: every card once per cycle, in random order.

A session draws questions from a private pool copied from the source
collection. Each asked card leaves the pool; when the pool runs dry it is
refilled from the source, so no card repeats until the whole deck has been
asked. Scoring always reads and mutates the source collection.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .cards import Card, CardCollection
from .errors import EmptyCollectionError, QuizExhaustedError
from .normalize import match_key, same_text

logger = logging.getLogger(__name__)


class QuizState(enum.Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class Verdict(enum.Enum):
    CORRECT = "correct"
    WRONG_ELSEWHERE = "wrong_elsewhere"  # answer is another card's definition
    WRONG = "wrong"


@dataclass
class AnswerResult:
    """Outcome of one answered question.

    Attributes:
        card: The question card (source copy, carrying the updated count)
        response: The answer as given
        verdict: How the answer was scored
        matched_term: Term whose definition was given, for WRONG_ELSEWHERE
    """
    card: Card
    response: str
    verdict: Verdict
    matched_term: Optional[str] = None

    @property
    def correct(self) -> bool:
        return self.verdict is Verdict.CORRECT


class CardPool:
    """Depletable set of cards with O(1) random draw and removal by term.

    Removal swaps the target with the last slot and pops, so the dense list
    never has holes and ``rng.randrange(len)`` stays uniform.
    """

    def __init__(self, cards: Iterable[Card] = (), rng: Optional[random.Random] = None) -> None:
        self._items: List[Card] = []
        self._index: Dict[str, int] = {}
        self._rng = rng or random.Random()
        self.extend(cards)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and match_key(term) in self._index

    def extend(self, cards: Iterable[Card]) -> None:
        for card in cards:
            key = match_key(card.term)
            if key in self._index:
                continue
            self._index[key] = len(self._items)
            self._items.append(card)

    def draw(self) -> Card:
        if not self._items:
            raise EmptyCollectionError("The quiz pool is empty.")
        return self._items[self._rng.randrange(len(self._items))]

    def discard(self, term: str) -> bool:
        idx = self._index.pop(match_key(term), None)
        if idx is None:
            return False
        last = self._items.pop()
        if idx < len(self._items):
            self._items[idx] = last
            self._index[match_key(last.term)] = idx
        return True


class QuizSession:
    """Asks ``count`` questions drawn from ``source`` without early repeats.

    Usage::

        session = QuizSession(collection, 3)
        while session.state is QuizState.ACTIVE:
            card = session.next_question()
            result = session.answer(input(card.term))
    """

    def __init__(
        self,
        source: CardCollection,
        count: int,
        rng: Optional[random.Random] = None,
    ) -> None:
        if count < 0:
            raise ValueError(f"Question count must be >= 0, got {count}")
        self._source = source
        self._remaining = count
        self._rng = rng or random.Random()
        self._pool = CardPool(source.duplicate(), rng=self._rng)
        self._current: Optional[Card] = None
        self.asked = 0

    @property
    def state(self) -> QuizState:
        return QuizState.ACTIVE if self._remaining > 0 else QuizState.EXHAUSTED

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def current(self) -> Optional[Card]:
        return self._current

    def next_question(self) -> Card:
        """Draw the next question card; repeated calls return the same card
        until it is answered.

        Raises:
            QuizExhaustedError: all requested questions were asked
            EmptyCollectionError: the source collection has no cards
        """
        if self.state is QuizState.EXHAUSTED:
            raise QuizExhaustedError()
        if self._current is not None:
            return self._current
        if len(self._source) == 0:
            raise EmptyCollectionError("There are no cards to ask.")
        if len(self._pool) == 0:
            logger.debug("Pool empty, refilling with %d cards", len(self._source))
            self._pool.extend(self._source.duplicate())
        self._current = self._pool.draw()
        return self._current

    def answer(self, response: str) -> AnswerResult:
        """Score ``response`` against the current question and advance."""
        card = self.next_question()
        source_card = self._source.find_by_term(card.term)

        if same_text(response, card.definition):
            result = AnswerResult(card=source_card or card, response=response, verdict=Verdict.CORRECT)
        else:
            other = self._source.find_by_definition(response)
            if source_card is not None:
                source_card.stats.record()
            else:
                logger.warning("Card %r left the collection mid-quiz; mistake not recorded", card.term)
            if other is not None:
                result = AnswerResult(
                    card=source_card or card,
                    response=response,
                    verdict=Verdict.WRONG_ELSEWHERE,
                    matched_term=other.term,
                )
            else:
                result = AnswerResult(card=source_card or card, response=response, verdict=Verdict.WRONG)

        self._pool.discard(card.term)
        self._current = None
        self._remaining -= 1
        self.asked += 1
        logger.debug("Asked %r: %s (%d left)", card.term, result.verdict.value, self._remaining)
        return result

    def step(self, respond: Callable[[Card], str]) -> AnswerResult:
        """Ask one question: draw, hand the card to ``respond``, score its reply."""
        card = self.next_question()
        return self.answer(respond(card))
