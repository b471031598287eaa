"""Card and CardCollection: the in-memory flashcard model.

A collection keeps its cards in insertion order and maintains two lookup
indices (folded term -> card, folded definition -> card) next to the ordered
list, so no two cards ever share a term or a definition, ignoring case.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import (
    DuplicateDefinitionError,
    DuplicateTermError,
    EmptyCollectionError,
    NotFoundError,
)
from .normalize import match_key

logger = logging.getLogger(__name__)


@dataclass
class MistakeCounter:
    """Mutable mistake count owned by exactly one card."""

    count: int = 0

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Mistake count must be >= 0, got {self.count}")

    def record(self) -> int:
        self.count += 1
        return self.count

    def reset(self) -> None:
        self.count = 0


@dataclass(frozen=True)
class Card:
    """A term/definition pair with its own mistake counter.

    Term and definition cannot be reassigned; replacing either means removing
    the card and adding a new one. The counter is the only mutable part.
    """

    term: str
    definition: str
    stats: MistakeCounter = field(default_factory=MistakeCounter, compare=False, repr=False)

    @classmethod
    def create(cls, term: str, definition: str, mistakes: int = 0) -> "Card":
        return cls(term=term, definition=definition, stats=MistakeCounter(mistakes))

    @property
    def mistakes(self) -> int:
        return self.stats.count

    def copy(self) -> "Card":
        """Independent copy: same text, same count, separate counter."""
        return Card.create(self.term, self.definition, self.mistakes)

    def as_tuple(self) -> tuple:
        return (self.term, self.definition, self.mistakes)


class CardCollection:
    """Ordered set of cards, unique by term and by definition (case-insensitive)."""

    def __init__(self, cards: Iterable[Card] = (), rng: Optional[random.Random] = None) -> None:
        self._cards: List[Card] = []
        self._by_term: Dict[str, Card] = {}
        self._by_definition: Dict[str, Card] = {}
        self._rng = rng or random.Random()
        for card in cards:
            self._append(card)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and match_key(term) in self._by_term

    def __repr__(self) -> str:
        return f"CardCollection({[c.as_tuple() for c in self._cards]!r})"

    def size(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> List[Card]:
        """Snapshot of the cards in insertion order."""
        return list(self._cards)

    def _append(self, card: Card) -> Card:
        t_key = match_key(card.term)
        d_key = match_key(card.definition)
        # Term is checked before definition.
        if t_key in self._by_term:
            raise DuplicateTermError(card.term)
        if d_key in self._by_definition:
            raise DuplicateDefinitionError(card.definition)
        self._cards.append(card)
        self._by_term[t_key] = card
        self._by_definition[d_key] = card
        return card

    def add_card(self, term: str, definition: str, mistakes: int = 0) -> Card:
        """Append a new card.

        Raises:
            DuplicateTermError: a card with this term exists (checked first)
            DuplicateDefinitionError: a card with this definition exists
            ValueError: mistakes is negative
        """
        card = self._append(Card.create(term, definition, mistakes))
        logger.debug("Added card %r (mistakes=%d)", term, mistakes)
        return card

    def add_cards(self, other: Iterable[Card]) -> int:
        """Append copies of every card of ``other``; returns how many were added.

        Stops at the first duplicate, leaving the cards added before it.
        """
        added = 0
        for card in other:
            self._append(card.copy())
            added += 1
        return added

    def remove_card(self, term: str) -> Card:
        """Remove the card with this term, keeping the order of the rest.

        Raises:
            NotFoundError: no card has this term
        """
        card = self._by_term.pop(match_key(term), None)
        if card is None:
            raise NotFoundError(term)
        del self._by_definition[match_key(card.definition)]
        self._cards.remove(card)
        logger.debug("Removed card %r", card.term)
        return card

    def find_by_term(self, term: str) -> Optional[Card]:
        return self._by_term.get(match_key(term))

    def find_by_definition(self, definition: str) -> Optional[Card]:
        return self._by_definition.get(match_key(definition))

    def random_card(self) -> Card:
        """Uniformly random member.

        Raises:
            EmptyCollectionError: the collection is empty
        """
        if not self._cards:
            raise EmptyCollectionError()
        return self._rng.choice(self._cards)

    def duplicate(self) -> "CardCollection":
        """Deep copy: same order, independent cards and counters."""
        return CardCollection((c.copy() for c in self._cards), rng=self._rng)

    def reset_all_mistakes(self) -> None:
        for card in self._cards:
            card.stats.reset()
        logger.info("Reset mistake counts for %d cards", len(self._cards))
