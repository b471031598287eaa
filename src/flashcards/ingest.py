"""Persisted card format: parsing rows, formatting exports, writing files.

Format (UTF-8, one card per line, fixed header)::

    TERM:DEFINITION:MISTAKES
    German:Deutsch:0
    I am:Ich bin:3

Fields are separated by ``:`` and are not escaped, so a term or definition
containing ``:`` does not survive a round trip (it reads back as malformed).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .cards import Card
from .errors import FileUnavailableError, MalformedRowError

logger = logging.getLogger(__name__)

HEADER = "TERM:DEFINITION:MISTAKES"
SEPARATOR = ":"


@dataclass
class CardRow:
    term: str
    definition: str
    mistakes: int = 0


def parse_row(line: str, line_number: Optional[int] = None) -> CardRow:
    """Parse one data line into a CardRow.

    Accepts ``term:definition:mistakes`` or ``term:definition`` (mistakes 0).

    Raises:
        MalformedRowError: wrong field count, or a count that is not a
            non-negative integer
    """
    raw = line.rstrip("\r\n")
    parts = raw.split(SEPARATOR)
    if len(parts) == 2:
        return CardRow(term=parts[0], definition=parts[1])
    if len(parts) != 3:
        raise MalformedRowError(raw, f"expected 3 fields, got {len(parts)}", line_number)
    try:
        mistakes = int(parts[2].strip())
    except ValueError:
        raise MalformedRowError(raw, f"mistake count {parts[2]!r} is not an integer", line_number)
    if mistakes < 0:
        raise MalformedRowError(raw, "mistake count is negative", line_number)
    return CardRow(term=parts[0], definition=parts[1], mistakes=mistakes)


def iter_data_lines(lines: Iterable) -> Iterator[tuple]:
    """Yield ``(line_number, line)`` for every data line.

    Works on str or bytes lines. The first line is the header and is skipped
    without validation; blank lines are ignored.
    """
    for number, line in enumerate(lines, start=1):
        if number == 1:
            continue
        if not line.strip():
            continue
        yield number, line


def format_row(card: Card) -> str:
    return SEPARATOR.join((card.term, card.definition, str(card.mistakes)))


def format_rows(cards: Iterable[Card]) -> List[str]:
    """Header followed by one row per card, in collection order."""
    return [HEADER] + [format_row(c) for c in cards]


def write_rows(path: str | Path, cards: Iterable[Card]) -> int:
    """Export cards to ``path``, overwriting it. Returns the number of cards.

    Raises:
        FileUnavailableError: the file could not be written
    """
    path = Path(path)
    lines = format_rows(cards)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as f:
            f.write("\n".join(lines) + "\n")
    except OSError as e:
        raise FileUnavailableError(str(path), e.strerror or str(e)) from e
    count = len(lines) - 1
    logger.info("Exported %d cards to %s", count, path)
    return count


def write_text(path: str | Path, text: str) -> None:
    """Write a text blob (used for the session transcript)."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileUnavailableError(str(path), e.strerror or str(e)) from e
