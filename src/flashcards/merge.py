"""Merge imported rows into an existing collection.

Policy, applied row by row in input order:
- same term, different definition: replace the card (update), counted
- same term, same definition: leave as is, counted
- same definition under another term: skip, not counted
- otherwise: insert, counted

Term matches take precedence over definition matches, so an update drops
the mistake history of the replaced card.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .cards import CardCollection
from .errors import FileUnavailableError, MalformedRowError
from .ingest import CardRow, iter_data_lines, parse_row
from .normalize import same_text

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Result of importing a file.

    Attributes:
        imported: Rows counted as imported (including unchanged duplicates)
        malformed: Lines that failed to parse and were skipped
        error: Read failure that stopped the import early, if any
    """
    imported: int = 0
    malformed: List[MalformedRowError] = field(default_factory=list)
    error: Optional[FileUnavailableError] = None

    @property
    def complete(self) -> bool:
        return self.error is None


def merge_row(collection: CardCollection, row: CardRow) -> bool:
    """Apply one row; returns True when the row counts as imported."""
    existing = collection.find_by_term(row.term)
    if existing is not None:
        if same_text(existing.definition, row.definition):
            return True
        owner = collection.find_by_definition(row.definition)
        if owner is not None:
            # The new definition already belongs to another term.
            logger.debug("Skipping update of %r: definition %r is taken by %r",
                         row.term, row.definition, owner.term)
            return False
        collection.remove_card(existing.term)
        collection.add_card(row.term, row.definition, row.mistakes)
        logger.debug("Updated %r: %r -> %r", row.term, existing.definition, row.definition)
        return True
    if collection.find_by_definition(row.definition) is not None:
        logger.debug("Skipping %r: definition %r already present", row.term, row.definition)
        return False
    collection.add_card(row.term, row.definition, row.mistakes)
    return True


def import_rows(collection: CardCollection, rows: Iterable[CardRow]) -> int:
    """Merge ``rows`` into ``collection``; returns the number counted as imported."""
    return sum(1 for row in rows if merge_row(collection, row))


def import_file(collection: CardCollection, path: str | Path) -> ImportReport:
    """Read a card file and merge it row by row.

    Lines are decoded one at a time, so a line that is not valid UTF-8 is
    reported as malformed without losing its neighbours. Rows merged before
    a read failure stay merged; the failure is stored in ``report.error``.

    Raises:
        FileUnavailableError: the file does not exist (nothing is read)
    """
    path = Path(path)
    if not path.is_file():
        raise FileUnavailableError(str(path), "file not found")

    report = ImportReport()
    try:
        with path.open("rb") as f:
            for number, raw in iter_data_lines(f):
                try:
                    row = parse_row(_decode_line(raw, number), line_number=number)
                except MalformedRowError as e:
                    logger.warning("%s", e)
                    report.malformed.append(e)
                    continue
                if merge_row(collection, row):
                    report.imported += 1
    except OSError as e:
        reason = e.strerror or str(e)
        report.error = FileUnavailableError(str(path), reason)
        logger.error("Import of %s stopped after %d rows: %s", path, report.imported, reason)

    logger.info("Imported %d rows from %s", report.imported, path)
    return report


def _decode_line(raw: bytes, number: int) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        raise MalformedRowError(text, "not valid UTF-8", number)
