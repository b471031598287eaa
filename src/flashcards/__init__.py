"""Flashcards package: card collections, quiz sequencing and import merging.

The core (cards, quiz, merge, report) never touches the console; file access
is confined to ingest helpers and the CLI shell.
"""

from .cards import Card, CardCollection, MistakeCounter
from .errors import (
    DuplicateDefinitionError,
    DuplicateTermError,
    EmptyCollectionError,
    FileUnavailableError,
    FlashcardError,
    MalformedRowError,
    NotFoundError,
    QuizExhaustedError,
)
from .ingest import CardRow, format_rows, parse_row, write_rows
from .merge import ImportReport, import_file, import_rows
from .quiz import AnswerResult, QuizSession, QuizState, Verdict
from .report import HardestCards, hardest_cards

__all__ = [
    "normalize",
    "errors",
    "cards",
    "quiz",
    "ingest",
    "merge",
    "report",
    "cli",
    "Card",
    "CardCollection",
    "MistakeCounter",
    "CardRow",
    "QuizSession",
    "QuizState",
    "Verdict",
    "AnswerResult",
    "ImportReport",
    "HardestCards",
    "parse_row",
    "format_rows",
    "write_rows",
    "import_rows",
    "import_file",
    "hardest_cards",
    "FlashcardError",
    "DuplicateTermError",
    "DuplicateDefinitionError",
    "NotFoundError",
    "EmptyCollectionError",
    "QuizExhaustedError",
    "MalformedRowError",
    "FileUnavailableError",
]
