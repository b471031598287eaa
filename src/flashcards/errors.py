"""Error taxonomy for card collections, quizzes and the import/export format.

All errors are recoverable: the shell catches :class:`FlashcardError`
subclasses, reports them and keeps the interaction loop running.
"""

from __future__ import annotations

from typing import Optional


class FlashcardError(Exception):
    """Base class for every error raised by the flashcards core."""


class DuplicateTermError(FlashcardError):
    def __init__(self, term: str) -> None:
        super().__init__(f'The card "{term}" already exists.')
        self.term = term


class DuplicateDefinitionError(FlashcardError):
    def __init__(self, definition: str) -> None:
        super().__init__(f'The definition "{definition}" already exists.')
        self.definition = definition


class NotFoundError(FlashcardError):
    def __init__(self, term: str) -> None:
        super().__init__(f'There is no card "{term}".')
        self.term = term


class EmptyCollectionError(FlashcardError):
    def __init__(self, message: str = "The collection has no cards.") -> None:
        super().__init__(message)


class QuizExhaustedError(FlashcardError):
    def __init__(self) -> None:
        super().__init__("The quiz has no questions left.")


class MalformedRowError(FlashcardError):
    """A persisted row that does not parse as ``term:definition[:mistakes]``.

    Attributes:
        line: Raw line content (without the trailing newline)
        line_number: 1-based line number in the source file, when known
        reason: Short description of what is wrong
    """

    def __init__(self, line: str, reason: str, line_number: Optional[int] = None) -> None:
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"Malformed row ({where}{reason}): {line!r}")
        self.line = line
        self.reason = reason
        self.line_number = line_number


class FileUnavailableError(FlashcardError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"File unavailable: {path} ({reason})")
        self.path = path
        self.reason = reason
