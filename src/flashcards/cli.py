"""CLI entrypoint for the flashcards trainer.

Usage:
  python -m flashcards.cli -import cards.txt -export cards.txt
  flashcards --config resources/config.json --log-level INFO
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

from .cards import CardCollection
from .errors import (
    DuplicateDefinitionError,
    DuplicateTermError,
    EmptyCollectionError,
    FileUnavailableError,
    NotFoundError,
)
from .ingest import write_rows, write_text
from .merge import import_file
from .quiz import QuizSession, QuizState
from .report import format_answer, format_hardest, format_import, format_question, hardest_cards

logger = logging.getLogger(__name__)

MENU = "Input the action (add, remove, import, export, ask, exit, log, hardest card, reset stats):"

DEFAULT_CONFIG = {
    "import_path": None,
    "export_path": None,
    "log_level": "WARNING",
    "seed": None,
}


def load_config(path: str | Path | None) -> dict:
    """Read a JSON config, filling missing keys from DEFAULT_CONFIG.

    Raises:
        ValueError: the file exists but is not valid JSON
    """
    cfg = dict(DEFAULT_CONFIG)
    if not path:
        return cfg
    path = Path(path)
    if not path.exists():
        return cfg
    try:
        cfg.update(json.loads(path.read_text(encoding="utf-8")))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}")
    return cfg


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


class Console:
    """Line-oriented console that keeps a transcript of everything shown and typed."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout
        self._transcript: List[str] = []

    def say(self, text: str = "") -> None:
        self._out.write(text + "\n")
        self._transcript.append(text + "\n")

    def read(self) -> str:
        """Next input line, trimmed. Raises EOFError at end of input."""
        line = self._in.readline()
        if not line:
            raise EOFError
        text = line.strip()
        self._transcript.append(text + "\n")
        return text

    def ask(self, prompt: str) -> str:
        self.say(prompt)
        return self.read()

    @property
    def transcript(self) -> str:
        return "".join(self._transcript)


class FlashcardShell:
    """Menu loop translating commands into collection and quiz operations."""

    def __init__(
        self,
        console: Console,
        collection: Optional[CardCollection] = None,
        rng: Optional[random.Random] = None,
        export_path: Optional[str] = None,
    ) -> None:
        self.console = console
        self.rng = rng or random.Random()
        self.collection = collection if collection is not None else CardCollection(rng=self.rng)
        self.export_path = export_path
        self._commands: Dict[str, Callable[[], None]] = {
            "add": self.cmd_add,
            "remove": self.cmd_remove,
            "import": self.cmd_import,
            "export": self.cmd_export,
            "ask": self.cmd_ask,
            "log": self.cmd_log,
            "hardest card": self.cmd_hardest,
            "reset stats": self.cmd_reset,
        }

    def process(self, command: str) -> None:
        handler = self._commands.get(command.strip().lower())
        if handler is None:
            self.console.say("Invalid input for menu. Please only enter listed menu actions.")
            return
        handler()

    def run(self) -> None:
        try:
            command = self.console.ask(MENU)
            while command.lower() != "exit":
                self.process(command)
                self.console.say()
                command = self.console.ask(MENU)
        except EOFError:
            logger.debug("End of input, leaving menu loop")
        self.console.say("Bye bye!")

    def cmd_add(self) -> None:
        term = self.console.ask("The card:")
        if self.collection.find_by_term(term) is not None:
            self.console.say(str(DuplicateTermError(term)))
            return
        definition = self.console.ask("The definition of the card:")
        try:
            self.collection.add_card(term, definition)
        except (DuplicateTermError, DuplicateDefinitionError) as e:
            self.console.say(str(e))
            return
        self.console.say(f'The pair ("{term}":"{definition}") has been added.')

    def cmd_remove(self) -> None:
        term = self.console.ask("The card:")
        try:
            self.collection.remove_card(term)
        except NotFoundError:
            self.console.say(f'Can\'t remove "{term}": there is no such card.')
            return
        self.console.say("The card has been removed.")

    def cmd_import(self) -> None:
        self.import_from(self.console.ask("File name:"))

    def import_from(self, path: str) -> None:
        try:
            report = import_file(self.collection, path)
        except FileUnavailableError:
            self.console.say("File not found.")
            return
        for line in format_import(report):
            self.console.say(line)

    def cmd_export(self) -> None:
        self.export_to(self.console.ask("File name:"))

    def export_to(self, path: str) -> bool:
        try:
            count = write_rows(path, self.collection)
        except FileUnavailableError as e:
            self.console.say(f"ERROR: {e}")
            return False
        self.console.say(f"{count} cards have been saved.")
        return True

    def cmd_ask(self) -> None:
        raw = self.console.ask("How many times to ask?")
        try:
            count = int(raw)
        except ValueError:
            count = -1
        if count < 0:
            self.console.say(f'"{raw}" is not a valid number of questions.')
            return
        session = QuizSession(self.collection, count, rng=self.rng)
        while session.state is QuizState.ACTIVE:
            try:
                card = session.next_question()
            except EmptyCollectionError:
                self.console.say("There are no cards to ask.")
                return
            response = self.console.ask(format_question(card))
            self.console.say(format_answer(session.answer(response)))

    def cmd_log(self) -> None:
        path = self.console.ask("File name:")
        try:
            write_text(path, self.console.transcript)
        except FileUnavailableError as e:
            self.console.say(f"ERROR: {e}")
            return
        self.console.say("The log has been saved.")

    def cmd_hardest(self) -> None:
        self.console.say(format_hardest(hardest_cards(self.collection)))

    def cmd_reset(self) -> None:
        self.collection.reset_all_mistakes()
        self.console.say("Card statistics has been reset.")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="flashcards", description="Interactive flashcard trainer", allow_abbrev=False)
    # A flag given without a value parses as "" and is reported, not fatal.
    p.add_argument("-import", "--import", dest="import_path", nargs="?", const="", help="Card file to load at startup")
    p.add_argument("-export", "--export", dest="export_path", nargs="?", const="", help="Card file to save to on exit")
    p.add_argument(
        "--config",
        default="resources/config.json",
        help="Path to config.json (optional; defaults will be used if missing)",
    )
    p.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return p


def main(
    argv: List[str] | None = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    console = Console(stdin, stdout)

    try:
        cfg = load_config(args.config)
    except ValueError as e:
        console.say(f"Error: {e}")
        return 1
    configure_logging(args.log_level or cfg.get("log_level", "WARNING"))

    for flag in unknown:
        if flag.startswith("-"):
            logger.warning("Ignoring unknown argument %s", flag)
            console.say(f"ERROR: Invalid argument {flag}. Program may not run as expected.")
    for flag, value in (("-import", args.import_path), ("-export", args.export_path)):
        if value == "":
            logger.warning("Argument %s has no value", flag)
            console.say(f"ERROR: Invalid argument {flag}. Program may not run as expected.")

    seed = cfg.get("seed")
    rng = random.Random(seed) if seed is not None else random.Random()
    shell = FlashcardShell(
        console,
        rng=rng,
        export_path=args.export_path or cfg.get("export_path"),
    )

    import_path = args.import_path or cfg.get("import_path")
    if import_path:
        shell.import_from(import_path)
        console.say()

    shell.run()

    if shell.export_path:
        if not shell.export_to(shell.export_path):
            return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
