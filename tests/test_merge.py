"""Tests for merge-on-import reconciliation."""

from pathlib import Path

import pytest

from flashcards.cards import CardCollection
from flashcards.errors import FileUnavailableError
from flashcards.ingest import CardRow, write_rows
from flashcards.merge import import_file, import_rows


@pytest.fixture
def collection():
    cc = CardCollection()
    cc.add_card("cat", "gato")
    cc.add_card("dog", "perro", 2)
    return cc


def state(cc):
    return [c.as_tuple() for c in cc]


class TestImportRows:
    """Test the update/skip/insert policy."""

    def test_update_on_new_definition(self, collection):
        assert import_rows(collection, [CardRow("cat", "felino", 0)]) == 1
        assert collection.find_by_term("cat").definition == "felino"
        assert collection.find_by_definition("gato") is None
        # Updated card is re-inserted at the end
        assert state(collection) == [("dog", "perro", 2), ("cat", "felino", 0)]

    def test_update_replaces_mistakes(self, collection):
        import_rows(collection, [CardRow("DOG", "can", 5)])
        card = collection.find_by_term("dog")
        assert card.term == "DOG"
        assert card.mistakes == 5

    def test_same_pair_is_counted_noop(self, collection):
        before = state(collection)
        assert import_rows(collection, [CardRow("Cat", "GATO", 9)]) == 1
        assert state(collection) == before

    def test_definition_collision_skipped(self, collection):
        assert import_rows(collection, [CardRow("kitty", "Gato", 0)]) == 0
        assert collection.find_by_term("kitty") is None
        assert len(collection) == 2

    def test_update_into_taken_definition_skipped(self, collection):
        """Replacing cat's definition with dog's would break uniqueness."""
        assert import_rows(collection, [CardRow("cat", "perro", 0)]) == 0
        assert collection.find_by_term("cat").definition == "gato"

    def test_insert_new(self, collection):
        assert import_rows(collection, [CardRow("house", "casa", 1)]) == 1
        assert state(collection)[-1] == ("house", "casa", 1)

    def test_rows_applied_in_order(self):
        cc = CardCollection()
        rows = [CardRow("cat", "gato"), CardRow("cat", "felino"), CardRow("kitty", "gato")]
        assert import_rows(cc, rows) == 3
        assert state(cc) == [("cat", "felino", 0), ("kitty", "gato", 0)]

    def test_worked_example(self):
        cc = CardCollection()
        cc.add_card("cat", "gato")
        assert import_rows(cc, [CardRow("cat", "felino", 0)]) == 1
        assert cc.find_by_term("cat").definition == "felino"
        assert import_rows(cc, [CardRow("cat", "felino", 0)]) == 1
        assert len(cc) == 1


class TestImportFile:
    """Test file import, round trips and partial imports."""

    def test_missing_file(self, tmp_path, collection):
        with pytest.raises(FileUnavailableError):
            import_file(collection, tmp_path / "nope.txt")
        assert len(collection) == 2

    def test_round_trip_preserves_order(self, tmp_path, collection):
        collection.add_card("house", "casa", 7)
        path = tmp_path / "cards.txt"
        write_rows(path, collection)
        fresh = CardCollection()
        report = import_file(fresh, path)
        assert report.imported == 3
        assert report.complete
        assert state(fresh) == state(collection)

    def test_import_twice_is_idempotent(self, tmp_path, collection):
        path = tmp_path / "cards.txt"
        path.write_text(
            "TERM:DEFINITION:MISTAKES\ncat:felino:1\nbird:pajaro:0\nfish:perro:0\n",
            encoding="utf-8",
        )
        first = import_file(collection, path)
        after_first = state(collection)
        second = import_file(collection, path)
        assert state(collection) == after_first
        assert first.imported == second.imported == 2

    def test_malformed_lines_skipped(self, tmp_path):
        path = tmp_path / "cards.txt"
        path.write_text(
            "TERM:DEFINITION:MISTAKES\ncat:gato:0\nbroken\nclock:12:00:0\ndog:perro:x\nsun:sol\n",
            encoding="utf-8",
        )
        cc = CardCollection()
        report = import_file(cc, path)
        assert report.imported == 2
        assert [e.line_number for e in report.malformed] == [3, 4, 5]
        assert state(cc) == [("cat", "gato", 0), ("sun", "sol", 0)]

    def test_undecodable_line_keeps_neighbours(self, tmp_path):
        """A line with invalid UTF-8 is skipped; rows around it are merged."""
        path = tmp_path / "cards.txt"
        path.write_bytes(
            b"TERM:DEFINITION:MISTAKES\ncat:gato:0\ndog:perro:0\nbad\xff:x:0\nsun:sol:0\n"
            + b"\xff\xfe:bad:0\n" * 5000
        )
        cc = CardCollection()
        report = import_file(cc, path)
        assert report.complete
        assert report.imported == 3
        assert state(cc) == [("cat", "gato", 0), ("dog", "perro", 0), ("sun", "sol", 0)]
        assert len(report.malformed) == 5001
        assert report.malformed[0].line_number == 4
        assert "UTF-8" in report.malformed[0].reason

    def test_read_error_keeps_partial_import(self, tmp_path, monkeypatch):
        path = tmp_path / "cards.txt"
        path.write_text("TERM:DEFINITION:MISTAKES\ncat:gato:0\ndog:perro:0\nsun:sol:0\n", encoding="utf-8")
        real_open = Path.open

        def failing_open(self, *args, **kwargs):
            f = real_open(self, *args, **kwargs)

            def lines():
                for number, line in enumerate(f, start=1):
                    if number == 4:
                        raise OSError(5, "Input/output error")
                    yield line

            class Handle:
                def __enter__(self_inner):
                    return lines()

                def __exit__(self_inner, *exc):
                    f.close()
                    return False

            return Handle()

        monkeypatch.setattr(Path, "open", failing_open)
        cc = CardCollection()
        report = import_file(cc, path)
        assert not report.complete
        assert report.imported == 2
        assert state(cc) == [("cat", "gato", 0), ("dog", "perro", 0)]
        assert isinstance(report.error, FileUnavailableError)
