"""Tests for the JSON card store."""

import json
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from knowcards.core.errors import CardNotFoundError, CardValidationError, StorageError
from knowcards.core.models import CardInput
from knowcards.core.storage import CardStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store(temp_dir):
    """Create a CardStore instance for tests."""
    return CardStore(temp_dir / "data" / "cards.json")


def _make_input(**kwargs) -> CardInput:
    defaults = {
        "term": "Idempotence",
        "category": "Concept",
        "core": "x",
        "boundary": "y",
        "signal": "z",
        "action": "w",
    }
    defaults.update(kwargs)
    return CardInput(**defaults)


class TestInitialization:
    """Tests for data file creation."""

    def test_creates_empty_collection(self, store):
        store.ensure_initialized()
        assert store.data_file.exists()
        assert json.loads(store.data_file.read_text()) == []

    def test_idempotent(self, store):
        store.ensure_initialized()
        store.create(_make_input())
        store.ensure_initialized()
        assert len(store.read_all()) == 1

    def test_read_creates_file(self, store):
        assert store.read_all() == []
        assert store.data_file.exists()


class TestCreate:
    """Tests for CardStore.create."""

    def test_create_and_read(self, store):
        card = store.create(_make_input())
        assert card.id == "idempotence"
        assert store.read_all() == [card]

    def test_persists_pretty_json(self, store):
        store.create(_make_input(term="中文 Term"))
        raw = store.data_file.read_text(encoding="utf-8")
        assert raw.startswith("[\n  {")
        assert "中文-term" in raw
        assert json.loads(raw)[0]["aliases"] == []

    def test_field_order_on_disk(self, store):
        store.create(_make_input())
        keys = list(json.loads(store.data_file.read_text())[0])
        assert keys == ["id", "term", "category", "core", "boundary", "signal", "action", "aliases"]

    def test_duplicate_rejected_and_size_unchanged(self, store):
        store.create(_make_input())
        with pytest.raises(CardValidationError):
            store.create(_make_input(term="IDEMPOTENCE"))
        assert store.count() == 1

    def test_invalid_input_not_written(self, store):
        with pytest.raises(CardValidationError):
            store.create(_make_input(core=""))
        assert store.read_all() == []


class TestGetUpdateDelete:
    """Tests for item-level operations."""

    def test_get(self, store):
        card = store.create(_make_input())
        assert store.get("idempotence") == card

    def test_get_missing(self, store):
        with pytest.raises(CardNotFoundError):
            store.get("nope")

    def test_update_keeps_own_id(self, store):
        store.create(_make_input())
        updated = store.update("idempotence", _make_input(core="new core"))
        assert updated.id == "idempotence"
        assert updated.core == "new core"
        assert store.get("idempotence").core == "new core"

    def test_update_ignores_body_id(self, store):
        store.create(_make_input())
        updated = store.update("idempotence", _make_input(id="renamed"))
        assert updated.id == "idempotence"

    def test_update_missing_performs_no_write(self, store):
        store.create(_make_input())
        before = store.data_file.stat().st_mtime_ns
        contents = store.data_file.read_text()
        with pytest.raises(CardNotFoundError):
            store.update("nope", _make_input())
        assert store.data_file.read_text() == contents
        assert store.data_file.stat().st_mtime_ns == before

    def test_update_replaces_in_place(self, store):
        for term in ("A", "B", "C"):
            store.create(_make_input(term=term))
        store.update("b", _make_input(term="Bee"))
        assert [c.term for c in store.read_all()] == ["A", "Bee", "C"]

    def test_delete_preserves_order(self, store):
        for term in ("A", "B", "C"):
            store.create(_make_input(term=term))
        removed = store.delete("b")
        assert removed.term == "B"
        assert removed.core == "x"
        assert [c.id for c in store.read_all()] == ["a", "c"]

    def test_delete_missing(self, store):
        with pytest.raises(CardNotFoundError):
            store.delete("nope")


class TestStorageFailures:
    """Tests for malformed or unreadable data files."""

    def test_malformed_json(self, store):
        store.ensure_initialized()
        store.data_file.write_text("{not json")
        with pytest.raises(StorageError):
            store.read_all()
        # No self-healing
        with pytest.raises(StorageError):
            store.create(_make_input())
        assert store.data_file.read_text() == "{not json"

    def test_not_an_array(self, store):
        store.ensure_initialized()
        store.data_file.write_text('{"id": "x"}')
        with pytest.raises(StorageError):
            store.read_all()

    def test_write_failure_leaves_file_unchanged(self, store):
        store.create(_make_input())
        contents = store.data_file.read_text()

        with patch.object(Path, "write_text", side_effect=OSError("disk full")):
            with pytest.raises(StorageError, match="disk full"):
                store.create(_make_input(term="Another"))

        assert store.data_file.read_text() == contents
        assert store.count() == 1

    def test_null_and_missing_fields_load(self, store):
        store.ensure_initialized()
        store.data_file.write_text(
            json.dumps([{"id": "a", "term": "A", "aliases": None, "core": None}])
        )
        [card] = store.read_all()
        assert card.aliases == []
        assert card.core == ""
        assert card.category == ""

    def test_data_path_is_directory(self, temp_dir):
        bad = CardStore(temp_dir / "cards.json")
        (temp_dir / "cards.json").mkdir()
        with pytest.raises(StorageError):
            bad.read_all()


class TestConcurrency:
    """Tests for the process-wide lock."""

    def test_concurrent_creates_lose_nothing(self, store):
        store.create(_make_input(term="existing"))
        terms = [f"term {i}" for i in range(40)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            created = list(pool.map(lambda t: store.create(_make_input(term=t)), terms))

        assert len(created) == 40
        ids = [c.id for c in store.read_all()]
        assert len(ids) == 41
        assert len(set(ids)) == 41

    def test_concurrent_duplicates_only_one_wins(self, store):
        def attempt(_):
            try:
                store.create(_make_input())
                return True
            except CardValidationError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(16)))

        assert results.count(True) == 1
        assert store.count() == 1

    def test_two_instances_share_lock(self, temp_dir):
        path = temp_dir / "cards.json"
        first, second = CardStore(path), CardStore(path)

        def create(i):
            target = first if i % 2 else second
            return target.create(_make_input(term=f"t{i}"))

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(create, range(20)))

        assert first.count() == 20
