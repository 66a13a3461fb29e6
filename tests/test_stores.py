"""Tests shared by the SQLite and in-memory entry stores."""

import sqlite3
import threading
import tempfile
import uuid
from pathlib import Path

import pytest

from studentnotes.domain.errors import NotFoundError, InvalidArgumentError, StorageError
from studentnotes.storage import SQLiteStore, MemoryStore
from studentnotes.storage.memory_store import drop_namespace


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(params=["sqlite", "sqlite-file", "memory"])
def store(request, temp_dir):
    """Every store implementation, freshly emptied."""
    if request.param == "sqlite":
        store = SQLiteStore()
    elif request.param == "sqlite-file":
        store = SQLiteStore(temp_dir / "nested" / "notes.db")
    else:
        namespace = f"test-{uuid.uuid4()}"
        store = MemoryStore(namespace)
        request.addfinalizer(lambda: drop_namespace(namespace))
    yield store
    store.close()


@pytest.fixture
def notes(store):
    """A store holding three entries."""
    store.entry_create("Buy milk", 2)
    store.entry_create("Call mom #family", 1)
    store.entry_create("Milkshake recipe", 3)
    return store


def test_empty_store(store):
    assert store.current() == []
    assert store.count() == 0


def test_create_assigns_ids(store):
    """Test that ids are assigned in order and returned."""
    first = store.entry_create("Buy milk", 2)
    second = store.entry_create("Read chapter 4", 5)

    assert first.id == 1
    assert second.id == 2
    assert first.text == "Buy milk"
    assert first.color == 2
    assert first.created > 0
    assert first.created == first.modified


def test_current_is_newest_first(notes):
    assert [e.id for e in notes.current()] == [3, 2, 1]
    assert notes.count() == 3


def test_update_replaces_text_and_color(notes):
    """Test that update keeps the id and created stamp."""
    before = notes.get(1)
    updated = notes.entry_update(1, "Buy milk and eggs", 4)

    assert updated.id == 1
    assert updated.text == "Buy milk and eggs"
    assert updated.color == 4
    assert updated.created == before.created
    assert updated.modified >= before.modified

    stored = {e.id: e for e in notes.current()}[1]
    assert stored.text == "Buy milk and eggs"
    assert stored.color == 4


def test_delete_removes_entry(notes):
    removed = notes.entry_delete(2)

    assert removed.id == 2
    assert removed.text == "Call mom #family"
    assert [e.id for e in notes.current()] == [3, 1]


def test_ids_are_not_reused(notes):
    """Test that deleting the newest entry does not free its id."""
    notes.entry_delete(3)
    entry = notes.entry_create("Another", 0)

    assert entry.id == 4


def test_missing_id_raises_not_found(notes):
    with pytest.raises(NotFoundError):
        notes.entry_update(99, "nothing", 0)
    with pytest.raises(NotFoundError):
        notes.entry_delete(99)
    with pytest.raises(NotFoundError):
        notes.get(99)

    assert notes.count() == 3


def test_search_matches_word_prefixes(notes):
    """Test case-insensitive prefix search, newest first."""
    results = notes.entry_search("MILK")

    assert [e.id for e in results] == [3, 1]


def test_search_requires_every_word(notes):
    results = notes.entry_search("buy milk")

    assert [e.id for e in results] == [1]


def test_search_finds_hashtag_words(notes):
    results = notes.entry_search("family")

    assert [e.id for e in results] == [2]


def test_search_empty_query_returns_current(notes):
    assert [e.id for e in notes.entry_search("")] == [3, 2, 1]
    assert [e.id for e in notes.entry_search("   ")] == [3, 2, 1]
    assert [e.id for e in notes.entry_search(None)] == [3, 2, 1]


def test_search_without_words_or_matches(notes):
    assert notes.entry_search("!!!") == []
    assert notes.entry_search("zebra") == []


def test_search_input_is_not_query_syntax(notes):
    """Test that FTS operators in a query are treated as words."""
    assert notes.entry_search('milk OR "zebra') == []
    assert [e.id for e in notes.entry_search("call NOT")] == []


def test_search_follows_updates_and_deletes(notes):
    notes.entry_update(1, "Buy bread", 2)
    assert [e.id for e in notes.entry_search("milk")] == [3]

    notes.entry_delete(3)
    assert notes.entry_search("milk") == []
    assert [e.id for e in notes.entry_search("bread")] == [1]


def test_search_matches_inside_longer_words(store):
    """Test that query words match plain prefixes in every store."""
    store.entry_create("Went running today", 0)
    store.entry_create("Ability test", 0)
    store.entry_create("rename foo_bar helper", 0)
    store.entry_create("Café on the corner", 0)

    assert [e.id for e in store.entry_search("runn")] == [1]
    assert [e.id for e in store.entry_search("abilit")] == [2]
    assert [e.id for e in store.entry_search("bar")] == [3]
    assert [e.id for e in store.entry_search("foo")] == [3]
    assert [e.id for e in store.entry_search("cafe")] == [4]
    assert [e.id for e in store.entry_search("CAFÉ")] == [4]


def test_none_text_is_empty(store):
    entry = store.entry_create(None, 0)

    assert entry.text == ""


def test_text_must_encode_as_utf8(store):
    """Test that a lone surrogate is rejected and leaves the store usable."""
    store.entry_create("kept", 0)

    with pytest.raises(InvalidArgumentError):
        store.entry_create("bad \ud800 text", 0)
    with pytest.raises(InvalidArgumentError):
        store.entry_update(1, "bad \udfff text", 0)
    with pytest.raises(InvalidArgumentError):
        store.entry_search("\ud800")

    assert [(e.id, e.text) for e in store.current()] == [(1, "kept")]
    assert store.entry_search("kept")[0].id == 1


@pytest.mark.parametrize("color", ["red", 2.5, True, 2 ** 63, -(2 ** 63) - 1])
def test_invalid_color(store, color):
    with pytest.raises(InvalidArgumentError):
        store.entry_create("text", color)


def test_invalid_id(store):
    with pytest.raises(InvalidArgumentError):
        store.entry_delete("1")


def test_int64_bounds_accepted(store):
    low = store.entry_create("low", -(2 ** 63))
    high = store.entry_create("high", 2 ** 63 - 1)

    assert store.get(low.id).color == -(2 ** 63)
    assert store.get(high.id).color == 2 ** 63 - 1


def test_concurrent_creates(store):
    """Test that parallel writers never share an id."""
    def worker():
        for i in range(20):
            store.entry_create(f"note {i}", i)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [e.id for e in store.current()]
    assert len(ids) == 100
    assert len(set(ids)) == 100


def test_returned_entries_are_copies():
    """Test that mutating a returned entry does not touch the memory store."""
    namespace = f"test-{uuid.uuid4()}"
    store = MemoryStore(namespace)
    try:
        entry = store.entry_create("original", 1)
        entry.text = "changed"

        assert store.get(entry.id).text == "original"
    finally:
        drop_namespace(namespace)


def test_memory_namespaces_are_shared():
    """Test that stores with the same namespace see one collection."""
    shared = f"test-{uuid.uuid4()}"
    other = f"test-{uuid.uuid4()}"
    try:
        first = MemoryStore(shared)
        second = MemoryStore(shared)
        isolated = MemoryStore(other)

        first.entry_create("shared note", 0)

        assert [e.text for e in second.current()] == ["shared note"]
        assert isolated.current() == []
    finally:
        drop_namespace(shared)
        drop_namespace(other)


def test_sqlite_persists_across_reopen(temp_dir):
    db_path = temp_dir / "notes.db"

    store = SQLiteStore(db_path)
    store.entry_create("Persisted", 7)
    store.entry_create("Gone", 1)
    store.entry_delete(2)
    store.close()

    reopened = SQLiteStore(db_path)
    try:
        entries = reopened.current()
        assert [(e.id, e.text, e.color) for e in entries] == [(1, "Persisted", 7)]
        assert reopened.entry_create("Next", 0).id == 3
        assert [e.id for e in reopened.entry_search("persist")] == [1]
    finally:
        reopened.close()


def test_sqlite_closed_store_raises(temp_dir):
    store = SQLiteStore(temp_dir / "notes.db")
    store.close()

    with pytest.raises(StorageError):
        store.current()

def test_sqlite_search_matches_stemmed_forms():
    """Test that the SQLite store also matches other forms of a word."""
    store = SQLiteStore()
    namespace = f"test-{uuid.uuid4()}"
    memory = MemoryStore(namespace)
    try:
        for s in (store, memory):
            s.entry_create("Buy an egg", 0)
            s.entry_create("Studies for the exam", 0)

        assert [e.id for e in store.entry_search("eggs")] == [1]
        assert [e.id for e in store.entry_search("study")] == [2]
        assert memory.entry_search("eggs") == []
        assert memory.entry_search("study") == []
    finally:
        store.close()
        drop_namespace(namespace)


def test_sqlite_rejects_non_database_file(temp_dir, monkeypatch):
    """Test that a corrupt file raises StorageError and closes the connection."""
    db_path = temp_dir / "notes.db"
    db_path.write_bytes(b"this is not an sqlite database\n" * 10)

    opened = []
    connect = sqlite3.connect

    def tracking_connect(*args, **kwargs):
        conn = connect(*args, **kwargs)
        opened.append(conn)
        return conn
    monkeypatch.setattr(sqlite3, "connect", tracking_connect)

    with pytest.raises(StorageError):
        SQLiteStore(db_path)

    assert len(opened) == 1
    with pytest.raises(sqlite3.ProgrammingError):
        opened[0].execute("SELECT 1")



if __name__ == "__main__":
    pytest.main([__file__])
