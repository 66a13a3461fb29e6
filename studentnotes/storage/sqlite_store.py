"""SQLite-based storage for note entries with an FTS5 search index."""

import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Union
import logging
from contextlib import contextmanager

from studentnotes.domain.models import Entry
from studentnotes.domain.errors import StateError, NotFoundError, StorageError
from studentnotes.ingestion.preprocessor import TextPreprocessor
from studentnotes.storage.base import Stater, now, check_int64, check_text

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

SCHEMA = """
    CREATE TABLE IF NOT EXISTS entry (
        id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
        text TEXT NOT NULL,
        color INTEGER NOT NULL,
        created INTEGER NOT NULL,
        modified INTEGER NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_entry_created ON entry(created);

    CREATE VIRTUAL TABLE IF NOT EXISTS entry_index USING fts5(text, tokenize=porter);
    CREATE VIRTUAL TABLE IF NOT EXISTS entry_words USING fts5(text, tokenize=unicode61);

    DROP TRIGGER IF EXISTS after_entry_insert;
    CREATE TRIGGER after_entry_insert AFTER INSERT ON entry BEGIN
        INSERT INTO entry_index (rowid, text) VALUES (new.id, new.text);
        INSERT INTO entry_words (rowid, text) VALUES (new.id, new.text);
    END;

    DROP TRIGGER IF EXISTS after_entry_update;
    CREATE TRIGGER after_entry_update AFTER UPDATE OF text ON entry BEGIN
        UPDATE entry_index SET text = new.text WHERE rowid = old.id;
        UPDATE entry_words SET text = new.text WHERE rowid = old.id;
    END;

    DROP TRIGGER IF EXISTS after_entry_delete;
    CREATE TRIGGER after_entry_delete AFTER DELETE ON entry BEGIN
        DELETE FROM entry_index WHERE rowid = old.id;
        DELETE FROM entry_words WHERE rowid = old.id;
    END;

    INSERT INTO entry_words (rowid, text)
        SELECT id, text FROM entry WHERE id NOT IN (SELECT rowid FROM entry_words);
"""


class SQLiteStore(Stater):
    """SQLite storage for note entries.

    A single connection is shared by all callers and guarded by a re-entrant
    lock, which also keeps ``:memory:`` databases alive for the lifetime of
    the store.

    Search consults two FTS5 indexes: ``entry_words`` (unicode61) for plain
    word prefixes and ``entry_index`` (porter) for stemmed prefixes, so
    "eggs" also finds "egg".
    """

    kind = "production"

    def __init__(self, db_path: Union[str, Path] = MEMORY_DB):
        self.db_path = str(db_path)
        self.preprocessor = TextPreprocessor()
        self._lock = threading.RLock()
        self._conn: Optional[sqlite3.Connection] = None

        try:
            if self.db_path != MEMORY_DB:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"failed to open database {self.db_path}: {e}") from e
        self._conn.row_factory = sqlite3.Row
        try:
            self._init_db()
        except StorageError:
            self.close()
            raise

    def _init_db(self):
        """Initialize the database schema."""
        with self._get_connection() as conn:
            conn.executescript(SCHEMA)
        logger.debug(f"Opened entry database at {self.db_path}")

    @contextmanager
    def _get_connection(self):
        """Get the database connection inside a transaction."""
        with self._lock:
            if self._conn is None:
                raise StorageError(f"database {self.db_path} is closed")
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                raise StorageError(f"database operation failed: {e}") from e
            except StateError:
                self._conn.rollback()
                raise

    @property
    def location(self) -> str:
        return self.db_path

    def current(self) -> List[Entry]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM entry ORDER BY created DESC, id DESC"
            ).fetchall()
        logger.debug(f"Loaded {len(rows)} entries")
        return [self._row_to_entry(row) for row in rows]

    def entry_create(self, text: Optional[str], color: int) -> Entry:
        text = check_text(text)
        color = check_int64(color, "color")
        stamp = now()

        with self._get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO entry (text, color, created, modified) VALUES (?, ?, ?, ?)",
                (text, color, stamp, stamp)
            )
            entry = Entry(id=cursor.lastrowid, text=text, color=color, created=stamp, modified=stamp)

        logger.info(f"Created entry {entry.id}")
        return entry

    def entry_update(self, entry_id: int, text: Optional[str], color: int) -> Entry:
        entry_id = check_int64(entry_id, "id")
        text = check_text(text)
        color = check_int64(color, "color")

        with self._get_connection() as conn:
            cursor = conn.execute(
                "UPDATE entry SET text = ?, color = ?, modified = ? WHERE id = ?",
                (text, color, now(), entry_id)
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"entry {entry_id} does not exist")
            entry = self._fetch(conn, entry_id)

        logger.info(f"Updated entry {entry_id}")
        return entry

    def entry_delete(self, entry_id: int) -> Entry:
        entry_id = check_int64(entry_id, "id")

        with self._get_connection() as conn:
            entry = self._fetch(conn, entry_id)
            conn.execute("DELETE FROM entry WHERE id = ?", (entry_id,))

        logger.info(f"Deleted entry {entry_id}")
        return entry

    def entry_search(self, query: Optional[str]) -> List[Entry]:
        query = check_text(query)
        if not query.strip():
            return self.current()

        tokens = self.preprocessor.tokenize(query)
        if not tokens:
            return []

        # Each token must hit either index: a plain prefix in entry_words or a
        # stemmed prefix in entry_index. Tokens are quoted so user input never
        # reaches the FTS5 query syntax.
        clause = (
            "(id IN (SELECT rowid FROM entry_words WHERE entry_words MATCH ?)"
            " OR id IN (SELECT rowid FROM entry_index WHERE entry_index MATCH ?))"
        )
        params = []
        for token in tokens:
            params.extend([f'"{token}"*', f'"{token}"*'])
        where = " AND ".join([clause] * len(tokens))

        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM entry WHERE {where} ORDER BY created DESC, id DESC",
                params
            ).fetchall()

        logger.debug(f"Search {query!r} matched {len(rows)} entries")
        return [self._row_to_entry(row) for row in rows]

    def get(self, entry_id: int) -> Entry:
        entry_id = check_int64(entry_id, "id")
        with self._get_connection() as conn:
            return self._fetch(conn, entry_id)

    def count(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM entry").fetchone()[0]

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.debug(f"Closed entry database at {self.db_path}")

    def _fetch(self, conn: sqlite3.Connection, entry_id: int) -> Entry:
        row = conn.execute("SELECT * FROM entry WHERE id = ?", (entry_id,)).fetchone()
        if row is None:
            raise NotFoundError(f"entry {entry_id} does not exist")
        return self._row_to_entry(row)

    def _row_to_entry(self, row: sqlite3.Row) -> Entry:
        """Convert a database row to an Entry."""
        return Entry(
            id=row['id'],
            text=row['text'],
            color=row['color'],
            created=row['created'],
            modified=row['modified']
        )
