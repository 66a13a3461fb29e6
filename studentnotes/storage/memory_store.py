"""In-memory entry storage, shared per namespace within a process."""

import threading
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional
import logging

from studentnotes.domain.models import Entry
from studentnotes.domain.errors import NotFoundError
from studentnotes.ingestion.preprocessor import TextPreprocessor
from studentnotes.storage.base import Stater, now, check_int64, check_text, sort_entries

logger = logging.getLogger(__name__)


@dataclass
class _Collection:
    entries: Dict[int, Entry] = field(default_factory=dict)
    next_id: int = 1
    lock: threading.RLock = field(default_factory=threading.RLock)


_collections: Dict[str, _Collection] = {}
_collections_lock = threading.Lock()


def _collection_for(namespace: str) -> _Collection:
    with _collections_lock:
        if namespace not in _collections:
            _collections[namespace] = _Collection()
        return _collections[namespace]


def drop_namespace(namespace: str) -> None:
    """Forget a namespace and every entry stored under it."""
    with _collections_lock:
        _collections.pop(namespace, None)


class MemoryStore(Stater):
    """Volatile store backed by a dict of entries.

    Stores created with the same namespace share one collection. Ids are
    handed out from a counter and never reused. Search matches each query
    word as a case-insensitive prefix of a word in the text, without
    stemming. Words are runs of letters and digits; underscores and
    punctuation separate them.
    """

    kind = "memory"

    def __init__(self, namespace: str = "default"):
        self.namespace = namespace
        self.preprocessor = TextPreprocessor()
        self._collection = _collection_for(namespace)

    @property
    def location(self) -> str:
        return f"memory:{self.namespace}"

    def current(self) -> List[Entry]:
        with self._collection.lock:
            entries = [replace(e) for e in self._collection.entries.values()]
        return sort_entries(entries)

    def entry_create(self, text: Optional[str], color: int) -> Entry:
        text = check_text(text)
        color = check_int64(color, "color")
        stamp = now()

        with self._collection.lock:
            entry_id = self._collection.next_id
            self._collection.next_id += 1
            entry = Entry(id=entry_id, text=text, color=color, created=stamp, modified=stamp)
            self._collection.entries[entry_id] = entry

        logger.info(f"Created entry {entry_id} in namespace {self.namespace}")
        return replace(entry)

    def entry_update(self, entry_id: int, text: Optional[str], color: int) -> Entry:
        entry_id = check_int64(entry_id, "id")
        text = check_text(text)
        color = check_int64(color, "color")

        with self._collection.lock:
            entry = self._lookup(entry_id)
            entry.text = text
            entry.color = color
            entry.modified = now()
            updated = replace(entry)

        logger.info(f"Updated entry {entry_id} in namespace {self.namespace}")
        return updated

    def entry_delete(self, entry_id: int) -> Entry:
        entry_id = check_int64(entry_id, "id")

        with self._collection.lock:
            entry = self._lookup(entry_id)
            del self._collection.entries[entry_id]

        logger.info(f"Deleted entry {entry_id} from namespace {self.namespace}")
        return entry

    def entry_search(self, query: Optional[str]) -> List[Entry]:
        query = check_text(query)
        if not query.strip():
            return self.current()

        tokens = self.preprocessor.tokenize(query)
        if not tokens:
            return []

        results = [entry for entry in self.current() if self._matches(entry, tokens)]
        logger.debug(f"Search {query!r} matched {len(results)} entries")
        return results

    def get(self, entry_id: int) -> Entry:
        entry_id = check_int64(entry_id, "id")
        with self._collection.lock:
            return replace(self._lookup(entry_id))

    def count(self) -> int:
        with self._collection.lock:
            return len(self._collection.entries)

    def _lookup(self, entry_id: int) -> Entry:
        entry = self._collection.entries.get(entry_id)
        if entry is None:
            raise NotFoundError(f"entry {entry_id} does not exist")
        return entry

    def _matches(self, entry: Entry, tokens: List[str]) -> bool:
        words = self.preprocessor.tokenize(entry.text)
        return all(any(word.startswith(token) for word in words) for token in tokens)
