"""Abstract interface shared by every entry store."""

from abc import ABC, abstractmethod
from typing import List, Optional
import time

from studentnotes.domain.models import Entry
from studentnotes.domain.errors import InvalidArgumentError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class Stater(ABC):
    """Abstract base class for entry storage."""

    kind = "abstract"

    @abstractmethod
    def current(self) -> List[Entry]:
        """Return every entry, newest first."""
        pass

    @abstractmethod
    def entry_create(self, text: Optional[str], color: int) -> Entry:
        """Store a new entry and return it with its assigned id."""
        pass

    @abstractmethod
    def entry_update(self, entry_id: int, text: Optional[str], color: int) -> Entry:
        """Replace the text and color of an existing entry."""
        pass

    @abstractmethod
    def entry_delete(self, entry_id: int) -> Entry:
        """Remove an entry and return what was removed."""
        pass

    @abstractmethod
    def entry_search(self, query: Optional[str]) -> List[Entry]:
        """Return the entries whose text matches every word of the query.

        A query word matches when it is a case-insensitive prefix of a word in
        the text, with Latin diacritics ignored. Stores may match more loosely
        (the SQLite store also matches stemmed forms) but never less.
        """
        pass

    @abstractmethod
    def get(self, entry_id: int) -> Entry:
        """Get a single entry by ID."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    def close(self) -> None:
        """Release any resources held by the store."""
        pass

    @property
    def location(self) -> str:
        return self.kind


def now() -> int:
    """Current time as unix seconds."""
    return int(time.time())


def check_int64(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {type(value).__name__}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidArgumentError(f"{name} {value} does not fit in 64 bits")
    return value


def check_text(text) -> str:
    # Nullable strings from the boundary arrive as None.
    if text is None:
        return ""
    if not isinstance(text, str):
        raise InvalidArgumentError(f"text must be a string, got {type(text).__name__}")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidArgumentError(f"text is not valid UTF-8: {e.reason} at position {e.start}") from e
    return text


def sort_entries(entries: List[Entry]) -> List[Entry]:
    """Order entries newest first, ties broken by the higher id."""
    return sorted(entries, key=lambda e: (e.created, e.id), reverse=True)
