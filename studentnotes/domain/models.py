"""Domain models for note entries and their derived tags."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Tag:
    """A hashtag parsed out of an entry's text."""

    id: str
    namespace: str = ""
    key: str = ""
    value: str = ""


@dataclass
class Entry:
    """Represents a single note entry."""

    id: int
    text: str
    color: int
    created: int = 0
    modified: int = 0


@dataclass
class Snapshot:
    """The result of a store operation as it crosses the boundary."""

    entries: List[Entry] = field(default_factory=list)
    entry: Optional[Entry] = None
