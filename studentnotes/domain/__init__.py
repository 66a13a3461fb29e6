"""Domain models for the note state library."""

from .models import Entry, Snapshot, Tag
from .errors import (
    StateError,
    NotFoundError,
    InvalidArgumentError,
    SerializationError,
    StorageError,
    ProgrammerFailure,
)

__all__ = [
    "Entry",
    "Snapshot",
    "Tag",
    "StateError",
    "NotFoundError",
    "InvalidArgumentError",
    "SerializationError",
    "StorageError",
    "ProgrammerFailure",
]
