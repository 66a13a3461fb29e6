"""Boundary adapter, wire schema and codec."""

from .api import LoggerStater, new, version
from .codec import SnapshotCodec
from .handles import HandleRegistry
from .schema import SnapshotPayload, EntryPayload

__all__ = [
    "LoggerStater",
    "new",
    "version",
    "SnapshotCodec",
    "HandleRegistry",
    "SnapshotPayload",
    "EntryPayload",
]
