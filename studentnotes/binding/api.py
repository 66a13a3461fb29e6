"""Boundary adapter exposing the entry store to foreign callers.

Every stater method returns encoded bytes on success. Failures are logged
and then collapsed according to ``binding.error_mode``: ``"null"`` returns
``None``, ``"payload"`` returns an encoded error snapshot.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from studentnotes import __version__
from studentnotes.domain.models import Snapshot
from studentnotes.domain.errors import StateError
from studentnotes.application.config import Config
from studentnotes.application.engine import StateEngine
from studentnotes.binding.codec import SnapshotCodec
from studentnotes.binding.handles import HandleRegistry, registry

logger = logging.getLogger(__name__)

MEMORY_KINDS = ("memory", "development")


class LoggerStater:
    """Handle-backed view of a store.

    Holds only an integer reference into the handle registry; the engine
    and its store stay owned by the registry.
    """

    def __init__(
        self,
        ref: int,
        codec: Optional[SnapshotCodec] = None,
        error_mode: str = "null",
        handles: HandleRegistry = registry
    ):
        self._ref = ref
        self.codec = codec or SnapshotCodec()
        self.error_mode = error_mode
        self._handles = handles

    @property
    def ref(self) -> int:
        return self._ref

    def current(self) -> Optional[bytes]:
        """Return every entry, newest first."""
        return self._call("current", lambda engine: Snapshot(entries=engine.current()))

    def entry_create(self, text: Optional[str], color: int) -> Optional[bytes]:
        """Create an entry; the payload carries it in ``entry`` plus the full listing."""
        def run(engine: StateEngine) -> Snapshot:
            entry = engine.create(text, color)
            return Snapshot(entries=engine.current(), entry=entry)
        return self._call("entry_create", run)

    def entry_delete(self, entry_id: int) -> Optional[bytes]:
        def run(engine: StateEngine) -> Snapshot:
            entry = engine.delete(entry_id)
            return Snapshot(entries=engine.current(), entry=entry)
        return self._call("entry_delete", run)

    def entry_search(self, query: Optional[str]) -> Optional[bytes]:
        return self._call("entry_search", lambda engine: Snapshot(entries=engine.search(query)))

    def entry_update(self, entry_id: int, text: Optional[str], color: int) -> Optional[bytes]:
        def run(engine: StateEngine) -> Snapshot:
            entry = engine.update(entry_id, text, color)
            return Snapshot(entries=engine.current(), entry=entry)
        return self._call("entry_update", run)

    def release(self) -> None:
        """Drop the handle and close the store behind it."""
        try:
            engine = self._handles.release(self._ref)
        except StateError as e:
            logger.warning(f"release failed: {e}")
            return
        engine.close()

    def _call(self, name: str, operation: Callable[[StateEngine], Snapshot]) -> Optional[bytes]:
        try:
            engine = self._handles.get(self._ref)
            return self.codec.encode(operation(engine))
        except StateError as e:
            logger.warning(f"{name} failed on handle {self._ref}: {e}")
            if self.error_mode == "payload":
                return self.codec.encode_error(e)
            return None

    def __repr__(self) -> str:
        return f"LoggerStater(ref={self._ref})"


def new(kind: Optional[str] = None, name: Optional[str] = None, config: Optional[Config] = None) -> Optional[LoggerStater]:
    """Return a stater for the given storage kind, or None when it cannot be built.

    ``kind`` selects the medium (``production``/``sqlite`` or
    ``memory``/``development``). ``name`` is the database path for SQLite
    and the namespace for memory stores. Empty values fall back to the
    configuration.
    """
    config = (config or Config()).model_copy(deep=True)
    if kind:
        config.storage.kind = kind
    if name:
        if config.storage.kind.lower() in MEMORY_KINDS:
            config.storage.memory_namespace = name
        else:
            config.storage.db_path = Path(name)

    engine = StateEngine(config)
    try:
        engine.initialize()
    except StateError as e:
        logger.warning(f"Could not create stater (kind={config.storage.kind!r}): {e}")
        return None

    ref = registry.register(engine)
    codec = SnapshotCodec(indent=config.binding.indent)
    return LoggerStater(ref, codec, config.binding.error_mode)


def version() -> str:
    """Return the current version of the library."""
    return __version__
