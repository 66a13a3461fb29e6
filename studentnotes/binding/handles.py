"""Opaque handle table for objects handed to foreign callers."""

import threading
import logging
from typing import Any, Dict

from studentnotes.domain.errors import NotFoundError, ProgrammerFailure

logger = logging.getLogger(__name__)


class HandleRegistry:
    """Maps integer handles to live objects.

    Callers outside the process boundary only ever see the integer. Handles
    start at 1 and are never reused.
    """

    def __init__(self):
        self._objects: Dict[int, Any] = {}
        self._next = 1
        self._lock = threading.Lock()

    def register(self, obj: Any) -> int:
        if obj is None:
            raise ProgrammerFailure("cannot register a handle for None")
        with self._lock:
            ref = self._next
            self._next += 1
            self._objects[ref] = obj
        logger.debug(f"Registered handle {ref} for {type(obj).__name__}")
        return ref

    def get(self, ref: int) -> Any:
        with self._lock:
            try:
                return self._objects[ref]
            except KeyError:
                raise NotFoundError(f"handle {ref} is not registered") from None

    def release(self, ref: int) -> Any:
        """Drop a handle and return the object it pointed to."""
        with self._lock:
            try:
                obj = self._objects.pop(ref)
            except KeyError:
                raise NotFoundError(f"handle {ref} is not registered") from None
        logger.debug(f"Released handle {ref}")
        return obj

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def __contains__(self, ref: int) -> bool:
        with self._lock:
            return ref in self._objects


registry = HandleRegistry()
