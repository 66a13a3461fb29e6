"""Encoding of store results into the versioned JSON wire format."""

import json
from typing import List, Optional, Union

from pydantic import ValidationError

from studentnotes.domain.models import Entry, Snapshot
from studentnotes.domain.errors import StateError, SerializationError
from studentnotes.ingestion.preprocessor import TextPreprocessor
from studentnotes.binding.schema import (
    SCHEMA_VERSION,
    EntryPayload,
    ErrorPayload,
    SnapshotPayload,
    TagPayload,
)


class SnapshotCodec:
    """Turns snapshots and errors into bytes and back.

    Entries leave the store with their raw text; the codec derives the tags
    and the display text on the way out.
    """

    def __init__(self, indent: Optional[int] = None):
        self.indent = indent
        self.preprocessor = TextPreprocessor()

    def to_payload(self, entry: Entry) -> EntryPayload:
        return EntryPayload(
            id=entry.id,
            text=self.preprocessor.clean_text(entry.text),
            raw=entry.text,
            color=entry.color,
            tags=[
                TagPayload(id=t.id, namespace=t.namespace, key=t.key, value=t.value)
                for t in self.preprocessor.extract_tags(entry.text)
            ],
            created=entry.created,
            modified=entry.modified
        )

    def encode(self, snapshot: Snapshot) -> bytes:
        """Encode a successful result."""
        payload = SnapshotPayload(
            entries=[self.to_payload(e) for e in snapshot.entries],
            entry=self.to_payload(snapshot.entry) if snapshot.entry else None
        )
        return self._dump(payload)

    def encode_entries(self, entries: List[Entry], entry: Optional[Entry] = None) -> bytes:
        return self.encode(Snapshot(entries=entries, entry=entry))

    def encode_error(self, error: Union[StateError, Exception]) -> bytes:
        """Encode a failure as an error payload with no entries."""
        if isinstance(error, StateError):
            detail = ErrorPayload(code=error.code, message=error.message)
        else:
            detail = ErrorPayload(code="Unknown", message=str(error))
        return self._dump(SnapshotPayload(error=detail))

    def decode(self, data: Union[bytes, str]) -> SnapshotPayload:
        """Parse a payload produced by this codec."""
        try:
            raw = json.loads(data)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"payload is not valid JSON: {e}") from e

        if not isinstance(raw, dict):
            raise SerializationError("payload must be a JSON object")
        version = raw.get("schema")
        if version != SCHEMA_VERSION:
            raise SerializationError(f"unsupported schema version: {version!r}")

        try:
            return SnapshotPayload.model_validate(raw)
        except ValidationError as e:
            raise SerializationError(f"payload does not match schema: {e}") from e

    def _dump(self, payload: SnapshotPayload) -> bytes:
        try:
            return payload.model_dump_json(by_alias=True, indent=self.indent).encode("utf-8")
        except (ValueError, TypeError) as e:
            raise SerializationError(f"failed to encode payload: {e}") from e
