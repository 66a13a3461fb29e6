"""Wire schema for payloads handed across the binding boundary."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = 1


class TagPayload(BaseModel):
    """A parsed hashtag."""

    id: str = Field(..., description="Tag text without the leading #")
    namespace: str = ""
    key: str = ""
    value: str = ""


class EntryPayload(BaseModel):
    """A single entry as seen by the caller."""

    id: int
    text: str = Field(..., description="Display text with tags removed")
    raw: str = Field(..., description="Text exactly as stored")
    color: int
    tags: List[TagPayload] = Field(default_factory=list)
    created: int
    modified: int


class ErrorPayload(BaseModel):
    code: str
    message: str


class SnapshotPayload(BaseModel):
    """Top-level payload returned by every stater method."""

    schema_version: int = Field(SCHEMA_VERSION, alias="schema")
    entries: List[EntryPayload] = Field(default_factory=list)
    entry: Optional[EntryPayload] = None
    error: Optional[ErrorPayload] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def ok(self) -> bool:
        return self.error is None
