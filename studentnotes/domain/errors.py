"""Error taxonomy shared by the stores and the boundary adapter."""


class StateError(Exception):
    """Base class for every failure raised by a store."""

    code = "Unknown"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(StateError):
    """Raised when an entry id does not exist."""

    code = "NotFound"


class InvalidArgumentError(StateError):
    """Raised when a caller passes a value the store cannot accept."""

    code = "InvalidArgument"


class SerializationError(StateError):
    """Raised when a payload cannot be encoded or decoded."""

    code = "SerializationFailure"


class StorageError(StateError):
    """Raised when the backing medium fails."""

    code = "StorageFault"


class ProgrammerFailure(StateError):
    code = "ProgrammerFailure"
