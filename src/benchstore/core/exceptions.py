"""Errors raised by the entry store.

A missing file is never an error: adapters return an empty value for it.
"""


class StoreError(Exception):
    """Base class for all entry store failures."""


class DecodeError(StoreError):
    """Persisted content is not valid JSON or not the expected shape.

    Attributes:
        source: Path or label of the document that failed to decode.
        reason: Human-readable description of the problem.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"decoding {source}: {reason}")
        self.source = source
        self.reason = reason


class StorageIOError(StoreError):
    """An underlying read, write, mkdir or replace failed.

    Attributes:
        path: The path the operation was acting on.
        operation: One of "read", "write", "mkdir", "replace".
    """

    def __init__(self, path: str, operation: str, reason: str = "") -> None:
        message = f"{operation} {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
        self.operation = operation


class InvalidEntryError(StoreError, ValueError):
    """An entry cannot be persisted (e.g., it has no commit SHA)."""


class EncodeError(StoreError, ValueError):
    """A document cannot be serialized as strict JSON (e.g., NaN values)."""
