"""Error taxonomy for the git-backed record store."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every failure raised by the record store."""


class RecordNotFoundError(StoreError):
    """Raised when a record's file is absent at HEAD."""

    def __init__(self, database: str, record_id: int | str):
        self.database = database
        self.record_id = record_id
        super().__init__(f"Inexistent record: {database}/{record_id}")


class RecordDecodeError(StoreError):
    """Raised when stored content is not valid JSON."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid JSON in {path}: {reason}")


class BackendError(StoreError):
    """Raised when a git invocation fails or exits non-zero."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"`{' '.join(command)}` failed with status {returncode}{detail}")


class AdapterError(StoreError):
    """Raised when the filesystem adapter cannot complete an operation."""

    def __init__(self, operation: str, path: str, reason: str = ""):
        self.operation = operation
        self.path = path
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot {operation} {path}{detail}")


class FileExistsAdapterError(AdapterError):
    def __init__(self, operation: str, path: str):
        super().__init__(operation, path, "file already exists")


class FileMissingAdapterError(AdapterError):
    def __init__(self, operation: str, path: str):
        super().__init__(operation, path, "file not found")
