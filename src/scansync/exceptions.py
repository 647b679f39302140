"""
Exceptions for scansync.

The engine reports failures as status objects; these types give each
failure category a name and are raised on request
(``TransferResult.raise_for_outcome``) or for local set-up problems.
"""

from __future__ import annotations

from pathlib import Path


class ScanSyncError(Exception):
    """Base error for scansync."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self._original_cause = cause
        # Keep the chain out of tracebacks shown to operators
        self.__suppress_context__ = True

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Transport
# =============================================================================


class TransportError(ScanSyncError):
    """Connect, login, list, download, upload or delete failed."""

    def __init__(
        self,
        operation: str,
        host: str | None = None,
        detail: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.operation = operation
        self.host = host
        message = f"{operation} failed"
        if host:
            message += f" on {host}"
        if detail:
            message += f": {detail}"
        super().__init__(message, cause)


class RemoteDeleteError(TransportError):
    """Remote file could not be removed after download."""

    def __init__(self, name: str, host: str | None = None) -> None:
        self.name = name
        super().__init__("delete", host, f"remote file {name} could not be removed")


# =============================================================================
# Verification
# =============================================================================


class SizeMismatchError(ScanSyncError):
    """Local file size differs from the size reported by the listing."""

    def __init__(self, path: Path | str, expected: int, actual: int) -> None:
        self.path = str(path)
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Size mismatch for {self.path}: expected {expected} bytes, got {actual}"
        )


class CorruptContentError(ScanSyncError):
    """Downloaded file failed content validation on every attempt."""

    def __init__(self, path: Path | str, attempts: int) -> None:
        self.path = str(path)
        self.attempts = attempts
        super().__init__(f"{self.path} is corrupt after {attempts} attempt(s)")


# =============================================================================
# Parsing and storage
# =============================================================================


class ListingParseError(ScanSyncError):
    """A directory-listing line could not be interpreted."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Cannot parse listing line ({reason}): {line!r}")


class ConfigParseError(ScanSyncError):
    """The instrument configuration file could not be parsed."""

    def __init__(self, path: Path | str) -> None:
        self.path = str(path)
        super().__init__(f"Could not parse configuration file {self.path}")


class StorageError(ScanSyncError):
    """Local storage directory could not be created."""

    def __init__(self, path: Path | str, cause: BaseException | None = None) -> None:
        self.path = str(path)
        super().__init__(f"Could not create storage directory {self.path}", cause)


__all__ = [
    "ConfigParseError",
    "CorruptContentError",
    "ListingParseError",
    "RemoteDeleteError",
    "ScanSyncError",
    "SizeMismatchError",
    "StorageError",
    "TransportError",
]
