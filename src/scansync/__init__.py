"""
scansync: download orchestration for remote scanning instruments.

Fetches data files over an unreliable FTP link, verifies them, and drives
the instrument's power state through uploaded command files.

Example:
    >>> from scansync import ScannerClient, SessionContext
    >>> session = SessionContext.for_instrument("output", "I2J5678", "10.0.0.5")
    >>> print(ScannerClient(session).poll_once().summary())
"""

__version__ = "0.3.0"

from scansync.client import ScannerClient
from scansync.config import ScanSyncSettings, configure_settings, get_settings, reset_settings
from scansync.exceptions import (
    ConfigParseError,
    CorruptContentError,
    ListingParseError,
    RemoteDeleteError,
    ScanSyncError,
    SizeMismatchError,
    StorageError,
    TransportError,
)
from scansync.models import (
    BoxVersion,
    CommandRequest,
    Disk,
    FileEntry,
    FolderEntry,
    Inventory,
    SessionContext,
)
from scansync.services.download import PollResult, PollStatus, TransferOutcome, TransferResult

__all__ = [
    "BoxVersion",
    "CommandRequest",
    "ConfigParseError",
    "CorruptContentError",
    "Disk",
    "FileEntry",
    "FolderEntry",
    "Inventory",
    "ListingParseError",
    "PollResult",
    "PollStatus",
    "RemoteDeleteError",
    "ScanSyncError",
    "ScanSyncSettings",
    "ScannerClient",
    "SessionContext",
    "SizeMismatchError",
    "StorageError",
    "TransferOutcome",
    "TransferResult",
    "TransportError",
    "configure_settings",
    "get_settings",
    "reset_settings",
]
