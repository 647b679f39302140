"""
Data models for scansync.
"""

from scansync.models.command import REBOOT, SLEEP, WAKE, CommandRequest
from scansync.models.inventory import BoxVersion, Disk, FileEntry, FolderEntry, Inventory
from scansync.models.session import SessionContext

__all__ = [
    "BoxVersion",
    "CommandRequest",
    "Disk",
    "FileEntry",
    "FolderEntry",
    "Inventory",
    "REBOOT",
    "SLEEP",
    "SessionContext",
    "WAKE",
]
