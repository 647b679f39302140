"""
Collaborator interfaces consumed by the download engine.

The engine never talks to the network, the UI or the archive server
directly; it receives objects satisfying these protocols.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """
    Blocking file-transfer session with one outstanding request at a time.

    Every operation reports failure through its return value.
    """

    @property
    def banner(self) -> str:
        """Server text received during the last login."""
        ...

    @property
    def is_connected(self) -> bool: ...

    def connect(self, host: str, user: str, password: str, timeout: float) -> bool: ...

    def disconnect(self) -> None: ...

    def enter_folder(self, name: str) -> bool: ...

    def list_directory(self) -> str | bytes: ...

    def download_file(self, remote_name: str, local_path: Path) -> bool: ...

    def upload_file(self, local_path: Path, remote_name: str) -> bool: ...

    def delete_remote_file(self, name: str) -> bool: ...

    def find_file(self, name: str) -> bool: ...

    def delete_folder(self, name: str) -> bool: ...


class ContentStatus(str, Enum):
    OK = "ok"
    CORRUPT = "corrupt"


@runtime_checkable
class ContentValidator(Protocol):
    """Checks the binary contents of a downloaded data file."""

    def validate(self, path: Path) -> ContentStatus: ...


@runtime_checkable
class ConfigParser(Protocol):
    """Reads the instrument configuration file."""

    def parse(self, path: Path) -> bool: ...


@runtime_checkable
class Notifier(Protocol):
    """Fire-and-forget status sink (UI, log, message bus)."""

    def message(self, text: str) -> None: ...

    def scanner_not_connected(self, serial: str) -> None: ...

    def scanner_running(self, serial: str) -> None: ...

    def download_finished(self, serial: str, path: Path, speed_kbps: float) -> None: ...

    def scanner_sleeping(self, serial: str) -> None: ...


@runtime_checkable
class Uploader(Protocol):
    """One-shot forwarder to the central archive server."""

    def upload(self, path: Path, site_index: int, delete_after: bool = False) -> None: ...


__all__ = [
    "ConfigParser",
    "ContentStatus",
    "ContentValidator",
    "Notifier",
    "Transport",
    "Uploader",
]
