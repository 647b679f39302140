"""
Pytest configuration and fixtures for scansync tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from scansync.config import ScanSyncSettings, reset_settings
from scansync.models.inventory import BoxVersion
from scansync.models.session import SessionContext
from scansync.transport.base import ContentStatus


class FakeTransport:
    """In-memory instrument FTP server."""

    def __init__(self, banner: str = "220 Welcome to the scanner FTP server") -> None:
        self._banner = banner
        # Remote files keyed by "name" or "FOLDER/name"
        self.files: dict[str, bytes] = {}
        # LIST output lines per folder ("" is the root)
        self.lines: dict[str, list[str]] = {"": []}
        self.raw_listing: dict[str, str | bytes] = {}
        self.connected = False
        self.cwd = ""
        self.fail_connect = False
        # 1-based login attempts to refuse, for links that drop mid-poll
        self.refuse_logins: set[int] = set()
        self.fail_download: set[str] = set()
        self.fail_upload = 0
        self.fail_delete = False
        self.logins: list[tuple[str, str]] = []
        self.downloads: list[str] = []
        self.uploads: list[tuple[str, bytes]] = []
        self.deleted: list[str] = []
        self.removed_folders: list[str] = []

    # -- test set-up ---------------------------------------------------------

    @staticmethod
    def line(name: str, size: int = 1024, directory: bool = False) -> str:
        mode = "drwxr-xr-x" if directory else "-rw-r--r--"
        return f"{mode}   1 root     root     {size:>8} Mar 12 10:41 {name}"

    def add_file(
        self,
        name: str,
        size: int = 1024,
        folder: str = "",
        data: bytes | None = None,
    ) -> None:
        """Put a file on the server; ``size`` is what the listing reports."""
        self.lines.setdefault(folder, []).append(self.line(name, size))
        self.files[f"{folder}/{name}" if folder else name] = (
            data if data is not None else b"x" * size
        )

    def add_folder(self, name: str) -> None:
        self.lines[""].append(self.line(name, 0, directory=True))
        self.lines.setdefault(name, [])

    def set_banner(self, banner: str) -> None:
        self._banner = banner

    # -- Transport -----------------------------------------------------------

    @property
    def banner(self) -> str:
        return self._banner

    @property
    def is_connected(self) -> bool:
        return self.connected

    def _key(self, name: str) -> str:
        return f"{self.cwd}/{name}" if self.cwd else name

    def connect(self, host: str, user: str, password: str, timeout: float) -> bool:
        self.logins.append((user, password))
        if self.fail_connect or len(self.logins) in self.refuse_logins:
            return False
        self.connected = True
        self.cwd = ""
        return True

    def disconnect(self) -> None:
        self.connected = False
        self.cwd = ""

    def enter_folder(self, name: str) -> bool:
        if name not in self.lines:
            return False
        self.cwd = name
        return True

    def list_directory(self) -> str | bytes:
        if self.cwd in self.raw_listing:
            return self.raw_listing[self.cwd]
        return "".join(f"{line}\r\n" for line in self.lines.get(self.cwd, []))

    def download_file(self, remote_name: str, local_path: Path) -> bool:
        key = self._key(remote_name)
        self.downloads.append(key)
        if key in self.fail_download or key not in self.files:
            return False
        Path(local_path).write_bytes(self.files[key])
        return True

    def upload_file(self, local_path: Path, remote_name: str) -> bool:
        if self.fail_upload > 0:
            self.fail_upload -= 1
            self.uploads.append((remote_name, b""))
            return False
        data = Path(local_path).read_bytes()
        self.uploads.append((remote_name, data))
        self.files[self._key(remote_name)] = data
        return True

    def delete_remote_file(self, name: str) -> bool:
        key = self._key(name)
        self.deleted.append(key)
        if self.fail_delete:
            return False
        self.files.pop(key, None)
        return True

    def find_file(self, name: str) -> bool:
        return self._key(name) in self.files

    def delete_folder(self, name: str) -> bool:
        self.removed_folders.append(name)
        return True


class StepClock:
    """Clock that advances by a fixed step on every reading."""

    def __init__(self, step: float = 1.0, start: float = 0.0) -> None:
        self.step = step
        self.now = start

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture(autouse=True)
def _clean_settings():
    """Never leak the settings singleton between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _clean_logging():
    """Undo setup_logging so caplog sees scansync records."""
    yield
    root = logging.getLogger("scansync")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def settings(tmp_path: Path) -> ScanSyncSettings:
    """Settings without real-time pauses."""
    return ScanSyncSettings(
        output_directory=tmp_path / "output",
        listing_settle_delay=0.0,
        login_settle_delay=0.0,
        command_retry_delay=0.0,
    )


@pytest.fixture
def session(tmp_path: Path) -> SessionContext:
    """V1 instrument with separate admin login."""
    storage = tmp_path / "Temp" / "I2J5678"
    storage.mkdir(parents=True)
    return SessionContext(
        node_index=2,
        box=BoxVersion.V1,
        host="10.0.0.5",
        user="novac",
        password="novac",
        admin_user="admin",
        admin_password="secret",
        timeout=5.0,
        storage_dir=storage,
        serial="I2J5678",
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def step_clock():
    """Factory for StepClock instances."""
    return StepClock


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def validator() -> MagicMock:
    """Validator that accepts every file."""
    mock = MagicMock()
    mock.validate.return_value = ContentStatus.OK
    return mock
