"""
Default collaborators used when the embedding application supplies none.

They keep the CLI usable on its own: notifications go to the log, data
files are accepted when non-empty, cfg.txt must be readable text and
nothing is forwarded to the central server.
"""

from __future__ import annotations

from pathlib import Path

from scansync.logging import get_logger
from scansync.transport.base import ContentStatus

logger = get_logger(__name__)


class LogNotifier:
    """Notifier that writes every event to the scansync log."""

    def message(self, text: str) -> None:
        logger.info(text)

    def scanner_not_connected(self, serial: str) -> None:
        logger.warning(f"Could not connect to scanner {serial}")

    def scanner_running(self, serial: str) -> None:
        logger.debug(f"Scanner {serial} transferring")

    def download_finished(self, serial: str, path: Path, speed_kbps: float) -> None:
        logger.info(f"{serial}: {path.name} done @ {speed_kbps:.1f} kB/s")

    def scanner_sleeping(self, serial: str) -> None:
        logger.info(f"Scanner {serial} going to sleep")


class NonEmptyFileValidator:
    """Accepts any data file that has content."""

    def validate(self, path: Path) -> ContentStatus:
        try:
            size = path.stat().st_size
        except OSError:
            return ContentStatus.CORRUPT
        return ContentStatus.OK if size > 0 else ContentStatus.CORRUPT


class KeyValueConfigParser:
    """
    Sanity parser for cfg.txt.

    Keeps ``KEY=VALUE`` and ``KEY VALUE`` lines, ignoring ``%``/``#``
    comments. The file is good when at least one setting was found.
    """

    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def parse(self, path: Path) -> bool:
        try:
            text = path.read_text(encoding="latin-1")
        except OSError as e:
            logger.warning(f"Cannot read {path}: {e}")
            return False

        values: dict[str, str] = {}
        for raw in text.splitlines():
            line = raw.split("%", 1)[0].split("#", 1)[0].strip()
            if not line:
                continue
            if "=" in line:
                key, _, value = line.partition("=")
            else:
                key, _, value = line.partition(" ")
            values[key.strip().upper()] = value.strip()

        self.values = values
        return bool(values)


class NullUploader:
    """Uploader that only logs; for stations without a central server."""

    def upload(self, path: Path, site_index: int, delete_after: bool = False) -> None:
        logger.info(f"Not forwarding {path} for site {site_index}: no uploader configured")


__all__ = ["KeyValueConfigParser", "LogNotifier", "NonEmptyFileValidator", "NullUploader"]
