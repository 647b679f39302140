"""
Configuration snapshot sync.

Downloads the instrument's cfg.txt with the admin login, hands it to the
parser and, every seventh day of the month, archives a per-instrument copy
and forwards it to the central server.
"""

from __future__ import annotations

import shutil
from datetime import date
from pathlib import Path
from typing import Callable

from pydantic import BaseModel

from scansync.config import ScanSyncSettings, get_settings
from scansync.exceptions import ConfigParseError, TransportError
from scansync.logging import get_logger
from scansync.models.session import SessionContext
from scansync.services.download._config import REMOTE_CFG_FILE
from scansync.transport.base import ConfigParser, Notifier, Transport, Uploader

logger = get_logger(__name__)


class ConfigSyncResult(BaseModel):
    """What one config sync achieved."""

    downloaded: bool = False
    parsed: bool = False
    archived: bool = False
    forwarded: bool = False
    local_path: Path | None = None
    archive_path: Path | None = None
    site_index: int | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.downloaded and self.parsed


class ConfigSync:
    """Keeps a local copy of the instrument configuration."""

    def __init__(
        self,
        session: SessionContext,
        transport: Transport,
        parser: ConfigParser,
        uploader: Uploader,
        notifier: Notifier,
        settings: ScanSyncSettings | None = None,
        today: Callable[[], date] = date.today,
        site_index_for: Callable[[str], int | None] | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._session = session
        self._transport = transport
        self._parser = parser
        self._uploader = uploader
        self._notifier = notifier
        self._today = today
        self._archive_day_divisor = settings.archive_day_divisor
        self._site_index_for = site_index_for or settings.site_map.get

    def download(self) -> ConfigSyncResult:
        """
        Fetch and parse cfg.txt; archive and forward it on archive days.

        Failures are reported in the result, never raised.
        """
        session = self._session
        result = ConfigSyncResult(local_path=session.cfg_path)

        if not self._transport.connect(
            session.host,
            session.admin_user or session.user,
            session.admin_password or "",
            session.timeout,
        ):
            result.error = TransportError("admin login", session.host).message
            logger.warning(f"{session.tag} {result.error}")
            return result

        try:
            result.downloaded = self._transport.download_file(REMOTE_CFG_FILE, session.cfg_path)
        finally:
            self._transport.disconnect()

        if not result.downloaded:
            result.error = TransportError("download", session.host, REMOTE_CFG_FILE).message
            logger.warning(f"{session.tag} {result.error}")
            return result

        self._notifier.message(f"Downloaded {REMOTE_CFG_FILE} from {session.serial}")

        if not self._parser.parse(session.cfg_path):
            result.error = ConfigParseError(session.cfg_path).message
            logger.warning(f"{session.tag} {result.error}")
            return result
        result.parsed = True

        if self.archive_due():
            self._archive(result)
        return result

    def archive_due(self, day: date | None = None) -> bool:
        """True on days of the month divisible by the archive divisor."""
        day = day or self._today()
        return day.day % self._archive_day_divisor == 0

    def _archive(self, result: ConfigSyncResult) -> None:
        session = self._session
        try:
            shutil.copyfile(session.cfg_path, session.cfg_archive_path)
        except OSError as e:
            logger.warning(f"Could not archive {session.cfg_path}: {e}")
            return
        result.archived = True
        result.archive_path = session.cfg_archive_path

        site_index = self._site_index_for(session.serial)
        if site_index is None:
            logger.debug(f"No site mapped for {session.serial}, not forwarding")
            return

        result.site_index = site_index
        self._uploader.upload(session.cfg_archive_path, site_index, delete_after=True)
        result.forwarded = True
