"""
Command channel to the instrument.

The instrument polls for a ``command.txt`` in its FTP root; uploading one
changes its power state. Every operation here logs in and out by itself.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

from scansync.config import ScanSyncSettings, get_settings
from scansync.logging import get_logger
from scansync.models.command import REBOOT, SLEEP, WAKE, CommandRequest
from scansync.models.session import SessionContext
from scansync.services.download._config import REMOTE_COMMAND_FILE
from scansync.services.download._transfer import probe_and_delete
from scansync.transport.base import Notifier, Transport

if TYPE_CHECKING:
    from scansync.services.cfgsync import ConfigSync
    from scansync.services.download import DownloadScheduler

logger = get_logger(__name__)


class CommandChannel:
    """
    Sleep, wake and reboot an instrument through uploaded command files.

    Example:
        >>> channel = CommandChannel(session, transport, notifier)
        >>> channel.wake()
        True
    """

    def __init__(
        self,
        session: SessionContext,
        transport: Transport,
        notifier: Notifier,
        settings: ScanSyncSettings | None = None,
        scheduler: DownloadScheduler | None = None,
        config_sync: ConfigSync | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        settings = settings or get_settings()
        self._session = session
        self._transport = transport
        self._notifier = notifier
        self._scheduler = scheduler
        self._config_sync = config_sync
        self._sleep = sleep
        self._retries = settings.command_retries
        self._retry_delay = settings.command_retry_delay
        self._stale_interval = settings.stale_download_interval

    def send_command(self, command: CommandRequest | str) -> bool:
        """
        Upload a command file. The caller decides whether to retry.

        Returns:
            True when the file reached the instrument.
        """
        session = self._session
        text = command.text if isinstance(command, CommandRequest) else command
        try:
            with open(session.command_path, "w", newline="") as f:
                f.write(text)
        except OSError as e:
            logger.warning(f"Could not write {session.command_path}: {e}")
            return False

        if not self._transport.connect(
            session.host, session.user, session.password, session.timeout
        ):
            return False
        try:
            if not self._transport.upload_file(session.command_path, REMOTE_COMMAND_FILE):
                self._notifier.message(
                    f"Can not upload command file to the remote scanner ({session.host})"
                )
                return False
            return True
        finally:
            self._transport.disconnect()

    def delete_previous_command(self) -> bool:
        """Remove a leftover command.txt from the instrument; failure is harmless."""
        session = self._session
        if not self._transport.connect(
            session.host, session.user, session.password, session.timeout
        ):
            return False
        try:
            deleted = probe_and_delete(self._transport, session.box, REMOTE_COMMAND_FILE)
        finally:
            self._transport.disconnect()
        if not deleted:
            logger.debug(f"{session.tag} No previous {REMOTE_COMMAND_FILE} removed")
        return deleted

    def sleep(self) -> bool:
        """Power the instrument down, then fetch what it left behind."""
        try:
            self.delete_previous_command()
            sent = self.send_command(SLEEP)
            self._notifier.scanner_sleeping(self._session.serial)
            if self._scheduler is not None:
                self._scheduler.download_stale(self._stale_interval)
            return sent
        finally:
            self._transport.disconnect()

    def wake(self) -> bool:
        """
        Power the instrument up, retrying the upload a bounded number of times.

        On success the configuration is re-synced, which also proves the
        link works.
        """
        try:
            self.delete_previous_command()
            sent = False
            for attempt in range(self._retries):
                if attempt:
                    self._sleep(self._retry_delay)
                sent = self.send_command(WAKE)
                if sent:
                    break

            if not sent:
                self._notifier.message("Failed to wake instrument up")
                return False

            if self._config_sync is not None:
                self._config_sync.download()
            return True
        finally:
            self._transport.disconnect()

    def reboot(self) -> bool:
        try:
            self.delete_previous_command()
            return self.send_command(REBOOT)
        finally:
            self._transport.disconnect()
