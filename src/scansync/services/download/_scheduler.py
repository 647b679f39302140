"""
Download scheduling for one instrument.

poll_once() is called by the owner's round-robin loop. Each call spends at
most ``query_period`` seconds on the instrument; the check runs between
files and folders, never in the middle of a transfer.
"""

from __future__ import annotations

import time
from typing import Callable

from scansync.config import ScanSyncSettings, get_settings
from scansync.logging import get_logger
from scansync.models.inventory import BoxVersion, Disk, FileEntry, FolderEntry, Inventory
from scansync.models.session import SessionContext
from scansync.services.download._backlog import Backlog
from scansync.services.download._config import (
    AXIS_BANNER_MARKER,
    LISTING_FOLDER_FAILED,
    LISTING_LOGIN_FAILED,
    RESERVED_BASE_NAMES,
)
from scansync.services.download._listing import parse_listing
from scansync.services.download._models import PollResult, PollStatus
from scansync.services.download._speed import SpeedEstimator
from scansync.services.download._transfer import TransferVerifier
from scansync.transport.base import Notifier, Transport

logger = get_logger(__name__)


def detect_box_version(banner: str) -> BoxVersion | None:
    """Electronics box implied by the login banner, if it names one."""
    if AXIS_BANNER_MARKER in banner:
        return BoxVersion.V2
    return None


def is_reserved(entry: FileEntry) -> bool:
    """Files the instrument is still writing to; skipped at the top level."""
    return entry.base_name.lower() in RESERVED_BASE_NAMES


class DownloadScheduler:
    """
    Backlog-driven download loop for one instrument.

    Example:
        >>> scheduler = DownloadScheduler(session, transport, verifier, speed, notifier)
        >>> result = scheduler.poll_once()
        >>> print(result.summary())
    """

    def __init__(
        self,
        session: SessionContext,
        transport: Transport,
        verifier: TransferVerifier,
        speed: SpeedEstimator,
        notifier: Notifier,
        settings: ScanSyncSettings | None = None,
        backlog: Backlog | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        on_box_detected: Callable[[str, BoxVersion], None] | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._session = session
        self._transport = transport
        self._verifier = verifier
        self._speed = speed
        self._notifier = notifier
        self._backlog = backlog if backlog is not None else Backlog()
        self._clock = clock
        self._sleep = sleep
        self._on_box_detected = on_box_detected
        self._query_period = settings.query_period
        self._listing_settle_delay = settings.listing_settle_delay
        self._login_settle_delay = settings.login_settle_delay

    @property
    def backlog(self) -> Backlog:
        return self._backlog

    # =========================================================================
    # Listing
    # =========================================================================

    def refresh_listing(self, folder: str = "") -> int:
        """
        List the top level or one data folder and refill the backlog.

        A top-level listing replaces files and folders; a folder listing
        replaces only the files.

        Returns:
            Number of data files found, or a negative code when login
            (-1) or entering the folder (-2) failed.
        """
        session = self._session
        if folder:
            self._backlog.clear_files()
        else:
            self._backlog.clear()

        if not self._transport.connect(
            session.host, session.user, session.password, session.timeout
        ):
            logger.warning(f"{session.tag} Login to {session.host} failed")
            return LISTING_LOGIN_FAILED

        try:
            self._detect_box()
            self._sleep(self._login_settle_delay)

            if folder:
                self._notifier.message(f"{session.tag} Getting file-list from folder: {folder}")
                if not self._transport.enter_folder(folder):
                    self._notifier.message(f"{session.tag} Failed to enter folder: {folder}")
                    return LISTING_FOLDER_FAILED
            else:
                self._notifier.message(f"{session.tag} Getting file-list")

            raw = self._transport.list_directory()
        finally:
            self._transport.disconnect()

        self._dump_listing(raw)
        inventory = parse_listing(raw, session.box)
        if folder:
            self._backlog.replace_files(inventory.files)
        else:
            self._backlog.replace(inventory)

        self._notifier.message(
            f"{session.tag} {len(self._backlog.files)} files and "
            f"{len(self._backlog.folders)} folders found on disk"
        )
        return len(self._backlog.files)

    def list_disk(self, disk: Disk = Disk.B) -> Inventory:
        """
        List the data disk (user login) or the admin disk (admin login).

        The inventory replaces the backlog; an unreadable listing empties it.
        """
        session = self._session
        if disk is Disk.B:
            user, password = session.user, session.password
        else:
            user, password = session.admin_user or session.user, session.admin_password or ""

        if not self._transport.connect(session.host, user, password, session.timeout):
            self._notifier.scanner_not_connected(session.serial)
            return Inventory()

        try:
            raw = self._transport.list_directory()
        finally:
            self._transport.disconnect()

        if not raw:
            self._notifier.message(
                "File list was not downloaded. "
                "It may be caused by slow or broken Ethernet connection."
            )
            self._backlog.clear()
            return Inventory()

        self._dump_listing(raw)
        inventory = parse_listing(raw, session.box, disk)
        self._backlog.replace(inventory)
        self._notifier.message(f"File list was downloaded: {inventory.summary()}")
        return inventory

    # =========================================================================
    # Downloading
    # =========================================================================

    def poll_once(self) -> PollResult:
        """
        Work through the backlog, listing the instrument first if it is empty.

        Top-level files go first, then data folders newest first. Each
        folder is listed, drained and removed remotely once empty. A folder
        whose listing fails is abandoned; one whose drain fails stays in the
        backlog for the next call.
        """
        session = self._session
        start = self._clock()
        deadline = start + self._query_period
        result = PollResult(serial=session.serial, status=PollStatus.COMPLETED)

        self._notifier.message(f"{session.tag} Checking for files to download")

        if self._backlog.is_empty:
            if self.refresh_listing() == LISTING_LOGIN_FAILED:
                result.status = PollStatus.NOT_CONNECTED
                result.message = f"Could not log in to {session.host}"
                return self._finish(result, start)

        if self._backlog.is_empty:
            result.status = PollStatus.NOTHING_TO_DO
            result.message = "No more files to download"
            self._notifier.message(f"{session.tag} {result.message}")
            return self._finish(result, start)

        self._sleep(self._listing_settle_delay)
        if self._backlog.files:
            self.drain_files("", deadline, result)
            if result.status is PollStatus.NOT_CONNECTED:
                return self._finish(result, start)
            if self._clock() > deadline:
                result.status = PollStatus.BUDGET_EXHAUSTED
                return self._finish(result, start)

        pending = self._backlog.snapshot_folders()
        while pending:
            folder = pending.pop()
            self._process_folder(folder, deadline, result)
            if result.status is PollStatus.NOT_CONNECTED:
                break
            if self._clock() > deadline:
                result.status = PollStatus.BUDGET_EXHAUSTED
                break

        return self._finish(result, start)

    def drain_files(
        self,
        folder: str = "",
        deadline: float | None = None,
        result: PollResult | None = None,
    ) -> bool:
        """
        Download the file backlog, newest first, in one session.

        Stops at the first failed file and, when a deadline is given, once
        it has passed. The file backlog is cleared afterwards either way,
        including when the login fails; a failed login marks ``result``
        NOT_CONNECTED.

        Returns:
            True when every file in the backlog was handled.
        """
        session = self._session
        try:
            if not self._transport.connect(
                session.host, session.user, session.password, session.timeout
            ):
                self._notifier.scanner_not_connected(session.serial)
                if result is not None:
                    result.status = PollStatus.NOT_CONNECTED
                    result.message = f"Lost connection to {session.host}"
                return False

            if folder and not self._transport.enter_folder(folder):
                self._notifier.message(f"{session.tag} Failed to enter folder: {folder}")
                return False

            while self._backlog.files:
                entry = self._backlog.latest_file()
                remote_name = entry.remote_name(session.box)

                if not folder and is_reserved(entry):
                    self._backlog.pop_file()
                    continue

                self._notifier.message(f"Begin to download {folder}/{remote_name}")
                transfer = self._verifier.fetch_and_verify(remote_name, entry.size_bytes)
                if not transfer.success:
                    logger.warning(f"{session.tag} {transfer.error}")
                    if result is not None:
                        result.failed.append(f"{folder}/{remote_name}" if folder else remote_name)
                    return False

                self._backlog.pop_file()
                if result is not None:
                    result.downloaded.append(f"{folder}/{remote_name}" if folder else remote_name)

                if deadline is not None and self._clock() > deadline:
                    break

            return not self._backlog.files
        finally:
            self._backlog.clear_files()
            self._transport.disconnect()

    def download_stale(self, interval: float) -> int:
        """
        Download backlog files while the instrument sleeps.

        A file is only started when its expected duration still fits in
        ``interval`` seconds counted from the first download.

        Returns:
            Number of files downloaded.
        """
        session = self._session
        if not self._backlog.files:
            return 0

        if not self._transport.connect(
            session.host, session.user, session.password, session.timeout
        ):
            self._notifier.scanner_not_connected(session.serial)
            return 0

        downloaded = 0
        start = self._clock()
        try:
            while self._backlog.files:
                entry = self._backlog.latest_file()
                if is_reserved(entry):
                    self._backlog.pop_file()
                    continue

                estimated = self._speed.expected_duration(entry.size_bytes)
                if self._clock() - start + estimated > interval:
                    logger.info(
                        f"{session.tag} {entry.base_name} needs ~{estimated:.0f}s, "
                        f"not enough time left"
                    )
                    break

                transfer = self._verifier.fetch_and_verify(
                    entry.remote_name(session.box), entry.size_bytes
                )
                if not transfer.success:
                    break
                self._backlog.pop_file()
                downloaded += 1
        finally:
            self._transport.disconnect()
        return downloaded

    # =========================================================================
    # Internals
    # =========================================================================

    def _process_folder(self, folder: FolderEntry, deadline: float, result: PollResult) -> None:
        session = self._session
        if self.refresh_listing(folder.name) < 0:
            self._backlog.discard_folder(folder)
            result.folders_abandoned.append(folder.name)
            return

        self._sleep(self._listing_settle_delay)
        if not self.drain_files(folder.name, deadline, result):
            if result.status is PollStatus.COMPLETED:
                result.status = PollStatus.FAILED
            return

        if self._remove_folder(folder.name):
            self._backlog.discard_folder(folder)
            result.folders_removed.append(folder.name)
        else:
            logger.warning(f"{session.tag} Could not remove folder {folder.name}")

    def _remove_folder(self, name: str) -> bool:
        session = self._session
        if not self._transport.connect(
            session.host, session.user, session.password, session.timeout
        ):
            self._notifier.scanner_not_connected(session.serial)
            return False
        try:
            return self._transport.delete_folder(name)
        finally:
            self._transport.disconnect()

    def _detect_box(self) -> None:
        detected = detect_box_version(self._transport.banner)
        if detected is None:
            return
        if self._session.box is not detected:
            logger.info(f"{self._session.tag} Detected electronics box {detected.value}")
        self._session.box = detected
        if self._on_box_detected is not None:
            self._on_box_detected(self._session.serial, detected)

    def _dump_listing(self, raw: str | bytes) -> None:
        path = self._session.file_list_path
        try:
            if isinstance(raw, bytes):
                path.write_bytes(raw)
            else:
                path.write_text(raw)
        except OSError as e:
            logger.warning(f"Could not write {path}: {e}")

    def _finish(self, result: PollResult, start: float) -> PollResult:
        if result.failed and result.status is PollStatus.COMPLETED:
            result.status = PollStatus.FAILED
        result.elapsed = self._clock() - start
        return result
