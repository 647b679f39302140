"""
Download and verification of single remote files.

One call fetches a file, checks its size against the listing, validates
its contents (re-downloading once on corruption) and removes the remote
copy when the file is done with.
"""

from __future__ import annotations

from pathlib import Path

from scansync.logging import get_logger
from scansync.models.inventory import BoxVersion
from scansync.models.session import SessionContext
from scansync.services.download._models import TransferOutcome, TransferResult
from scansync.services.download._speed import SpeedEstimator
from scansync.transport.base import ContentStatus, ContentValidator, Notifier, Transport

logger = get_logger(__name__)


class TransferVerifier:
    """Fetch-and-verify for one instrument session."""

    def __init__(
        self,
        session: SessionContext,
        transport: Transport,
        validator: ContentValidator,
        speed: SpeedEstimator,
        notifier: Notifier,
        corrupt_retries: int = 1,
        strict_remote_delete: bool = False,
    ) -> None:
        self._session = session
        self._transport = transport
        self._validator = validator
        self._speed = speed
        self._notifier = notifier
        self._corrupt_retries = corrupt_retries
        self._strict_remote_delete = strict_remote_delete

    def fetch_and_verify(
        self,
        remote_name: str,
        expected_size: int,
        local_dir: Path | None = None,
    ) -> TransferResult:
        """
        Download one file and decide whether it is good.

        Args:
            remote_name: Filename on the instrument, with extension.
            expected_size: Size in bytes reported by the listing.
            local_dir: Target directory; defaults to the session storage.

        Returns:
            TransferResult; the outcome tells download errors, size
            mismatches and corrupt files apart.
        """
        local_path = Path(local_dir or self._session.storage_dir) / remote_name
        result = TransferResult(
            remote_name=remote_name,
            outcome=TransferOutcome.OK,
            local_path=local_path,
            expected_size=expected_size,
        )

        result.attempts = 1
        if not self._download(remote_name, local_path, expected_size):
            return self._download_failed(result)

        # Partial files stay on disk for diagnosis; the remote copy is kept
        result.local_size = _local_size(local_path)
        if result.local_size != expected_size:
            result.outcome = TransferOutcome.SIZE_MISMATCH
            result.error = (
                f"{local_path} is {result.local_size} bytes, expected {expected_size}"
            )
            logger.warning(f"{self._session.tag} {result.error}")
            return result

        status = self._validator.validate(local_path)
        while status is ContentStatus.CORRUPT and result.attempts <= self._corrupt_retries:
            self._notifier.message(
                f"Found an error with the file {local_path}. Will try to download again"
            )
            result.attempts += 1
            if not self._download(remote_name, local_path, expected_size):
                return self._download_failed(result)
            status = self._validator.validate(local_path)

        if status is ContentStatus.CORRUPT:
            self._notifier.message(f"The file {remote_name} is corrupted")
            result.outcome = TransferOutcome.CORRUPT
            result.error = f"{remote_name} failed validation {result.attempts} time(s)"
            result.remote_deleted = self._delete_logged(remote_name)
            return result

        self._notifier.message(f"{remote_name} has been downloaded")
        result.remote_deleted = self._delete_logged(remote_name)
        result.speed_kbps = self._speed.current
        if not result.remote_deleted and self._strict_remote_delete:
            result.outcome = TransferOutcome.DELETE_FAILED
            result.error = f"Remote file {remote_name} could not be removed"
            return result

        self._notifier.download_finished(self._session.serial, local_path, result.speed_kbps)
        return result

    def delete_remote(self, remote_name: str) -> bool:
        """
        Remove a file on the instrument, logging in first if needed.

        V1 boxes only accept the delete after the file was found.
        """
        session = self._session
        if not self._transport.is_connected:
            if not self._transport.connect(
                session.host, session.user, session.password, session.timeout
            ):
                self._notifier.scanner_not_connected(session.serial)
                return False

        return probe_and_delete(self._transport, session.box, remote_name)

    def _delete_logged(self, remote_name: str) -> bool:
        deleted = self.delete_remote(remote_name)
        if not deleted:
            self._notifier.message(
                f"{self._session.tag} Remote file {remote_name} could not be removed"
            )
        return deleted

    def _download(self, remote_name: str, local_path: Path, size_bytes: int) -> bool:
        try:
            if local_path.exists():
                local_path.unlink()
        except OSError as e:
            logger.warning(f"{self._session.tag} Cannot replace local file {local_path}: {e}")
            return False

        logger.info(f"{self._session.tag} Begin to download {remote_name} from {self._session.host}")
        self._notifier.scanner_running(self._session.serial)

        ok = self._speed.timed_download(
            size_bytes, lambda: self._transport.download_file(remote_name, local_path)
        )
        if ok:
            logger.info(
                f"Finished downloading file {local_path} from {self._session.serial} "
                f"@ {self._speed.current:.1f} kB/s"
            )
        return ok

    def _download_failed(self, result: TransferResult) -> TransferResult:
        result.outcome = TransferOutcome.DOWNLOAD_ERROR
        result.error = (
            f"Can not download {result.remote_name} from remote scanner ({self._session.host})"
        )
        self._notifier.message(result.error)
        return result


def _local_size(path: Path) -> int | None:
    try:
        return path.stat().st_size
    except OSError:
        return None


def probe_and_delete(transport: Transport, box: BoxVersion, remote_name: str) -> bool:
    """Delete on an open session, probing first where the box requires it."""
    if box.probe_before_delete and not transport.find_file(remote_name):
        return False
    return transport.delete_remote_file(remote_name)
