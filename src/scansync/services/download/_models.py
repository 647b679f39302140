"""
Models for the download engine.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from scansync.exceptions import (
    CorruptContentError,
    RemoteDeleteError,
    SizeMismatchError,
    TransportError,
)


class TransferOutcome(str, Enum):
    OK = "ok"
    DOWNLOAD_ERROR = "download_error"
    SIZE_MISMATCH = "size_mismatch"
    CORRUPT = "corrupt"
    DELETE_FAILED = "delete_failed"


class TransferResult(BaseModel):
    """Result of fetching and verifying one remote file."""

    model_config = {"arbitrary_types_allowed": True}

    remote_name: str
    outcome: TransferOutcome
    local_path: Path | None = None
    expected_size: int = 0
    local_size: int | None = None
    attempts: int = 0
    speed_kbps: float = 0.0
    remote_deleted: bool = False
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.outcome is TransferOutcome.OK

    def raise_for_outcome(self) -> None:
        """Raise the error matching a failed outcome; no-op on success."""
        path = self.local_path or self.remote_name
        if self.outcome is TransferOutcome.DOWNLOAD_ERROR:
            raise TransportError("download", detail=self.error or self.remote_name)
        if self.outcome is TransferOutcome.SIZE_MISMATCH:
            raise SizeMismatchError(path, self.expected_size, self.local_size or 0)
        if self.outcome is TransferOutcome.CORRUPT:
            raise CorruptContentError(path, self.attempts)
        if self.outcome is TransferOutcome.DELETE_FAILED:
            raise RemoteDeleteError(self.remote_name)

    def __repr__(self) -> str:
        if self.success:
            return (
                f"TransferResult(ok, {self.remote_name}, "
                f"{self.expected_size}B, {self.speed_kbps:.1f}kB/s)"
            )
        return f"TransferResult({self.outcome.value}: {self.error})"


class PollStatus(str, Enum):
    NOTHING_TO_DO = "nothing_to_do"
    COMPLETED = "completed"
    BUDGET_EXHAUSTED = "budget_exhausted"
    NOT_CONNECTED = "not_connected"
    FAILED = "failed"


class PollResult(BaseModel):
    """Summary of one poll_once() call for one instrument."""

    serial: str
    status: PollStatus
    downloaded: list[str] = []
    failed: list[str] = []
    folders_removed: list[str] = []
    folders_abandoned: list[str] = []
    elapsed: float = 0.0
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status in (
            PollStatus.NOTHING_TO_DO,
            PollStatus.COMPLETED,
            PollStatus.BUDGET_EXHAUSTED,
        )

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [f"{self.serial}: {self.status.value} in {self.elapsed:.1f}s"]
        if self.downloaded:
            lines.append(f"  Downloaded: {len(self.downloaded)}")
        if self.failed:
            lines.append(f"  Failed: {', '.join(self.failed)}")
        if self.folders_removed:
            lines.append(f"  Folders removed: {', '.join(self.folders_removed)}")
        if self.folders_abandoned:
            lines.append(f"  Folders abandoned: {', '.join(self.folders_abandoned)}")
        if self.message:
            lines.append(f"  {self.message}")
        return "\n".join(lines)
