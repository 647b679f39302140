"""
Client facade wiring the engine for one instrument.
"""

from __future__ import annotations

import time
from datetime import date
from typing import Callable

from scansync.collaborators import KeyValueConfigParser, LogNotifier, NonEmptyFileValidator, NullUploader
from scansync.config import ScanSyncSettings, get_settings
from scansync.models.inventory import BoxVersion
from scansync.models.session import SessionContext
from scansync.services.cfgsync import ConfigSync, ConfigSyncResult
from scansync.services.command import CommandChannel
from scansync.services.download import (
    DownloadScheduler,
    PollResult,
    SpeedEstimator,
    TransferVerifier,
)
from scansync.transport.base import ConfigParser, ContentValidator, Notifier, Transport, Uploader
from scansync.transport.ftp import FtpTransport


class ScannerClient:
    """
    Everything needed to service one instrument.

    Collaborators default to the FTP transport and the log-only
    implementations in scansync.collaborators.

    Example:
        >>> session = SessionContext.for_instrument("output", "I2J5678", "10.0.0.5")
        >>> client = ScannerClient(session)
        >>> result = client.poll_once()
        >>> print(result.summary())
    """

    def __init__(
        self,
        session: SessionContext,
        transport: Transport | None = None,
        validator: ContentValidator | None = None,
        parser: ConfigParser | None = None,
        uploader: Uploader | None = None,
        notifier: Notifier | None = None,
        settings: ScanSyncSettings | None = None,
        on_box_detected: Callable[[str, BoxVersion], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        speed_clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
        today: Callable[[], date] = date.today,
    ) -> None:
        settings = settings or get_settings()
        self._session = session
        self._transport = transport or FtpTransport(port=session.port)
        notifier = notifier or LogNotifier()

        self.speed = SpeedEstimator(
            session,
            clock=speed_clock,
            min_elapsed=settings.min_elapsed,
            default_speed=settings.default_data_speed,
        )
        self.verifier = TransferVerifier(
            session,
            self._transport,
            validator or NonEmptyFileValidator(),
            self.speed,
            notifier,
            corrupt_retries=settings.corrupt_retries,
            strict_remote_delete=settings.strict_remote_delete,
        )
        self.scheduler = DownloadScheduler(
            session,
            self._transport,
            self.verifier,
            self.speed,
            notifier,
            settings=settings,
            clock=clock,
            sleep=sleep,
            on_box_detected=on_box_detected,
        )
        self.config_sync = ConfigSync(
            session,
            self._transport,
            parser or KeyValueConfigParser(),
            uploader or NullUploader(),
            notifier,
            settings=settings,
            today=today,
        )
        self.command = CommandChannel(
            session,
            self._transport,
            notifier,
            settings=settings,
            scheduler=self.scheduler,
            config_sync=self.config_sync,
            sleep=sleep,
        )

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def serial(self) -> str:
        return self._session.serial

    def poll_once(self) -> PollResult:
        return self.scheduler.poll_once()

    def sleep(self) -> bool:
        return self.command.sleep()

    def wake(self) -> bool:
        return self.command.wake()

    def reboot(self) -> bool:
        return self.command.reboot()

    def sync_config(self) -> ConfigSyncResult:
        return self.config_sync.download()

    def __repr__(self) -> str:
        return f"ScannerClient({self._session.serial}@{self._session.host})"
