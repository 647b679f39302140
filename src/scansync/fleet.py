"""
Polling several instruments side by side.

Each instrument gets its own ScannerClient (session, backlog, transport);
nothing mutable is shared between the worker threads.
"""

from __future__ import annotations

import concurrent.futures
import json
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel, TypeAdapter

from scansync.client import ScannerClient
from scansync.config import ScanSyncSettings, get_settings
from scansync.logging import get_logger
from scansync.models.inventory import BoxVersion
from scansync.models.session import SessionContext
from scansync.services.download import PollResult, PollStatus

logger = get_logger(__name__)


class InstrumentConfig(BaseModel):
    """One entry of a fleet file."""

    serial: str
    host: str
    port: int = 21
    user: str = "anonymous"
    password: str = ""
    admin_user: str | None = None
    admin_password: str | None = None
    box: BoxVersion = BoxVersion.V1
    node_index: int = 0
    timeout: float | None = None

    def to_session(self, settings: ScanSyncSettings) -> SessionContext:
        return SessionContext.for_instrument(
            settings.output_directory,
            self.serial,
            self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            admin_user=self.admin_user,
            admin_password=self.admin_password,
            box=self.box,
            node_index=self.node_index,
            timeout=self.timeout or settings.ftp_timeout,
        )


_FLEET_ADAPTER = TypeAdapter(list[InstrumentConfig])


def load_fleet(path: Path | str) -> list[InstrumentConfig]:
    """Read a JSON list of instrument definitions."""
    data = json.loads(Path(path).read_text())
    return _FLEET_ADAPTER.validate_python(data)


def build_clients(
    instruments: Sequence[InstrumentConfig],
    settings: ScanSyncSettings | None = None,
) -> list[ScannerClient]:
    settings = settings or get_settings()
    return [ScannerClient(cfg.to_session(settings), settings=settings) for cfg in instruments]


def _poll(client: ScannerClient) -> PollResult:
    try:
        return client.poll_once()
    except Exception as e:
        logger.exception(f"Polling {client.serial} failed")
        return PollResult(serial=client.serial, status=PollStatus.FAILED, message=str(e))


def poll_round_robin(
    clients: Sequence[ScannerClient],
    max_workers: int | None = None,
) -> list[PollResult]:
    """
    Poll every instrument once, in parallel.

    Each poll is bounded by the per-instrument time budget, so one slow
    instrument only delays its own result.

    Returns:
        Results in the order of ``clients``.
    """
    if not clients:
        return []
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers or len(clients)) as pool:
        futures = [pool.submit(_poll, client) for client in clients]
        return [future.result() for future in futures]


__all__ = ["InstrumentConfig", "build_clients", "load_fleet", "poll_round_robin"]
