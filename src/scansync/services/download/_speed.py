"""
Transfer speed estimation.

Speed is kept in kilobytes per second on the SessionContext so it survives
between polls of the same instrument.
"""

from __future__ import annotations

import time
from typing import Callable

from scansync.logging import get_logger
from scansync.models.session import SessionContext

logger = get_logger(__name__)

DEFAULT_DATA_SPEED = 4.0  # kB/s, conservative floor for a slow radio link
MIN_ELAPSED = 0.001  # seconds


class SpeedEstimator:
    """
    Measures achieved throughput of single downloads.

    Example:
        >>> speed = SpeedEstimator(session)
        >>> ok = speed.timed_download(1024, lambda: transport.download_file(name, path))
        >>> speed.current
        0.5
    """

    def __init__(
        self,
        session: SessionContext,
        clock: Callable[[], float] = time.perf_counter,
        min_elapsed: float = MIN_ELAPSED,
        default_speed: float = DEFAULT_DATA_SPEED,
    ) -> None:
        self._session = session
        self._clock = clock
        self._min_elapsed = min_elapsed
        self._default_speed = default_speed

    @property
    def current(self) -> float:
        """Last measured speed, or the default when none is usable."""
        speed = self._session.data_speed
        if speed <= 0:
            return self._default_speed
        return speed

    def record(self, size_bytes: int, elapsed: float) -> float:
        """Store the speed of a finished download and return it."""
        elapsed = max(elapsed, self._min_elapsed)
        speed = size_bytes / (elapsed * 1024.0)
        if speed <= 0:
            speed = self._default_speed
        self._session.data_speed = speed
        return speed

    def timed_download(self, size_bytes: int, download: Callable[[], bool]) -> bool:
        """Run a download, recording its speed only when it succeeds."""
        start = self._clock()
        ok = download()
        if not ok:
            return False
        speed = self.record(size_bytes, self._clock() - start)
        logger.debug(f"{self._session.tag} {size_bytes} bytes @ {speed:.1f} kB/s")
        return True

    def expected_duration(self, size_bytes: int) -> float:
        """Seconds a download of this size should take at the current speed."""
        return size_bytes / (self.current * 1024.0)
