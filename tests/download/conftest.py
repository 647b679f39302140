"""
Pytest fixtures for download engine tests.
"""

import pytest

from scansync.services.download import (
    DownloadScheduler,
    SpeedEstimator,
    TransferVerifier,
)


@pytest.fixture
def speed(session):
    """Speed estimator on the real clock."""
    return SpeedEstimator(session)


@pytest.fixture
def verifier(session, transport, validator, speed, notifier):
    """Verifier with lenient remote delete."""
    return TransferVerifier(session, transport, validator, speed, notifier)


@pytest.fixture
def make_scheduler(session, transport, verifier, speed, notifier, settings):
    """Factory so tests can swap the clock or settings."""

    def make(**kwargs):
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("sleep", lambda seconds: None)
        return DownloadScheduler(session, transport, verifier, speed, notifier, **kwargs)

    return make


@pytest.fixture
def scheduler(make_scheduler):
    return make_scheduler()
