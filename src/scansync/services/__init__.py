"""
Services for scansync.
"""

from scansync.services.cfgsync import ConfigSync, ConfigSyncResult
from scansync.services.command import CommandChannel
from scansync.services.download import DownloadScheduler, SpeedEstimator, TransferVerifier

__all__ = [
    "CommandChannel",
    "ConfigSync",
    "ConfigSyncResult",
    "DownloadScheduler",
    "SpeedEstimator",
    "TransferVerifier",
]
