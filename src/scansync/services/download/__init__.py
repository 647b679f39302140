"""
Download engine for scansync.

Fetches data files from an instrument over an unreliable link.

Features:
- Listing parser with a fixed token schema per listing format
- LIFO backlog of files and data folders
- Per-instrument time budget so a slow node does not starve the others
- Size check and content validation with one re-download on corruption
- Transfer speed estimation
"""

from scansync.services.download._backlog import Backlog
from scansync.services.download._listing import (
    DEFAULT_SCHEMA,
    ListingSchema,
    parse_listing,
    parse_listing_line,
    split_suffix,
)
from scansync.services.download._models import (
    PollResult,
    PollStatus,
    TransferOutcome,
    TransferResult,
)
from scansync.services.download._scheduler import DownloadScheduler, detect_box_version
from scansync.services.download._speed import SpeedEstimator
from scansync.services.download._transfer import TransferVerifier

__all__ = [
    "Backlog",
    "DEFAULT_SCHEMA",
    "DownloadScheduler",
    "ListingSchema",
    "PollResult",
    "PollStatus",
    "SpeedEstimator",
    "TransferOutcome",
    "TransferResult",
    "TransferVerifier",
    "detect_box_version",
    "parse_listing",
    "parse_listing_line",
    "split_suffix",
]
