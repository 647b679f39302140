"""
Transport layer and collaborator interfaces.
"""

from scansync.transport.base import (
    ConfigParser,
    ContentStatus,
    ContentValidator,
    Notifier,
    Transport,
    Uploader,
)
from scansync.transport.ftp import FtpTransport

__all__ = [
    "ConfigParser",
    "ContentStatus",
    "ContentValidator",
    "FtpTransport",
    "Notifier",
    "Transport",
    "Uploader",
]
