"""
FTP transport backed by ftplib.

Thin adapter: each call maps to one FTP command and converts
``ftplib.all_errors`` into a False return plus a log line.
"""

from __future__ import annotations

import ftplib
from pathlib import Path

from scansync.logging import get_logger

logger = get_logger(__name__)


class FtpTransport:
    """
    Transport over a single FTP control connection.

    Example:
        >>> transport = FtpTransport(port=21)
        >>> if transport.connect("10.0.0.5", "novac", "secret", timeout=30):
        ...     raw = transport.list_directory()
        ...     transport.disconnect()
    """

    def __init__(self, port: int = 21, passive: bool = True) -> None:
        self._port = port
        self._passive = passive
        self._ftp: ftplib.FTP | None = None
        self._banner = ""
        self._host: str | None = None

    @property
    def banner(self) -> str:
        return self._banner

    @property
    def is_connected(self) -> bool:
        return self._ftp is not None

    def connect(self, host: str, user: str, password: str, timeout: float) -> bool:
        """Open a new session, replacing any existing one."""
        self.disconnect()
        ftp = ftplib.FTP()
        try:
            welcome = ftp.connect(host, self._port, timeout=timeout)
            login = ftp.login(user=user, passwd=password)
            ftp.set_pasv(self._passive)
        except ftplib.all_errors as e:
            logger.warning(f"FTP login to {host}:{self._port} as {user} failed: {e}")
            ftp.close()
            return False
        self._ftp = ftp
        self._host = host
        self._banner = f"{welcome}\n{login}"
        return True

    def disconnect(self) -> None:
        if self._ftp is None:
            return
        try:
            self._ftp.quit()
        except ftplib.all_errors:
            self._ftp.close()
        finally:
            self._ftp = None

    def enter_folder(self, name: str) -> bool:
        return self._run(f"CWD {name}", lambda ftp: ftp.cwd(name))

    def list_directory(self) -> bytes:
        """Raw LIST output; empty when the listing could not be fetched."""
        chunks: list[bytes] = []
        if not self._run("LIST", lambda ftp: ftp.retrbinary("LIST", chunks.append)):
            return b""
        return b"".join(chunks)

    def download_file(self, remote_name: str, local_path: Path) -> bool:
        ftp = self._require()
        if ftp is None:
            return False
        try:
            with open(local_path, "wb") as f:
                ftp.retrbinary(f"RETR {remote_name}", f.write)
        except ftplib.all_errors as e:
            logger.warning(f"RETR {remote_name} from {self._host} failed: {e}")
            return False
        return True

    def upload_file(self, local_path: Path, remote_name: str) -> bool:
        ftp = self._require()
        if ftp is None:
            return False
        try:
            with open(local_path, "rb") as f:
                ftp.storbinary(f"STOR {remote_name}", f)
        except ftplib.all_errors as e:
            logger.warning(f"STOR {remote_name} to {self._host} failed: {e}")
            return False
        return True

    def delete_remote_file(self, name: str) -> bool:
        return self._run(f"DELE {name}", lambda ftp: ftp.delete(name))

    def find_file(self, name: str) -> bool:
        names: list[str] = []
        if not self._run("NLST", lambda ftp: names.extend(ftp.nlst())):
            return False
        return name in names

    def delete_folder(self, name: str) -> bool:
        return self._run(f"RMD {name}", lambda ftp: ftp.rmd(name))

    def _require(self) -> ftplib.FTP | None:
        if self._ftp is None:
            logger.warning("FTP operation attempted without a session")
        return self._ftp

    def _run(self, label: str, op) -> bool:
        ftp = self._require()
        if ftp is None:
            return False
        try:
            op(ftp)
        except ftplib.all_errors as e:
            logger.warning(f"{label} on {self._host} failed: {e}")
            return False
        return True
