"""
Tests for the ftplib-backed transport.
"""

import ftplib
from unittest.mock import MagicMock, patch

import pytest

from scansync.transport.base import Transport
from scansync.transport.ftp import FtpTransport


@pytest.fixture
def ftp():
    """Patched ftplib.FTP instance."""
    with patch("scansync.transport.ftp.ftplib.FTP") as cls:
        instance = MagicMock()
        instance.connect.return_value = "220 AXIS 2100 FTP server ready"
        instance.login.return_value = "230 User logged in"
        cls.return_value = instance
        yield instance


@pytest.fixture
def connected(ftp):
    transport = FtpTransport(port=2121)
    assert transport.connect("10.0.0.5", "novac", "secret", timeout=5.0)
    return transport


class TestConnect:
    """Tests for session handling."""

    def test_protocol(self):
        assert isinstance(FtpTransport(), Transport)

    def test_connect(self, ftp, connected):
        ftp.connect.assert_called_once_with("10.0.0.5", 2121, timeout=5.0)
        ftp.login.assert_called_once_with(user="novac", passwd="secret")
        ftp.set_pasv.assert_called_once_with(True)
        assert connected.is_connected
        assert "AXIS" in connected.banner

    def test_login_rejected(self, ftp):
        ftp.login.side_effect = ftplib.error_perm("530 Login incorrect")
        transport = FtpTransport()

        assert not transport.connect("10.0.0.5", "novac", "bad", timeout=5.0)
        assert not transport.is_connected
        ftp.close.assert_called_once()

    def test_unreachable(self, ftp):
        ftp.connect.side_effect = OSError("timed out")
        assert not FtpTransport().connect("10.0.0.5", "u", "p", timeout=1.0)

    def test_disconnect(self, ftp, connected):
        connected.disconnect()
        ftp.quit.assert_called_once()
        assert not connected.is_connected

    def test_disconnect_falls_back_to_close(self, ftp, connected):
        ftp.quit.side_effect = EOFError()
        connected.disconnect()
        ftp.close.assert_called_once()
        assert not connected.is_connected

    def test_operations_need_session(self, tmp_path):
        transport = FtpTransport()
        assert not transport.enter_folder("R001")
        assert not transport.download_file("U001.PAK", tmp_path / "U001.PAK")
        assert transport.list_directory() == b""


class TestOperations:
    """Tests for FTP commands."""

    def test_list_directory(self, ftp, connected):
        ftp.retrbinary.side_effect = lambda cmd, callback: (callback(b"line1\r\n"), callback(b"line2\r\n"))

        assert connected.list_directory() == b"line1\r\nline2\r\n"
        assert ftp.retrbinary.call_args.args[0] == "LIST"

    def test_download(self, ftp, connected, tmp_path):
        ftp.retrbinary.side_effect = lambda cmd, callback: callback(b"payload")
        target = tmp_path / "U001.PAK"

        assert connected.download_file("U001.PAK", target)
        assert target.read_bytes() == b"payload"
        assert ftp.retrbinary.call_args.args[0] == "RETR U001.PAK"

    def test_download_failure(self, ftp, connected, tmp_path):
        ftp.retrbinary.side_effect = ftplib.error_perm("550 No such file")
        assert not connected.download_file("U404.PAK", tmp_path / "U404.PAK")

    def test_upload(self, ftp, connected, tmp_path):
        source = tmp_path / "command.txt"
        source.write_bytes(b"reboot")

        assert connected.upload_file(source, "command.txt")
        assert ftp.storbinary.call_args.args[0] == "STOR command.txt"

    def test_find_file(self, ftp, connected):
        ftp.nlst.return_value = ["U001.PAK", "R001"]
        assert connected.find_file("U001.PAK")
        assert not connected.find_file("U002.PAK")

    def test_delete_and_rmdir(self, ftp, connected):
        assert connected.delete_remote_file("U001.PAK")
        assert connected.delete_folder("R001")
        ftp.delete.assert_called_once_with("U001.PAK")
        ftp.rmd.assert_called_once_with("R001")

    def test_enter_folder_failure(self, ftp, connected):
        ftp.cwd.side_effect = ftplib.error_perm("550 Not a directory")
        assert not connected.enter_folder("R404")
