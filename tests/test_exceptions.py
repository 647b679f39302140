"""
Tests for scansync exceptions.
"""

from scansync.exceptions import (
    ConfigParseError,
    CorruptContentError,
    ListingParseError,
    RemoteDeleteError,
    ScanSyncError,
    SizeMismatchError,
    StorageError,
    TransportError,
)


class TestScanSyncError:
    """Tests for base ScanSyncError."""

    def test_basic_error(self):
        error = ScanSyncError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"

    def test_error_with_cause(self):
        cause = OSError("disk full")
        error = ScanSyncError("Wrapped error", cause=cause)
        assert error._original_cause is cause
        assert str(error) == "Wrapped error"


class TestTransportErrors:
    """Tests for transport failures."""

    def test_transport_error(self):
        error = TransportError("download", "10.0.0.5", "U001.PAK")
        assert error.operation == "download"
        assert error.host == "10.0.0.5"
        assert str(error) == "download failed on 10.0.0.5: U001.PAK"

    def test_without_host(self):
        assert str(TransportError("login")) == "login failed"

    def test_remote_delete(self):
        error = RemoteDeleteError("U001.PAK", "10.0.0.5")
        assert isinstance(error, TransportError)
        assert error.name == "U001.PAK"
        assert "could not be removed" in str(error)


class TestVerificationErrors:
    """Tests for size and content errors."""

    def test_size_mismatch(self):
        error = SizeMismatchError("/data/U001.PAK", 1024, 1000)
        assert error.expected == 1024
        assert error.actual == 1000
        assert "1024" in str(error)
        assert "1000" in str(error)

    def test_corrupt(self):
        error = CorruptContentError("/data/U001.PAK", 2)
        assert error.attempts == 2
        assert "/data/U001.PAK" in str(error)


class TestParseAndStorageErrors:
    """Tests for parse and storage errors."""

    def test_listing_parse(self):
        error = ListingParseError("junk", "3 of 9 tokens")
        assert error.line == "junk"
        assert "3 of 9 tokens" in str(error)

    def test_config_parse(self):
        error = ConfigParseError("/data/cfg.txt")
        assert error.path == "/data/cfg.txt"
        assert "cfg.txt" in str(error)

    def test_storage(self):
        cause = PermissionError("denied")
        error = StorageError("/readonly", cause=cause)
        assert error.path == "/readonly"
        assert error._original_cause is cause
