"""
Tests for CLI module.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from scansync.cli import main
from scansync.services.cfgsync import ConfigSyncResult
from scansync.services.download import PollResult, PollStatus

INSTRUMENT = ["--host", "10.0.0.5", "--serial", "I2J5678", "-u", "novac", "-p", "novac"]


def fake_client(**attrs) -> MagicMock:
    client = MagicMock()
    client.configure_mock(**attrs)
    return client


class TestCLIMain:
    """Test main CLI group."""

    def test_help(self):
        """--help shows usage."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "scanning instruments" in result.output

    def test_version(self):
        """--version shows version."""
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output

    def test_commands_listed(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        for command in ("poll", "fleet", "sleep", "wake", "reboot", "sync-config"):
            assert command in result.output


class TestCLIPoll:
    """Test poll command."""

    def test_poll_requires_host(self):
        """poll fails without --host."""
        runner = CliRunner()
        result = runner.invoke(main, ["poll", "--serial", "I2J5678"])
        assert result.exit_code == 2
        assert "--host" in result.output

    def test_poll_success(self):
        """poll prints the summary and exits 0."""
        client = fake_client(**{
            "poll_once.return_value": PollResult(
                serial="I2J5678", status=PollStatus.COMPLETED, downloaded=["U001.PAK"]
            )
        })
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]) as build:
            result = runner.invoke(main, ["poll", *INSTRUMENT, "--box", "v2", "--node", "3"])

        assert result.exit_code == 0
        assert "I2J5678: completed" in result.output
        instrument = build.call_args.args[0][0]
        assert instrument.box.value == "v2"
        assert instrument.node_index == 3
        assert instrument.user == "novac"

    def test_poll_not_connected(self):
        """poll exits 1 when the instrument cannot be reached."""
        client = fake_client(**{
            "poll_once.return_value": PollResult(serial="I2J5678", status=PollStatus.NOT_CONNECTED)
        })
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]):
            result = runner.invoke(main, ["poll", *INSTRUMENT])

        assert result.exit_code == 1
        assert "not_connected" in result.output


class TestCLIFleet:
    """Test fleet command."""

    def test_fleet_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["fleet", "--help"])
        assert result.exit_code == 0
        assert "FLEET_FILE" in result.output

    def test_invalid_fleet_file(self, tmp_path):
        path = tmp_path / "fleet.json"
        path.write_text('[{"host": "10.0.0.5"}]')

        runner = CliRunner()
        result = runner.invoke(main, ["fleet", str(path)])

        assert result.exit_code == 1

    def test_empty_fleet(self, tmp_path):
        path = tmp_path / "fleet.json"
        path.write_text("[]")

        runner = CliRunner()
        result = runner.invoke(main, ["fleet", str(path)])

        assert result.exit_code == 0
        assert "No instruments" in result.output

    def test_fleet_table(self, tmp_path):
        path = tmp_path / "fleet.json"
        path.write_text(json.dumps([
            {"serial": "I2J5678", "host": "10.0.0.5"},
            {"serial": "D2J2200", "host": "10.0.0.6"},
        ]))
        results = [
            PollResult(serial="I2J5678", status=PollStatus.COMPLETED, downloaded=["A.PAK"]),
            PollResult(serial="D2J2200", status=PollStatus.NOTHING_TO_DO),
        ]

        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[MagicMock(), MagicMock()]), \
             patch("scansync.cli.poll_round_robin", return_value=results):
            result = runner.invoke(main, ["fleet", str(path)])

        assert result.exit_code == 0
        assert "I2J5678" in result.output
        assert "D2J2200" in result.output


class TestCLIPowerCommands:
    """Test sleep, wake and reboot."""

    def test_wake_success(self):
        client = fake_client(**{"wake.return_value": True})
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]):
            result = runner.invoke(main, ["wake", *INSTRUMENT])

        assert result.exit_code == 0
        assert "woken up" in result.output

    def test_wake_failure(self):
        client = fake_client(**{"wake.return_value": False})
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]):
            result = runner.invoke(main, ["wake", *INSTRUMENT])

        assert result.exit_code == 1

    def test_sleep(self):
        client = fake_client(**{"sleep.return_value": True})
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]):
            result = runner.invoke(main, ["sleep", *INSTRUMENT])

        assert result.exit_code == 0
        client.sleep.assert_called_once()

    def test_reboot(self):
        client = fake_client(**{"reboot.return_value": True})
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]):
            result = runner.invoke(main, ["reboot", *INSTRUMENT])

        assert result.exit_code == 0
        client.reboot.assert_called_once()


class TestCLISyncConfig:
    """Test sync-config command."""

    def test_success(self, tmp_path):
        client = fake_client(**{
            "sync_config.return_value": ConfigSyncResult(
                downloaded=True, parsed=True, local_path=tmp_path / "cfg.txt"
            )
        })
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]):
            result = runner.invoke(main, ["sync-config", *INSTRUMENT])

        assert result.exit_code == 0
        assert "Configuration saved" in result.output

    def test_failure(self):
        client = fake_client(**{
            "sync_config.return_value": ConfigSyncResult(error="admin login failed on 10.0.0.5")
        })
        runner = CliRunner()
        with patch("scansync.cli.build_clients", return_value=[client]):
            result = runner.invoke(main, ["sync-config", *INSTRUMENT])

        assert result.exit_code == 1
