"""
Tests for the faxbridge command-line entry point.
"""

import json

import pytest

from faxbridge import cli
from faxbridge.exceptions import ScanError
from faxbridge.models.outcome import RunReport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("INCOMING_DIR", "PROCESSED_DIR", "FAILED_DIR", "BATCH_SIZE", "UPLOAD_ENDPOINT"):
        monkeypatch.delenv(name, raising=False)


class TestRunCommand:

    def test_flags_override_configuration(self, mocker, tmp_path):
        mock_run = mocker.patch(
            "faxbridge.cli.run_pipeline",
            return_value=RunReport(profile="received", direction="Received"),
        )

        code = cli.main([
            "run", "--profile", "received",
            "--incoming", str(tmp_path / "in"),
            "--batch-size", "10",
            "--endpoint", "http://localhost/humblefax/upload_bulk",
        ])

        assert code == 0
        config, profile = mock_run.call_args[0]
        assert profile.name == "received"
        assert config.incoming_dir == tmp_path / "in"
        assert config.batch_size == 10
        assert config.upload_endpoint == "http://localhost/humblefax/upload_bulk"

    def test_json_report(self, mocker, capsys):
        mocker.patch(
            "faxbridge.cli.run_pipeline",
            return_value=RunReport(profile="sent", direction="Sent", records_uploaded=3),
        )

        assert cli.main(["run", "--json"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["records_uploaded"] == 3
        assert report["profile"] == "sent"

    def test_scan_error_exits_1(self, mocker):
        mocker.patch("faxbridge.cli.run_pipeline", side_effect=ScanError("no such directory"))

        assert cli.main(["run"]) == 1

    def test_invalid_batch_size_exits_2(self, mocker, capsys):
        mock_run = mocker.patch("faxbridge.cli.run_pipeline")

        assert cli.main(["run", "--batch-size", "0"]) == 2
        assert "Invalid pipeline configuration" in capsys.readouterr().err
        mock_run.assert_not_called()

    def test_unknown_profile_is_rejected_by_argparse(self):
        with pytest.raises(SystemExit):
            cli.main(["run", "--profile", "outbound"])


class TestProfilesCommand:

    def test_lists_profiles(self, capsys):
        assert cli.main(["profiles"]) == 0

        out = capsys.readouterr().out
        for name in ("sent", "sent_same_day", "received", "received_legacy"):
            assert name in out
