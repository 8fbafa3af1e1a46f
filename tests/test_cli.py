"""Tests for the CLI module."""

import csv
import gzip
import json

import pytest
import typer
from typer.testing import CliRunner

from logscrubber.cli import app


@pytest.mark.usefixtures("isolated_config")
class TestScrubCommand:
    """Test the scrub command end to end."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def _invoke(self, *args):
        return self.runner.invoke(app, ["scrub", *args])

    def test_scrub_writes_output_and_audit(self, sample_log_file, tmp_path):
        output = tmp_path / "clean.log"
        audit = tmp_path / "audit.csv"

        result = self._invoke(
            "-i", str(sample_log_file), "-l", "2", "-o", str(output), "-a", str(audit)
        )

        assert result.exit_code == 0
        assert "Processed 4 lines out of 6 total lines" in result.stdout
        assert "(2 empty lines skipped)" in result.stdout
        assert "Log scrubbing completed successfully." in result.stdout

        lines = output.read_text(encoding="utf-8").splitlines()
        assert '"ip":"***.***.***.7"' in lines[0]
        with open(audit, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0][0] == "Original Value"
        assert ["alice", "user1", "1", "username", "mattermost.log"] in rows

    def test_default_paths_and_json_audit(self, sample_log_file, tmp_path):
        result = self._invoke("-i", str(sample_log_file), "-l", "1", "--audit-type", "json")

        assert result.exit_code == 0
        assert (tmp_path / "mattermost_scrubbed.log").exists()
        data = json.loads((tmp_path / "mattermost_audit.json").read_text())
        assert {entry["Type"] for entry in data} == {"email", "username"}

    def test_compressed_output(self, sample_log_file, tmp_path):
        result = self._invoke("-i", str(sample_log_file), "-l", "3", "-z")

        assert result.exit_code == 0
        with gzip.open(tmp_path / "mattermost_scrubbed.log.gz", "rt", encoding="utf-8") as f:
            assert len(f.read().splitlines()) == 4

    def test_dry_run_writes_nothing(self, sample_log_file, tmp_path):
        result = self._invoke("-i", str(sample_log_file), "-l", "2", "--dry-run")

        assert result.exit_code == 0
        assert "Dry run completed successfully" in result.stdout
        assert sorted(p.name for p in tmp_path.iterdir()) == ["mattermost.log"]

    def test_json_issue_summary(self, sample_log_file):
        result = self._invoke("-i", str(sample_log_file), "-l", "1", "--dry-run")

        assert "JSON processed: 3 lines (75.0%)" in result.stdout
        assert "Plain text processed: 1 lines (25.0%)" in result.stdout
        assert "Lines with issues: 3" in result.stdout

    def test_verbose_run_with_undecodable_bytes(self, tmp_path):
        """A line that is not valid UTF-8 still yields a summary and an audit file."""
        log_file = tmp_path / "binary.log"
        log_file.write_bytes(b"bad \xff byte from bob@x.com\n")

        result = self._invoke(
            "-i", str(log_file), "-l", "1", "-v", "--overwrite", "overwrite"
        )

        assert result.exit_code == 0
        assert "Line 1: bad \\udcff byte" in result.stdout
        assert (tmp_path / "binary_scrubbed.log").read_bytes().startswith(b"bad \xff byte")
        with open(tmp_path / "binary_audit.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[1][0] == "bob@x.com"

    def test_missing_input(self):
        result = self._invoke("-l", "1")

        assert result.exit_code == 1
        assert "input file path is required" in result.stdout

    def test_invalid_level(self, sample_log_file):
        result = self._invoke("-i", str(sample_log_file), "-l", "9")

        assert result.exit_code == 1
        assert "scrubbing level must be 1, 2, or 3" in result.stdout

    def test_cancel_on_existing_output(self, sample_log_file, tmp_path):
        (tmp_path / "mattermost_scrubbed.log").write_text("keep me")

        result = self._invoke("-i", str(sample_log_file), "-l", "1", "--overwrite", "cancel")

        assert result.exit_code == 1
        assert "Cancelled" in result.stdout
        assert (tmp_path / "mattermost_scrubbed.log").read_text() == "keep me"

    def test_overwrite_existing_output(self, sample_log_file, tmp_path):
        (tmp_path / "mattermost_scrubbed.log").write_text("old")

        result = self._invoke("-i", str(sample_log_file), "-l", "1", "--overwrite", "overwrite")

        assert result.exit_code == 0
        assert (tmp_path / "mattermost_scrubbed.log").read_text() != "old"

    def test_config_file_supplies_settings(self, sample_log_file, tmp_path):
        (tmp_path / "scrubber_config.json").write_text(
            json.dumps(
                {
                    "FileSettings": {"InputFile": sample_log_file.name},
                    "ScrubSettings": {"ScrubLevel": 3},
                }
            )
        )

        result = self._invoke()

        assert result.exit_code == 0
        assert "Config file found" in result.stdout
        assert "Scrubbing level: 3" in result.stdout
        output = (tmp_path / "mattermost_scrubbed.log").read_text(encoding="utf-8")
        assert "***.***.***.***" in output

    def test_missing_explicit_config(self):
        result = self._invoke("-c", "nope.json", "-l", "1")

        assert result.exit_code == 1
        assert "does not exist" in result.stdout


class TestOtherCommands:
    """Test the version command and the bare invocation."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "log-scrubber v0.10.0" in result.stdout

    def test_main_callback_without_command(self):
        result = self.runner.invoke(app, [])

        assert result.exit_code == 0
        assert "Welcome to the log scrubber!" in result.stdout
        assert "Use --help to see available commands" in result.stdout


class TestHelperFunctions:
    """Test CLI helper functions."""

    def test_handle_errors_exits(self):
        from logscrubber.cli import _handle_errors
        from logscrubber.core.exceptions import ScrubberError

        with pytest.raises(typer.Exit):
            _handle_errors(ScrubberError("boom"))

    def test_configure_logging_levels(self):
        import logging

        from logscrubber.cli import _configure_logging

        _configure_logging(True)
        assert logging.getLogger("logscrubber").level == logging.INFO
        _configure_logging(False)
        assert logging.getLogger("logscrubber").level == logging.WARNING
