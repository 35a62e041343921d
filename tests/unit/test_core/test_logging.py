"""Unit tests for logging configuration."""

import json
from pathlib import Path

from loguru import logger

from spots_api.core.logging import setup_logging


class TestLogging:
    """Tests for Loguru logging setup."""

    def test_setup_logging_does_not_raise(self) -> None:
        """setup_logging with valid log level does not raise."""
        setup_logging("DEBUG")
        setup_logging("INFO")
        setup_logging("WARNING")

    def test_setup_logging_case_insensitive(self) -> None:
        """setup_logging accepts case-insensitive log levels."""
        setup_logging("info")
        setup_logging("debug")

    def test_file_sink_written(self, tmp_path: Path) -> None:
        """A log file is created in log_dir."""
        log_dir = tmp_path / "logs"
        setup_logging("INFO", log_dir=str(log_dir))
        logger.info("photo mirrored")
        logger.complete()
        log_file = log_dir / "spots-api.log"
        assert log_file.exists()
        assert "photo mirrored" in log_file.read_text()
        setup_logging("INFO")

    def test_json_output_records_serialized(self, capsys) -> None:
        """Records bound with json_output go to the JSON sink only."""
        setup_logging("INFO")
        logger.bind(json_output=True, mirrored=2).info("Photo batch finished")
        logger.info("plain line")

        lines = capsys.readouterr().err.strip().splitlines()

        payload = json.loads(lines[0])
        assert payload["record"]["message"] == "Photo batch finished"
        assert payload["record"]["extra"]["mirrored"] == 2
        assert lines[1].endswith("plain line")
        setup_logging("INFO")
