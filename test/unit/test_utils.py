"""Unit tests for error formatting, logging setup and console colors."""

import json
import logging

from ethgas.utils import colors
from ethgas.utils.exceptions import (
    ArtifactsNotFoundError,
    ConfigError,
    RPCConnectionError,
    RunFinishedError,
    format_error,
    format_exception_message,
)
from ethgas.utils.logging import TRACE, get_logger, setup_logging


class TestExceptions:

    def test_to_dict(self):
        error = RPCConnectionError("Failed to connect", rpc_url="http://localhost:8545")
        assert error.to_dict() == {
            "error": True,
            "type": "RPCConnectionError",
            "message": "Failed to connect",
            "rpc_url": "http://localhost:8545",
        }

    def test_artifacts_not_found_is_an_artifact_error(self):
        error = ArtifactsNotFoundError("build/contracts")
        assert error.error_code == "ArtifactsNotFoundError"
        assert error.details == {"artifact": "build/contracts"}

    def test_run_finished(self):
        error = RunFinishedError("begin a test")
        assert str(error) == "Cannot begin a test: the gas run has already finished"

    def test_format_error_json(self):
        payload = json.loads(format_error(ConfigError("bad", path=".ethgas.json"), json_mode=True))
        assert payload["type"] == "ConfigError"
        assert payload["path"] == ".ethgas.json"

    def test_format_foreign_error(self):
        colors.set_colors_enabled(False)
        assert format_error(ValueError("boom")) == "boom"
        payload = json.loads(format_error(ValueError("boom"), json_mode=True))
        assert payload["type"] == "ValueError"

    def test_rpc_error_message(self):
        error = ValueError({"code": -32000, "message": "header not found"})
        assert format_exception_message(error) == "header not found"


class TestLogging:

    def test_levels(self):
        assert setup_logging().level == logging.WARNING
        assert setup_logging(debug=True).level == logging.DEBUG
        assert setup_logging(verbose=True).level == TRACE

    def test_child_loggers(self):
        assert get_logger("scanner").name == "ethgas.scanner"
        assert get_logger().name == "ethgas"

    def test_trace_to_log_file(self, tmp_path):
        log_file = tmp_path / "ethgas.log"
        setup_logging(verbose=True, quiet=True, log_file=str(log_file))

        get_logger("scanner").trace("Skipping missing block 7")
        for handler in logging.getLogger("ethgas").handlers:
            handler.flush()

        assert "TRACE - Skipping missing block 7" in log_file.read_text()
        setup_logging()

    def test_log_file_records_trace_below_console_level(self, tmp_path, capsys):
        log_file = tmp_path / "ethgas.log"
        logger = setup_logging(log_file=str(log_file))

        get_logger("attribution").trace("Call 0x01 not attributed")
        for handler in logger.handlers:
            handler.flush()

        assert "Call 0x01 not attributed" in log_file.read_text()
        assert "Call 0x01 not attributed" not in capsys.readouterr().err
        setup_logging()

    def test_quiet_has_no_console_handler(self):
        assert setup_logging(quiet=True).handlers == []
        setup_logging()


class TestColors:

    def test_disabled(self):
        colors.set_colors_enabled(False)
        assert colors.gas_value(21000) == "21000 gas"

    def test_enabled(self):
        colors.set_colors_enabled(True)
        try:
            assert colors.gas_value(7) == f"{colors.Colors.GREEN}7 gas{colors.Colors.RESET}"
        finally:
            colors.set_colors_enabled(False)
