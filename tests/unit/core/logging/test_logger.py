"""Tests for VaneLogger."""

import json
import logging

from vane.core.logging import LoggingConfig, VaneLogger
from vane.core.logging.filters import set_correlation_id


class TestVaneLogger:
    def test_creation_with_defaults(self):
        logger = VaneLogger(name="vane.test.defaults")
        try:
            assert logger.name == "vane.test.defaults"
            assert logger.config.level.value == "INFO"
        finally:
            logger.close()

    def test_structured_fields_json(self, capsys):
        logger = VaneLogger(LoggingConfig.create(level="DEBUG", format="json"), name="vane.test.json")
        set_correlation_id("req-1")

        logger.info("Request completed", method="GET", status_code=200)
        logger.close()

        data = json.loads(capsys.readouterr().err)
        assert data["message"] == "Request completed"
        assert data["method"] == "GET"
        assert data["status_code"] == 200
        assert data["correlation_id"] == "req-1"

    def test_level_threshold(self, capsys):
        logger = VaneLogger(LoggingConfig.create(level="WARNING"), name="vane.test.level")

        logger.debug("hidden")
        logger.info("hidden")
        logger.warning("shown")
        logger.close()

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_secrets_masked(self, capsys):
        logger = VaneLogger(LoggingConfig.create(format="json"), name="vane.test.mask")

        logger.info(
            "Request prepared",
            url="https://h/api?token=abc123&page=1",
            headers={"Authorization": "Bearer abc123", "Accept": "*/*"},
        )
        logger.close()

        err = capsys.readouterr().err
        assert "abc123" not in err
        data = json.loads(err)
        assert data["headers"]["Accept"] == "*/*"
        assert "page=1" in data["url"]

    def test_file_output(self, tmp_path):
        path = tmp_path / "logs" / "vane.log"
        config = LoggingConfig.create(format="json", enable_console=False, enable_file=True, file_path=str(path))

        with VaneLogger(config, name="vane.test.file") as logger:
            logger.error("Request failed", error_type="DNSError")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["level"] == "ERROR"
        assert data["error_type"] == "DNSError"

    def test_exception_includes_traceback(self, capsys):
        logger = VaneLogger(LoggingConfig.create(format="json"), name="vane.test.exc")
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logger.exception("Unexpected")
        logger.close()

        assert "RuntimeError: boom" in json.loads(capsys.readouterr().err)["exception"]

    def test_close_idempotent(self, capsys):
        logger = VaneLogger(name="vane.test.close")
        logger.close()
        logger.close()

        logger.info("after close")
        assert capsys.readouterr().err == ""
        assert logging.getLogger("vane.test.close").handlers == []
