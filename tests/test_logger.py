import io
import json
import logging

import pytest

from aih_backup.utils.logger import EndpointFilter, setup_logging


@pytest.fixture
def clean_root_logger():
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()


class TestLogging:
    """Test console and JSON file logging."""

    def test_file_gets_json_lines(self, temp_dir, clean_root_logger):
        log_file = temp_dir / "aih_backup.log"
        console = io.StringIO()
        setup_logging(str(log_file), console_stream=console)

        logging.getLogger("aih_backup.test").debug("walking workspace")

        record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record["level"] == "DEBUG"
        assert record["logger"] == "aih_backup.test"
        assert record["message"] == "walking workspace"
        # Console only shows INFO and above
        assert "walking workspace" not in console.getvalue()

    def test_console_level(self, temp_dir, clean_root_logger):
        console = io.StringIO()
        setup_logging(None, console_level=logging.WARNING, console_stream=console)

        logging.getLogger("aih_backup.test").info("quiet")
        logging.getLogger("aih_backup.test").warning("loud")

        assert "quiet" not in console.getvalue()
        assert "loud" in console.getvalue()

    def test_status_polling_is_filtered(self):
        endpoint_filter = EndpointFilter()

        def record(msg):
            return logging.LogRecord("werkzeug", logging.INFO, __file__, 1, msg, None, None)

        assert not endpoint_filter.filter(record('"GET /api/status HTTP/1.1" 200 -'))
        assert endpoint_filter.filter(record('"GET /api/status HTTP/1.1" 500 -'))
        assert endpoint_filter.filter(record('"POST /api/backup HTTP/1.1" 200 -'))
