import logging
import json
import sys

# --- Log Filtering & Formatting ---

class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines for machine processing."""
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)

class EndpointFilter(logging.Filter):
    """Drops successful polling requests from the console log."""
    ignored_endpoints = ("/api/status",)

    def filter(self, record):
        msg = record.getMessage()
        if any(endpoint in msg for endpoint in self.ignored_endpoints) and " 200 " in msg:
            return False
        return True

def setup_logging(log_file_path, debug_mode=False, console_level=logging.INFO, console_stream=None):
    """Configures the logging system."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG) # Root lets everything through, handlers filter

    # Remove existing handlers to avoid duplicates on reload
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # 1. Console handler (plain text, filtered)
    console_handler = logging.StreamHandler(console_stream or sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug_mode else console_level)
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    console_handler.addFilter(EndpointFilter())

    root_logger.addHandler(console_handler)

    # 2. File handler (JSON, unfiltered, DEBUG)
    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    return logging.getLogger(__name__)
