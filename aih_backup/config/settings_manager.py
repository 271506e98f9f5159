import json
import os
import threading
import logging

logger = logging.getLogger(__name__)

class ConfigManager:
    """Reads and writes the assistant's ``config.json``."""

    def __init__(self, config_path):
        self.config_path = config_path
        self.lock = threading.Lock()
        self.config = {}
        self.last_mtime = 0

    def load_config(self):
        """Loads the configuration from disk, only re-reading when the file changed."""
        with self.lock:
            if os.path.exists(self.config_path):
                current_mtime = os.path.getmtime(self.config_path)
                if current_mtime == self.last_mtime:
                    return self.config

                with open(self.config_path, 'r', encoding='utf-8') as f:
                    self.config = json.load(f)

                self.last_mtime = current_mtime
                logger.debug(f"Config loaded: {self.config_path}")
            else:
                if self.last_mtime != 0: # Only log if it disappeared
                     logger.warning(f"Config file not found: {self.config_path}")
                self.config = {}
                self.last_mtime = 0
            return self.config

    def save_config(self, new_config):
        """Replaces the configuration file with ``new_config``, pretty-printed."""
        with self.lock:
            parent = os.path.dirname(self.config_path)
            if parent:
                os.makedirs(parent, exist_ok=True)

            try:
                with open(self.config_path, 'w', encoding='utf-8') as f:
                    json.dump(new_config, f, indent=2, ensure_ascii=False)
            except OSError as e:
                logger.error(f"Error writing config {self.config_path}: {e}")
                raise

            self.config = dict(new_config)
            self.last_mtime = os.path.getmtime(self.config_path)
            logger.info("Config saved.")
