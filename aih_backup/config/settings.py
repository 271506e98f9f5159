"""Application settings for AIH Backup.

Values come from the environment (or a local ``.env`` file). Paths default to
the OpenClaw layout in the user's home directory.
"""
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

DEFAULT_HOME = os.path.join(os.path.expanduser("~"), ".openclaw")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Store
    database_url: str = "sqlite:///aih_backups.db"

    # Backed-up locations
    workspace_dir: str = os.path.join(DEFAULT_HOME, "workspace")
    memory_dir: str = ""  # MEMORY_DIR, defaults to <workspace_dir>/memory
    config_dir: str = DEFAULT_HOME

    # Web interface
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_file: str = "aih_backup.log"
    debug: bool = False

    @property
    def effective_database_url(self) -> str:
        """DATABASE_URL as an SQLAlchemy URL: bare paths become sqlite files."""
        url = self.database_url.strip()
        if url.startswith("postgres://"):
            # SQLAlchemy only knows the "postgresql" dialect name
            return "postgresql://" + url[len("postgres://"):]
        if url and "://" not in url:
            return "sqlite:///" + os.path.expanduser(url)
        return url

    @property
    def resolved_memory_dir(self) -> str:
        return self.memory_dir or os.path.join(self.workspace_dir, "memory")

    @property
    def config_path(self) -> str:
        return os.path.join(self.config_dir, "config.json")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
