import json
import os
import tempfile
import uuid
from pathlib import Path

import pytest

from aih_backup.config.settings import get_settings
from aih_backup.config.settings_manager import ConfigManager
from aih_backup.core.backup_engine import BackupEngine
from aih_backup.core.database import BackupStore


# ---- Filesystem fixtures ----

@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def workspace_dir(temp_dir):
    """Create a workspace with nested folders, a metadata file, an oversized file and memory notes."""
    workspace = temp_dir / "workspace"
    create_workspace_files(workspace)
    return workspace


@pytest.fixture
def memory_dir(workspace_dir):
    return workspace_dir / "memory"


@pytest.fixture
def config_dir(temp_dir):
    """Create a config directory holding an assistant config.json."""
    config_dir = temp_dir / "openclaw"
    os.makedirs(config_dir)
    with open(config_dir / "config.json", "w", encoding="utf-8") as f:
        json.dump({"model": "claude", "tools": {"browser": True}}, f)
    return config_dir


@pytest.fixture
def restore_dir(temp_dir):
    """Create an empty restore directory for testing."""
    restore_dir = temp_dir / "restore"
    os.makedirs(restore_dir)
    return restore_dir


# ---- Store and engine fixtures ----

@pytest.fixture
def database_url(temp_dir):
    """Create a unique sqlite URL for testing."""
    return f"sqlite:///{temp_dir / f'test_{uuid.uuid4().hex[:8]}.db'}"


@pytest.fixture
def store(database_url):
    store = BackupStore(database_url)
    store.init_db()
    return store


@pytest.fixture
def engine(store, workspace_dir, memory_dir, config_dir):
    """Backup engine wired to the temporary workspace, memory and config."""
    return BackupEngine(
        store,
        ConfigManager(str(config_dir / "config.json")),
        workspace_dir=str(workspace_dir),
        memory_dir=str(memory_dir),
    )


@pytest.fixture
def cli_env(monkeypatch, temp_dir, database_url, workspace_dir, config_dir):
    """Point the settings at the temporary directories and reset the cached settings."""
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("WORKSPACE_DIR", str(workspace_dir))
    monkeypatch.setenv("CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("LOG_FILE", str(temp_dir / "aih_backup.log"))
    monkeypatch.delenv("MEMORY_DIR", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---- Helper functions ----

def create_workspace_files(directory):
    """Populate a workspace directory with a small tree of test files."""
    os.makedirs(directory / "src" / "lib")
    os.makedirs(directory / "memory")

    with open(directory / "notes.txt", "w") as f:
        f.write("Workspace notes")
    with open(directory / "src" / "main.py", "w") as f:
        f.write("print('hello')\n")
    with open(directory / "src" / "lib" / "util.py", "w") as f:
        f.write("def util():\n    return 1\n")

    # Files that must never show up in a tree
    with open(directory / ".DS_Store", "wb") as f:
        f.write(b"\x00\x00\x00\x01Bud1")
    with open(directory / "big.bin", "wb") as f:
        f.write(os.urandom(1024 * 1024 + 1))

    with open(directory / "memory" / "notes.md", "w", encoding="utf-8") as f:
        f.write("hello")
    with open(directory / "memory" / "2026-01-31.md", "w", encoding="utf-8") as f:
        f.write("# Journal\n\nMet Zoë at the café.\n")


def list_tree(directory):
    """All paths below ``directory``, relative and sorted."""
    directory = Path(directory)
    return sorted(str(p.relative_to(directory)) for p in directory.rglob("*"))
