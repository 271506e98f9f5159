import os
import logging

from aih_backup.config.settings_manager import ConfigManager
from aih_backup.core.database import BackupStore
from aih_backup.core.errors import BackupNotFoundError
from aih_backup.core.payload import BackupPayload, NamedContent, DEFAULT_BACKUP_NAME
from aih_backup.utils.file_system import (
    clean_name,
    count_tree_files,
    fingerprint,
    get_directory_tree,
    restore_directory_tree,
    to_json,
)

logger = logging.getLogger(__name__)

CLI_LIST_LIMIT = 20
API_LIST_LIMIT = 50

def read_memory_files(memory_dir):
    """Full text of every regular file in ``memory_dir``; empty when the directory is missing."""
    if not os.path.exists(memory_dir):
        return []
    entries = []
    for name in sorted(os.listdir(memory_dir)):
        full_path = os.path.join(memory_dir, name)
        if not os.path.isfile(full_path):
            logger.debug(f"Skipping non-file memory entry: '{full_path}'")
            continue
        with open(full_path, "r", encoding="utf-8", errors="replace", newline="") as f:
            entries.append(NamedContent(name=clean_name(name), content=f.read()))
    return entries

def write_memory_files(memory_dir, entries):
    os.makedirs(memory_dir, exist_ok=True)
    for entry in entries:
        with open(os.path.join(memory_dir, entry.name), "w", encoding="utf-8", newline="") as f:
            f.write(entry.content)


class BackupEngine:
    """Creates, lists and restores backups of the workspace, memory and config."""

    def __init__(self, store: BackupStore, config_manager: ConfigManager, workspace_dir, memory_dir):
        self.store = store
        self.config_manager = config_manager
        self.workspace_dir = workspace_dir
        self.memory_dir = memory_dir
        self.global_status_callback = None

    def set_status_callback(self, callback):
        self.global_status_callback = callback

    def log_status(self, msg, type="info"):
        if type == "error":
            logger.error(msg)
        elif type == "warning":
            logger.warning(msg)
        else:
            logger.info(msg)
        if self.global_status_callback:
            self.global_status_callback({"kind": "status", "type": type, "message": msg})

    def run_backup(self, name=None):
        """
        Snapshot workspace, memory and config into a new backup row.

        Returns the id of the inserted row. Filesystem, config file and store
        errors propagate.
        """
        payload = BackupPayload(name=name or DEFAULT_BACKUP_NAME)
        self.log_status("Backing up OpenClaw...", "title")

        self.log_status("Workspace files...", "step")
        payload.workspace = get_directory_tree(self.workspace_dir)
        logger.debug(f"Workspace tree holds {count_tree_files(payload.workspace)} files")

        self.log_status("Memory files...", "step")
        payload.memory = read_memory_files(self.memory_dir)

        self.log_status("Config...", "step")
        payload.config = self.config_manager.load_config()

        workspace_hash = fingerprint(to_json(payload.workspace))
        memory_hash = fingerprint(to_json(payload.memory_dicts()))

        backup_id = self.store.add_backup(payload.name, payload.to_dict(), workspace_hash, memory_hash)
        self.log_status(f"Backup saved! ID: {backup_id}", "success")
        return backup_id

    def run_restore(self, backup_id):
        """
        Write a stored backup back to disk.

        Memory files are written first, then the workspace directories, then
        the config file when the stored config is not empty. Nothing is rolled
        back if a later step fails. Raises BackupNotFoundError for an unknown
        id before touching the filesystem.
        """
        self.log_status("Restoring backup...", "title")

        record = self.store.get_backup(backup_id)
        if record is None:
            raise BackupNotFoundError(backup_id)

        payload = BackupPayload.from_dict(record["data"])
        self.log_status(f"Restoring: {payload.name}")

        if payload.memory:
            self.log_status("Memory files...", "step")
            write_memory_files(self.memory_dir, payload.memory)

        self.log_status("Workspace files...", "step")
        restore_directory_tree(self.workspace_dir, payload.workspace)

        if payload.config:
            self.log_status("Config...", "step")
            self.config_manager.save_config(payload.config)

        self.log_status("Restore complete!", "success")
        return payload

    def list_backups(self, limit=CLI_LIST_LIMIT):
        return self.store.list_backups(limit)
