class AIHBackupError(Exception):
    """Base class for all errors raised by aih_backup."""


class StoreError(AIHBackupError):
    """A backup store operation failed."""


class StoreConnectionError(StoreError):
    """The backup store could not be opened or prepared."""


class BackupNotFoundError(AIHBackupError, LookupError):
    def __init__(self, backup_id):
        self.backup_id = backup_id
        super().__init__(f"Backup {backup_id} not found")
