import logging
from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    func,
    select,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError

from aih_backup.core.errors import StoreConnectionError, StoreError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

metadata = MetaData()

backups_table = Table(
    "aih_backups",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("created_at", DateTime, server_default=func.now()),
    Column("data", JSON().with_variant(JSONB(), "postgresql"), nullable=False),
    Column("workspace_hash", String(64)),
    Column("memory_hash", String(64)),
)


def format_timestamp(value):
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    return value


def _row_to_dict(row):
    record = dict(row._mapping)
    record["created_at"] = format_timestamp(record.get("created_at"))
    return record


class BackupStore:
    """
    Backup records in the ``aih_backups`` table.

    ``database_url`` is any SQLAlchemy URL (sqlite by default, PostgreSQL with
    the ``postgres`` extra). No connection is held between calls: every
    operation checks one out of the engine's pool and returns it before
    returning.
    """

    def __init__(self, database_url):
        self.database_url = database_url
        try:
            self.engine = create_engine(database_url, pool_pre_ping=True)
        except (SQLAlchemyError, ImportError) as e:
            logger.error(f"Invalid database URL: {e}")
            raise StoreConnectionError(f"Cannot use database URL: {e}") from e

    def init_db(self):
        """Opens the database and creates the backups table if needed."""
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Database initialization error: {e}")
            raise StoreConnectionError(f"Cannot open database: {e}") from e
        logger.info(f"Tables ready ({self.engine.url.render_as_string(hide_password=True)})")

    def add_backup(self, name, data, workspace_hash, memory_hash):
        """Inserts a backup row and returns its id."""
        stmt = backups_table.insert().values(
            name=name,
            data=data,
            workspace_hash=workspace_hash,
            memory_hash=memory_hash,
        )
        try:
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
                return result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            logger.error(f"Failed to save backup '{name}': {e}")
            raise StoreError(f"Could not save backup: {e}") from e

    def get_backup(self, backup_id):
        """Returns the full backup row with its payload decoded, or None."""
        stmt = select(backups_table).where(backups_table.c.id == backup_id)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read backup {backup_id}: {e}")
            raise StoreError(f"Could not read backup {backup_id}: {e}") from e
        if row is None:
            return None
        return _row_to_dict(row)

    def list_backups(self, limit):
        """Most recent backups first, without their payloads."""
        t = backups_table
        stmt = (
            select(t.c.id, t.c.name, t.c.created_at)
            .order_by(t.c.created_at.desc(), t.c.id.desc())
            .limit(limit)
        )
        try:
            with self.engine.connect() as conn:
                return [_row_to_dict(row) for row in conn.execute(stmt)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list backups: {e}")
            raise StoreError(f"Could not list backups: {e}") from e
