"""
SQLAlchemy-backed event and context stores

Database failures reach the engine as StorageError / StorageMissingError,
raised by DatabaseManager.session_context.
"""

from typing import Mapping

from sqlalchemy import insert

from auditlog.db import DatabaseManager
from auditlog.models import HistoryContext, HistoryEvent


class SqlEventStore:
    """Inserts history rows"""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def insert(self, fields: Mapping) -> int:
        """Insert one event row

        Returns:
            Id assigned by the database

        Raises:
            StorageMissingError: history table does not exist
            StorageError: any other database failure
        """
        with self.db_manager.session_context() as session:
            row = HistoryEvent(**fields)
            session.add(row)
            session.flush()
            return row.id


class SqlContextStore:
    """Inserts context rows, one statement per batch"""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def insert_batch(self, event_id: int, rows: list[tuple[str, str]]) -> None:
        if not rows:
            return
        values = [{"history_id": event_id, "key": key, "value": value} for key, value in rows]
        with self.db_manager.session_context() as session:
            session.execute(insert(HistoryContext), values)


class SqlStorageRecovery:
    """Recreates the history tables when they are missing"""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def recreate_if_missing(self) -> bool:
        return self.db_manager.recreate_tables_if_missing()
