"""
SQLAlchemy ORM models package

Provides data models for all database tables:
- History: HistoryEvent, HistoryContext
"""

from auditlog.models.base import Base, CreatedAtMixin
from auditlog.models.history import HistoryEvent, HistoryContext

__all__ = [
    "Base",
    "CreatedAtMixin",
    "HistoryEvent",
    "HistoryContext",
]
