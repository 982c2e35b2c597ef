"""
Event and context store implementations
"""

from auditlog.stores.memory import InMemoryContextStore, InMemoryEventStore, NoRecovery
from auditlog.stores.sql import SqlContextStore, SqlEventStore, SqlStorageRecovery

__all__ = [
    "InMemoryContextStore",
    "InMemoryEventStore",
    "NoRecovery",
    "SqlContextStore",
    "SqlEventStore",
    "SqlStorageRecovery",
]
