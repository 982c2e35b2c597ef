"""
Core logging engine

Provides the append engine and its collaborators:
- HistoryEngine: validates, enriches and persists events
- Producer: base class for components that report events
- ActorResolver, MessageCatalog, ContextBatchWriter, compute_occasions_id
"""

from auditlog.core.actor import ActorResolver
from auditlog.core.catalog import CatalogEntry, MessageCatalog
from auditlog.core.context_writer import ContextBatchWriter
from auditlog.core.engine import HistoryEngine
from auditlog.core.hooks import CacheIncrementor, EventCounter, LogFilters
from auditlog.core.levels import Initiator, LogLevel
from auditlog.core.occasions import compute_occasions_id
from auditlog.core.producer import Producer

__all__ = [
    "ActorResolver",
    "CacheIncrementor",
    "CatalogEntry",
    "ContextBatchWriter",
    "EventCounter",
    "HistoryEngine",
    "Initiator",
    "LogFilters",
    "LogLevel",
    "MessageCatalog",
    "Producer",
    "compute_occasions_id",
]
