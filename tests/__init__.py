"""
tests/__init__.py
Test package initialization with shared producers and base test case
"""

import os
import sys
import unittest
from datetime import datetime

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from auditlog.core.engine import HistoryEngine
from auditlog.core.producer import Producer
from auditlog.stores.memory import InMemoryContextStore, InMemoryEventStore

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0)


class SampleLogger(Producer):
    """Producer with a couple of declared messages, used across tests"""

    slug = "SampleLogger"

    def get_info(self) -> dict:
        return {
            "name": "Sample Logger",
            "description": "Producer used by the test suite",
            "messages": {
                "page_updated": 'Updated page "{post_title}"',
                "item_removed": ("Sample logger: item removed", "Removed item {item}"),
            },
        }


def make_memory_engine(**kwargs) -> HistoryEngine:
    """Engine on in-memory stores with a fixed clock"""
    kwargs.setdefault("clock", lambda: FIXED_NOW)
    return HistoryEngine(InMemoryEventStore(), InMemoryContextStore(), **kwargs)


class BaseTestCase(unittest.TestCase):
    """Base test case with an in-memory engine and a registered SampleLogger"""

    def setUp(self):
        """Set up test fixtures"""
        self.engine = make_memory_engine()
        self.events = self.engine.event_store.events
        self.context_store = self.engine.context_writer.store
        self.producer = self.engine.register(SampleLogger)

    def context_of(self, event_id):
        """Stored context of an event as a key -> serialized value dict"""
        return self.context_store.context_for(event_id)


def drop_history_tables(db_manager) -> None:
    """Drop the history tables behind a running manager"""
    from auditlog.models import Base

    Base.metadata.drop_all(db_manager.engine)
