"""
In-memory stores for embedding without a database and for tests
"""

import itertools
from typing import Mapping


class InMemoryEventStore:
    def __init__(self):
        self.events: dict[int, dict] = {}
        self._ids = itertools.count(1)

    def insert(self, fields: Mapping) -> int:
        event_id = next(self._ids)
        self.events[event_id] = {"id": event_id, **fields}
        return event_id


class InMemoryContextStore:
    def __init__(self):
        self.batches: list[tuple[int, list[tuple[str, str]]]] = []

    def insert_batch(self, event_id: int, rows: list[tuple[str, str]]) -> None:
        self.batches.append((event_id, list(rows)))

    def rows_for(self, event_id: int) -> list[tuple[str, str]]:
        return [row for batch_id, rows in self.batches if batch_id == event_id for row in rows]

    def context_for(self, event_id: int) -> dict[str, str]:
        return dict(self.rows_for(event_id))


class NoRecovery:
    """Recovery collaborator for stores that cannot lose their storage"""

    def recreate_if_missing(self) -> bool:
        return False
