"""
Extension points of the append engine

Provides:
- LogFilters: should-log decision points, context filters and inserted listeners
- EventCounter: counter of events logged by the process
- CacheIncrementor: token bumped after each insert so readers can drop caches
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

GlobalDecision = Callable[[str, str, Mapping, Any], bool]
ProducerDecision = Callable[[], bool]
ContextFilter = Callable[[dict, Mapping, Any], dict]
InsertedListener = Callable[[Mapping, Mapping | None, Any], None]


class LogFilters:
    """Registered callbacks consulted while an event is appended

    Decision points, checked in this order, first False wins:
    - global: fn(level, message, context, producer) -> bool
    - per producer: fn() -> bool
    - per producer and message key: fn() -> bool
    """

    def __init__(self):
        self._global: list[GlobalDecision] = []
        self._producer: dict[str, list[ProducerDecision]] = defaultdict(list)
        self._message: dict[tuple[str, str | None], list[ProducerDecision]] = defaultdict(list)
        self._context_filters: list[ContextFilter] = []
        self._inserted: list[InsertedListener] = []

    def add_global(self, decision: GlobalDecision) -> None:
        self._global.append(decision)

    def add_producer(self, slug: str, decision: ProducerDecision) -> None:
        self._producer[slug].append(decision)

    def add_message(self, slug: str, message_key: str | None, decision: ProducerDecision) -> None:
        self._message[(slug, message_key)].append(decision)

    def add_context_filter(self, context_filter: ContextFilter) -> None:
        """fn(context, event_row, producer) -> context, run before context is written"""
        self._context_filters.append(context_filter)

    def add_inserted_listener(self, listener: InsertedListener) -> None:
        """fn(context, event_row, producer), called after an event was inserted"""
        self._inserted.append(listener)

    def should_log(self, level: str, message: str, context: Mapping, producer) -> bool:
        if not all(decision(level, message, context, producer) for decision in self._global):
            return False
        if not all(decision() for decision in self._producer.get(producer.slug, [])):
            return False
        message_key = context.get("_message_key")
        return all(decision() for decision in self._message.get((producer.slug, message_key), []))

    def filter_context(self, context: dict, event_row: Mapping, producer) -> dict:
        for context_filter in self._context_filters:
            context = context_filter(context, event_row, producer)
        return context

    def notify_inserted(self, context: Mapping, event_row: Mapping | None, producer) -> None:
        for listener in self._inserted:
            try:
                listener(context, event_row, producer)
            except Exception:
                logger.exception("Inserted listener failed")


class EventCounter:
    """Counts events logged by this process"""

    def __init__(self):
        self._lock = threading.Lock()
        self._total = 0
        self._by_level: dict[str, int] = defaultdict(int)

    def increment(self, level: str) -> None:
        with self._lock:
            self._total += 1
            self._by_level[level] += 1

    @property
    def total(self) -> int:
        return self._total

    def by_level(self) -> dict[str, int]:
        with self._lock:
            return dict(self._by_level)


class CacheIncrementor:
    """History version that changes every time an event is stored

    Clients caching history listings compare it to know when to reload.
    """

    def __init__(self):
        self._value = 0

    def invalidate(self) -> None:
        self._value += 1

    @property
    def value(self) -> int:
        return self._value
