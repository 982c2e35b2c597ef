"""
Context batching writer

Serializes a context bag and writes it to the context store as size-bounded
multi-row inserts.
"""

import json
import logging
import re
from typing import Any, Iterable, Mapping, Protocol

from auditlog.exceptions import StorageError

logger = logging.getLogger(__name__)

# Chosen to stay far below the transport limit (MySQL max_allowed_packet)
DEFAULT_BATCH_CEILING = 500000
# Models the INSERT statement syntax around each row
DEFAULT_ROW_OVERHEAD = 100

# Characters outside the BMP take 4 bytes in UTF-8; utf8 (utf8mb3) columns reject them
_WIDE_CHARS = re.compile("[\U00010000-\U0010FFFF]")


class ContextStore(Protocol):
    def insert_batch(self, event_id: int, rows: list[tuple[str, str]]) -> None: ...


def serialize_value(value: Any) -> str:
    """Strings are stored as-is, everything else as pretty-printed JSON"""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=4, default=str)


def strip_wide_chars(value: str) -> str:
    return _WIDE_CHARS.sub("", value)


def estimate_row_size(key: str, value: str, overhead: int = DEFAULT_ROW_OVERHEAD) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8")) + overhead


def prepare_rows(context: Mapping | Iterable[tuple[Any, Any]]) -> list[tuple[str, str]]:
    """Serialize and sanitize context entries into (key, value) rows"""
    items = context.items() if isinstance(context, Mapping) else context
    return [(str(key), strip_wide_chars(serialize_value(value))) for key, value in items]


def build_batches(
    rows: list[tuple[str, str]],
    ceiling: int = DEFAULT_BATCH_CEILING,
    overhead: int = DEFAULT_ROW_OVERHEAD,
) -> list[list[tuple[str, str]]]:
    """Group rows into batches whose estimated size stays at or under `ceiling`

    A row that alone exceeds the ceiling becomes a single-row batch.
    """
    batches: list[list[tuple[str, str]]] = []
    current: list[tuple[str, str]] = []
    current_size = 0

    for key, value in rows:
        row_size = estimate_row_size(key, value, overhead)

        if row_size > ceiling:
            if current:
                batches.append(current)
                current, current_size = [], 0
            batches.append([(key, value)])
            continue

        if current and current_size + row_size > ceiling:
            batches.append(current)
            current, current_size = [], 0

        current.append((key, value))
        current_size += row_size

    if current:
        batches.append(current)

    return batches


class ContextBatchWriter:
    """Writes context bags through a ContextStore in bounded batches"""

    def __init__(
        self,
        store: ContextStore,
        ceiling: int = DEFAULT_BATCH_CEILING,
        overhead: int = DEFAULT_ROW_OVERHEAD,
    ):
        self.store = store
        self.ceiling = ceiling
        self.overhead = overhead

    def write(self, event_id: int | None, context: Mapping | None) -> bool:
        """Write all context entries for an event

        An entry whose value cannot be serialized is logged and left out.
        Batches are written in order. A failed batch is logged and skipped;
        earlier batches stay written and later ones are still attempted.

        Returns:
            False if there was nothing to write, an entry was left out or
            a batch failed
        """
        if not event_id or not isinstance(context, Mapping) or not context:
            return False

        all_written = True
        rows = []
        for key, value in context.items():
            try:
                rows.extend(prepare_rows([(key, value)]))
            except (TypeError, ValueError, RecursionError) as e:
                all_written = False
                logger.error(f"Context key {key!r} for event {event_id} not serializable: {e}")

        batches = build_batches(rows, self.ceiling, self.overhead)

        for number, batch in enumerate(batches, start=1):
            try:
                self.store.insert_batch(event_id, batch)
            except StorageError as e:
                all_written = False
                logger.error(
                    f"Context batch {number}/{len(batches)} for event {event_id} "
                    f"({len(batch)} rows) failed: {e}"
                )
            except Exception:
                all_written = False
                logger.exception(
                    f"Context batch {number}/{len(batches)} for event {event_id} "
                    f"({len(batch)} rows) failed unexpectedly"
                )
        return all_written
