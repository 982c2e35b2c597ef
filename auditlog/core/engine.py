"""
Event append engine

Turns (level, message, context) reports from producers into a history row
plus context rows. Logging never raises into the caller: rejected input,
vetoed events and storage failures all end in "nothing was logged".
"""

import gettext
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from auditlog.core import runtime
from auditlog.core.actor import ActorResolver
from auditlog.core.catalog import load_translations
from auditlog.core.context_writer import (
    DEFAULT_BATCH_CEILING,
    DEFAULT_ROW_OVERHEAD,
    ContextBatchWriter,
)
from auditlog.core.hooks import CacheIncrementor, EventCounter, LogFilters
from auditlog.core.levels import Initiator, LogLevel
from auditlog.core.network import collect_network_fields
from auditlog.core.occasions import compute_occasions_id
from auditlog.exceptions import StorageError, StorageMissingError
from auditlog.stores.memory import NoRecovery

logger = logging.getLogger(__name__)

DEFAULT_IP_HEADER_NAMES = (
    "HTTP_CLIENT_IP",
    "HTTP_X_FORWARDED_FOR",
    "HTTP_X_FORWARDED",
    "HTTP_X_CLUSTER_CLIENT_IP",
    "HTTP_FORWARDED_FOR",
    "HTTP_FORWARDED",
)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    """Current time as naive UTC, the format of the date column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_event_date(value: Any) -> datetime | None:
    """Parse a `_date` override into naive UTC, None if it is not a date"""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.strptime(value.strip(), DATE_FORMAT)
        except ValueError:
            try:
                parsed = datetime.fromisoformat(value.strip())
            except ValueError:
                return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class HistoryEngine:
    """Validates, enriches and persists events reported by producers"""

    def __init__(
        self,
        event_store,
        context_store,
        recovery=None,
        filters: LogFilters | None = None,
        counter: EventCounter | None = None,
        cache: CacheIncrementor | None = None,
        actor_resolver: ActorResolver | None = None,
        account_provider: Callable[[], runtime.Account | None] = runtime.current_account,
        request_info_provider: Callable[[], runtime.RequestInfo | None] = runtime.current_request_info,
        ip_header_names: Iterable[str] = DEFAULT_IP_HEADER_NAMES,
        anonymize_ip: bool = True,
        batch_ceiling: int = DEFAULT_BATCH_CEILING,
        row_overhead: int = DEFAULT_ROW_OVERHEAD,
        translations: gettext.NullTranslations | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.event_store = event_store
        self.recovery = recovery or NoRecovery()
        self.context_writer = ContextBatchWriter(context_store, batch_ceiling, row_overhead)
        self.filters = filters or LogFilters()
        self.counter = counter or EventCounter()
        self.cache = cache or CacheIncrementor()
        self.account_provider = account_provider
        self.actor_resolver = actor_resolver or ActorResolver(account_provider)
        self.request_info_provider = request_info_provider
        self.ip_header_names = tuple(ip_header_names)
        self.anonymize_ip = anonymize_ip
        self.translations = translations or gettext.NullTranslations()
        self.clock = clock
        self.producers: dict = {}

    @classmethod
    def from_config(cls, db_manager, config=None, **kwargs) -> "HistoryEngine":
        """Engine writing to the database of `db_manager`, tuned by `config`

        Args:
            db_manager: DatabaseManager for the history tables
            config: Config class (defaults to get_config())
            **kwargs: Overrides for any constructor argument
        """
        from auditlog.stores.sql import SqlContextStore, SqlEventStore, SqlStorageRecovery
        from config.settings import get_config

        config = config or get_config()
        options = {
            "recovery": SqlStorageRecovery(db_manager),
            "actor_resolver": ActorResolver(
                kwargs.get("account_provider", runtime.current_account),
                verbose_diagnostics=config.VERBOSE_DIAGNOSTICS(),
            ),
            "ip_header_names": config.IP_HEADER_NAMES(),
            "anonymize_ip": config.ANONYMIZE_IP(),
            "batch_ceiling": config.CONTEXT_BATCH_CEILING(),
            "row_overhead": config.CONTEXT_ROW_OVERHEAD(),
            "translations": load_translations(
                config.LOCALE_DIR(), config.LANGUAGE(), config.TEXT_DOMAIN()
            ),
        }
        options.update(kwargs)
        return cls(SqlEventStore(db_manager), SqlContextStore(db_manager), **options)

    # ------------------------------------------------------------------ #
    #  Producer registry                                                  #
    # ------------------------------------------------------------------ #
    def register(self, producer_cls):
        """Instantiate and register a producer class, returning the instance"""
        producer = producer_cls(self)
        if not producer.slug:
            raise ValueError(f"{producer_cls.__name__} has no slug")
        self.producers[producer.slug] = producer
        producer.loaded()
        logger.debug(f"Registered producer {producer.slug}")
        return producer

    def get_producer(self, slug: str):
        return self.producers.get(slug)

    # ------------------------------------------------------------------ #
    #  Append                                                             #
    # ------------------------------------------------------------------ #
    def append(self, producer, level, message, context=None) -> int | None:
        """Log an event for `producer`

        Returns:
            Id of the new history row, or None if nothing was logged
        """
        try:
            return self._append(producer, level, message, context)
        except Exception:
            logger.exception(f"Logging failed for producer {getattr(producer, 'slug', '?')}")
            return None

    def _append(self, producer, level, message, context) -> int | None:
        if not isinstance(level, str) or not isinstance(message, str):
            return None
        try:
            level = LogLevel(level.lower()).value
        except ValueError:
            return None

        context = dict(context) if isinstance(context, Mapping) else {}

        if not message.strip():
            return None

        if not self.filters.should_log(level, message, context, producer):
            return None

        # Always store source text, even when handed a translated message
        entry = producer.catalog.source_for_localized(message)
        if entry is not None:
            message = entry.source_text

        data = {
            "logger": producer.slug,
            "level": level,
            "date": self.clock(),
            "message": message.strip(),
        }

        if "_date" in context:
            date = parse_event_date(context.pop("_date"))
            if date is not None:
                data["date"] = date

        data["occasions_id"] = compute_occasions_id(producer.slug, data, context)

        initiator = None
        if "_initiator" in context:
            override = context.pop("_initiator")
            initiator = Initiator.coerce(override)
            if initiator is None:
                logger.warning(f"Ignoring unknown initiator {override!r}")
        if initiator is None:
            initiator, extra = self.actor_resolver.resolve()
            context.update(extra)
        data["initiator"] = initiator.value

        if runtime.is_rpc_request() and "_rpc_request" not in context:
            context["_rpc_request"] = True
        if runtime.is_rest_api_request() and "_rest_api_request" not in context:
            context["_rest_api_request"] = True

        event_id = self._insert_event(data)
        if event_id is None:
            return None

        # The row exists from here on: failures below cost context, never the event
        try:
            self._add_request_fields(context)
        except Exception:
            logger.exception(f"Could not add account or network fields to event {event_id}")

        try:
            context = self.filters.filter_context(context, data, producer)
        except Exception:
            logger.exception(f"Context filter failed, no context written for event {event_id}")
            context = {}

        self.context_writer.write(event_id, context)

        producer.last_insert_id = event_id
        producer.last_insert_context = context
        producer.last_insert_data = data
        self.counter.increment(level)
        self.cache.invalidate()
        self.filters.notify_inserted(context, data, producer)

        return event_id

    def _add_request_fields(self, context: dict) -> None:
        """Account and network-origin fields of the current request"""
        if "_user_id" not in context:
            account = self.account_provider()
            if account is not None:
                context.update(account.as_context())

        request_info = self.request_info_provider()
        if request_info is not None:
            context.update(
                collect_network_fields(
                    request_info, context, self.ip_header_names, self.anonymize_ip
                )
            )

    def _insert_event(self, data: dict) -> int | None:
        """Insert the history row, recreating a missing table once"""
        try:
            return self.event_store.insert(data)
        except StorageMissingError as e:
            logger.warning(f"History table missing, trying to recreate it: {e}")
        except StorageError as e:
            logger.error(f"Could not insert history row: {e}")
            return None

        if not self.recovery.recreate_if_missing():
            logger.error("History table could not be recreated, event dropped")
            return None

        try:
            return self.event_store.insert(data)
        except StorageError as e:
            logger.error(f"Could not insert history row after recreating tables: {e}")
            return None

    def append_context(self, event_id, context) -> bool:
        """Write more context rows for an event that is already stored"""
        if not isinstance(context, Mapping):
            return False
        try:
            return self.context_writer.write(event_id, context)
        except Exception:
            logger.exception(f"Appending context to event {event_id} failed")
            return False
