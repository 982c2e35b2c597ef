"""
Process-wide history engine

Provides:
- init_history: build the engine on a DatabaseManager and register producers
- get_history: access the engine from anywhere in the host application
"""

import logging

from auditlog.core.engine import HistoryEngine
from auditlog.db import DatabaseManager, get_db_manager, init_db_manager

logger = logging.getLogger(__name__)

# Global history engine instance
_engine: HistoryEngine | None = None


def init_history(
    db_manager: DatabaseManager | None = None,
    producers=None,
    **engine_options,
) -> HistoryEngine:
    """Initialize the global history engine

    Args:
        db_manager: Database to log to (defaults to the global manager,
            initialized from the environment if needed)
        producers: Producer classes to register (defaults to the built-in ones)
        **engine_options: Passed on to HistoryEngine.from_config()

    Returns:
        HistoryEngine instance
    """
    global _engine
    from auditlog.producers import BUILTIN_PRODUCERS

    if db_manager is None:
        try:
            db_manager = get_db_manager()
        except RuntimeError:
            db_manager = init_db_manager()

    engine = HistoryEngine.from_config(db_manager, **engine_options)
    for producer_cls in producers if producers is not None else BUILTIN_PRODUCERS:
        engine.register(producer_cls)

    _engine = engine
    logger.info(f"History engine ready with producers: {', '.join(engine.producers)}")
    return engine


def get_history() -> HistoryEngine:
    """Get global history engine

    Raises:
        RuntimeError: If init_history() has not been called
    """
    if _engine is None:
        raise RuntimeError("History engine not initialized. Call init_history() first.")
    return _engine
