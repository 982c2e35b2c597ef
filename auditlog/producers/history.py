"""
The engine's own producer, used by maintenance jobs and the CLI
"""

from auditlog.core.producer import Producer


class HistoryLogger(Producer):
    """Logs events about the history log itself"""

    slug = "HistoryLogger"

    def get_info(self) -> dict:
        return {
            "name": "History Logger",
            "description": "Logs events about the audit history itself",
            "messages": {
                "events_logged_stats": "{total} events logged since start",
                "tables_initialized": "Initialized history database tables",
            },
        }

    def log_stats(self):
        """Log the counters of the engine this producer belongs to"""
        counter = self.engine.counter
        context = {"total": counter.total, "by_level": counter.by_level()}
        return self.debug_message("events_logged_stats", context)
