"""
Base class for producers (components that report events)

Subclass Producer, give it a slug and declare its messages in get_info():

    class PostLogger(Producer):
        slug = "PostLogger"

        def get_info(self):
            return {
                "name": "Post Logger",
                "messages": {"post_updated": 'Updated {post_type} "{post_title}"'},
            }

    posts = engine.register(PostLogger)
    posts.info_message("post_updated", {"post_type": "page", "post_title": "Home"})

The source text is stored with the event; the localized text is only for
display.
"""

from typing import Mapping

from auditlog.core.catalog import MessageCatalog
from auditlog.core.levels import LogLevel


class Producer:
    """Reports events to a HistoryEngine"""

    slug: str = ""

    def __init__(self, engine):
        self.engine = engine
        self.catalog = MessageCatalog(
            lambda: self.get_info().get("messages", {}), engine.translations
        )

        # State of the last successful append, for code that adds context later
        self.last_insert_id: int | None = None
        self.last_insert_context: dict | None = None
        self.last_insert_data: dict | None = None

    def get_info(self) -> dict:
        """Name, description and message declarations of this producer"""
        return {"name": self.slug, "description": "", "messages": {}}

    def loaded(self) -> None:
        """Called once the engine has registered the producer"""

    @property
    def messages(self) -> dict:
        return self.catalog.entries()

    def log(self, level: str, message: str, context: Mapping | None = None) -> int | None:
        """Log a literal message

        Returns:
            Id of the new event, or None if nothing was logged
        """
        return self.engine.append(self, level, message, context)

    def log_by_key(self, level: str, message_key: str, context: Mapping | None = None) -> int | None:
        """Log the declared message `message_key`; unknown keys log nothing"""
        entry = self.catalog.get(message_key)
        if entry is None:
            return None
        context = dict(context) if isinstance(context, Mapping) else {}
        context["_message_key"] = message_key
        return self.log(level, entry.source_text, context)

    def append_more_context(self, event_id: int | None, context: Mapping) -> bool:
        """Attach more context rows to an already stored event"""
        return self.engine.append_context(event_id, context)

    def emergency(self, message, context=None):
        return self.log(LogLevel.EMERGENCY, message, context)

    def emergency_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.EMERGENCY, message_key, context)

    def alert(self, message, context=None):
        return self.log(LogLevel.ALERT, message, context)

    def alert_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.ALERT, message_key, context)

    def critical(self, message, context=None):
        return self.log(LogLevel.CRITICAL, message, context)

    def critical_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.CRITICAL, message_key, context)

    def error(self, message, context=None):
        return self.log(LogLevel.ERROR, message, context)

    def error_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.ERROR, message_key, context)

    def warning(self, message, context=None):
        return self.log(LogLevel.WARNING, message, context)

    def warning_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.WARNING, message_key, context)

    def notice(self, message, context=None):
        return self.log(LogLevel.NOTICE, message, context)

    def notice_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.NOTICE, message_key, context)

    def info(self, message, context=None):
        return self.log(LogLevel.INFO, message, context)

    def info_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.INFO, message_key, context)

    def debug(self, message, context=None):
        return self.log(LogLevel.DEBUG, message, context)

    def debug_message(self, message_key, context=None):
        return self.log_by_key(LogLevel.DEBUG, message_key, context)
