"""
Built-in producers
"""

from auditlog.producers.history import HistoryLogger
from auditlog.producers.posts import PostLogger
from auditlog.producers.users import UserLogger

BUILTIN_PRODUCERS = (HistoryLogger, PostLogger, UserLogger)

__all__ = ["BUILTIN_PRODUCERS", "HistoryLogger", "PostLogger", "UserLogger"]
