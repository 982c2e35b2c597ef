"""
Exception types raised by storage collaborators

The append engine catches these; they never reach the code that logs
an event.
"""


class AuditLogError(Exception):
    """Base class for all audit log errors"""


class StorageError(AuditLogError):
    """A store could not persist a record"""


class StorageMissingError(StorageError):
    """The table (or other storage object) a store writes to does not exist"""


# Substrings used by SQLite, MySQL/MariaDB and PostgreSQL for missing tables
MISSING_TABLE_MARKERS = (
    "no such table",
    "doesn't exist",
    "does not exist",
    "undefined table",
)


def is_table_missing_error(error_message: str) -> bool:
    """Check if a database error message indicates a missing table

    Args:
        error_message: Text of the driver error

    Returns:
        True if the message matches a known "table is missing" phrasing
    """
    message = (error_message or "").lower()
    return any(marker in message for marker in MISSING_TABLE_MARKERS)
