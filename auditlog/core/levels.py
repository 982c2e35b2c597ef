"""
Log levels and initiators
"""

import enum


class LogLevel(str, enum.Enum):
    """Severity levels, most severe first"""
    EMERGENCY = "emergency"
    ALERT = "alert"
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"
    INFO = "info"
    DEBUG = "debug"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls._value2member_map_


class Initiator(str, enum.Enum):
    """Who or what caused an event"""
    END_USER = "end_user"
    AUTOMATED_SYSTEM = "automated_system"
    COMMAND_LINE_TOOL = "command_line_tool"
    UNKNOWN_USER = "unknown_user"
    OTHER = "other"

    @classmethod
    def coerce(cls, value) -> "Initiator | None":
        """Initiator for an enum member or its string value, None otherwise"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls._value2member_map_:
            return cls(value)
        return None
