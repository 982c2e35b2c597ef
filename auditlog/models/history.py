"""
History models for logged events and their context rows

Tables (names carry the configured table prefix):
- history: one row per logged occurrence
- history_contexts: key/value rows owned by a history row
"""

from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from auditlog.models.base import Base, CreatedAtMixin
from config.settings import Config

TABLE_PREFIX = Config.TABLE_PREFIX()


class HistoryEvent(Base, CreatedAtMixin):
    """Logged event

    The message column always holds the source-language text. The date is
    naive UTC. occasions_id is an advisory grouping hash, it is not unique.
    """

    __tablename__ = f"{TABLE_PREFIX}history"
    __table_args__ = (
        Index(f"idx_{TABLE_PREFIX}history_date", "date"),
        Index(f"idx_{TABLE_PREFIX}history_logger_date", "logger", "date"),
        Index(f"idx_{TABLE_PREFIX}history_occasions", "occasions_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    logger: Mapped[str] = mapped_column(String(30))
    level: Mapped[str] = mapped_column(String(20))
    date: Mapped[datetime] = mapped_column(DateTime)
    message: Mapped[str] = mapped_column(Text)
    initiator: Mapped[str] = mapped_column(String(32))
    occasions_id: Mapped[str] = mapped_column(String(32))

    # Relationships
    contexts: Mapped[list["HistoryContext"]] = relationship(
        "HistoryContext",
        back_populates="event",
        cascade="all, delete-orphan",
    )


class HistoryContext(Base):
    """Context row for a logged event

    Keys are not unique per event; rows are stored as written.
    """

    __tablename__ = f"{TABLE_PREFIX}history_contexts"
    __table_args__ = (
        Index(f"idx_{TABLE_PREFIX}history_contexts_history_id", "history_id"),
        Index(f"idx_{TABLE_PREFIX}history_contexts_key", "key"),
    )

    context_id: Mapped[int] = mapped_column(primary_key=True)
    history_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TABLE_PREFIX}history.id", ondelete="CASCADE")
    )
    key: Mapped[str] = mapped_column(String(255))
    value: Mapped[str | None] = mapped_column(Text, default=None)

    # Relationships
    event: Mapped[HistoryEvent] = relationship("HistoryEvent", back_populates="contexts")
