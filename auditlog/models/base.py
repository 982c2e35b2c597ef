"""
Base model class for SQLAlchemy ORM

Provides:
- Base DeclarativeBase for all models
- CreatedAtMixin for automatic created_at tracking
"""

from datetime import datetime
from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models"""

    pass


class CreatedAtMixin:
    """Mixin class for automatic insertion timestamp tracking

    History rows are written once and never updated, so there is no
    updated_at column.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
