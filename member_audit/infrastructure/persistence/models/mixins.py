"""SQLAlchemy mixins for common model patterns.

Provides: IntIdMixin and StampedMixin (created/updated actor + timestamp,
written by the save interceptor rather than server defaults so that
UpdatedAt/UpdatedBy stay null until the first real modification).
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


class IntIdMixin:
    """Mixin for models using an autoincrement integer primary key."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(Integer, primary_key=True, autoincrement=True)


class StampedMixin:
    """Mixin for created_at/created_by and updated_at/updated_by (actor names)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(String(256), nullable=True)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def updated_by(cls) -> Mapped[str | None]:
        return mapped_column(String(256), nullable=True)


class StampedModel(IntIdMixin, StampedMixin):
    """Combined mixin: integer id + created/updated stamps. Common for business entities."""

    __abstract__ = True
