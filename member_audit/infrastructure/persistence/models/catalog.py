"""Business entities used across the membership application (stamped, audited)."""

from datetime import date

from sqlalchemy import Date, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from member_audit.infrastructure.persistence.database import Base
from member_audit.infrastructure.persistence.models.mixins import StampedModel


class Album(StampedModel, Base):
    """Music catalog album. Table: album."""

    __tablename__ = "album"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)


class Event(StampedModel, Base):
    """Performance or gathering. Table: event."""

    __tablename__ = "event"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # JSON-encoded list of tag ids.
    tags_json: Mapped[str | None] = mapped_column(Text, nullable=True)
