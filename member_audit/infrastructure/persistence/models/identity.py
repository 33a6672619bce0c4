"""Identity ORM models: application users, roles, and the user<->role join.

Users and roles use string (GUID) keys and are not stamped; their changes
are still audited, with sensitive fields classified by the registry.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from member_audit.infrastructure.persistence.database import Base


def _new_guid() -> str:
    return str(uuid.uuid4())


class ApplicationUser(Base):
    """Member account. Table: app_user."""

    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_guid)
    user_name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    normalized_user_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    security_stamp: Mapped[str | None] = mapped_column(String(64), nullable=True)
    concurrency_stamp: Mapped[str | None] = mapped_column(String(64), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    phone_number_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    two_factor_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lockout_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    lockout_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    access_failed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    degree: Mapped[str | None] = mapped_column(String(200), nullable=True)
    last_login_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # JSON-encoded lists; null, "" and "[]" all mean "none".
    categories_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    positions_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_picture_data: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)


class Role(Base):
    """Named role (e.g. Admin, Treasurer). Table: role."""

    __tablename__ = "role"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_guid)
    name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    normalized_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    concurrency_stamp: Mapped[str | None] = mapped_column(String(64), nullable=True)


class UserRole(Base):
    """User<->role assignment. Table: user_role. Composite key (user_id, role_id)."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True
    )
    role_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("role.id", ondelete="CASCADE"), primary_key=True
    )
