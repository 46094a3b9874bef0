"""SQLAlchemy table definitions.

Rows are the persistence shape only; repos convert them to and from the
frozen dataclasses in accounts_service/models/.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from accounts_service.db.engine import Base

EMAIL_UNIQUE_CONSTRAINT = "uq_users_email"


class UserRow(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name=EMAIL_UNIQUE_CONSTRAINT),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    # Argon2 encoded hash; the column keeps the historical name "password"
    password_hash: Mapped[str] = mapped_column("password", Text, nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="USER")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
