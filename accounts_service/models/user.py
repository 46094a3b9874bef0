from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import StrEnum
from uuid import UUID, uuid4


class Role(StrEnum):
    USER = "USER"
    ADMIN = "ADMIN"


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup.

    Emails compare case-insensitively: ``John@X.com`` and ``john@x.com``
    are the same account.
    """
    return email.strip().lower()


@dataclass(frozen=True, slots=True)
class User:
    id: UUID
    name: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime
    updated_at: datetime | None = None

    @staticmethod
    def new(
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> User:
        name = name.strip()
        if not name:
            raise ValueError("name must be non-empty")
        return User(
            id=uuid4(),
            name=name,
            email=normalize_email(email),
            password_hash=password_hash,
            role=role,
            created_at=datetime.now(UTC),
        )

    def touch(self) -> User:
        """Copy of this user marked as modified now."""
        return replace(self, updated_at=datetime.now(UTC))
