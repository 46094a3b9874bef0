from __future__ import annotations

from typing import Protocol
from uuid import UUID

from accounts_service.models.user import User


class DuplicateEmailError(Exception):
    """Raised by ``UserRepo.add`` when the email is already stored."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"email already exists: {email}")


class UserRepo(Protocol):
    # Emails are passed already normalized; lookups are exact matches.
    async def get_by_email(self, email: str) -> User | None: ...
    async def get_by_id(self, user_id: UUID) -> User | None: ...
    async def add(self, user: User) -> None: ...


class InMemoryUserRepo:
    """Dict-backed store for local runs without DATABASE_URL and for tests."""

    def __init__(self) -> None:
        self._by_email: dict[str, User] = {}
        self._by_id: dict[UUID, User] = {}

    def __len__(self) -> int:
        return len(self._by_id)

    async def get_by_email(self, email: str) -> User | None:
        return self._by_email.get(email)

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._by_id.get(user_id)

    async def add(self, user: User) -> None:
        # No await between check and insert, so this is atomic on the loop.
        if user.email in self._by_email:
            raise DuplicateEmailError(user.email)
        self._by_email[user.email] = user
        self._by_id[user.id] = user

    def clear(self) -> None:
        self._by_email.clear()
        self._by_id.clear()
