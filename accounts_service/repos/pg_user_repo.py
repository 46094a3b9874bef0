"""PostgreSQL implementation of UserRepo."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from accounts_service.core.errors import UserStoreError
from accounts_service.db.tables import EMAIL_UNIQUE_CONSTRAINT, UserRow
from accounts_service.models.user import Role, User
from accounts_service.repos.user_repo import DuplicateEmailError


class PgUserRepo:
    """Satisfies the UserRepo Protocol using PostgreSQL via SQLAlchemy.

    Driver and connection failures are re-raised as ``UserStoreError``; the
    unique index on ``users.email`` is reported as ``DuplicateEmailError``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_email(self, email: str) -> User | None:
        return await self._one(select(UserRow).where(UserRow.email == email))

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await self._one(select(UserRow).where(UserRow.id == user_id))

    async def add(self, user: User) -> None:
        row = UserRow(
            id=user.id,
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role.value,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        try:
            # SAVEPOINT: a unique violation rolls back only this insert,
            # leaving the request transaction usable.
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError as exc:
            if _violated_constraint(exc) == EMAIL_UNIQUE_CONSTRAINT:
                raise DuplicateEmailError(user.email) from exc
            raise UserStoreError("failed to insert user") from exc
        except SQLAlchemyError as exc:
            raise UserStoreError("failed to insert user") from exc

    async def _one(self, stmt) -> User | None:
        try:
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise UserStoreError("failed to query users") from exc
        if row is None:
            return None
        return _row_to_user(row)


def _violated_constraint(exc: IntegrityError) -> str | None:
    # asyncpg exposes constraint_name on the driver error, which SQLAlchemy
    # wraps as the __cause__ of exc.orig; psycopg2 reports it under diag.
    orig = exc.orig
    sources = (orig, getattr(orig, "__cause__", None), getattr(orig, "diag", None))
    for source in sources:
        name = getattr(source, "constraint_name", None)
        if name:
            return name
    if EMAIL_UNIQUE_CONSTRAINT in str(orig):
        return EMAIL_UNIQUE_CONSTRAINT
    return None


def _row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        role=Role(row.role),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
