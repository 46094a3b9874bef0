"""FastAPI dependency providers.

Routes never construct collaborators themselves; they ask for a UserRepo,
Hasher or TokenIssuer here. Tests swap any of them through
``app.dependency_overrides``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from accounts_service.db.engine import async_session_factory
from accounts_service.models.principal import Principal
from accounts_service.models.user import Role
from accounts_service.repos.pg_user_repo import PgUserRepo
from accounts_service.repos.user_repo import InMemoryUserRepo, UserRepo
from accounts_service.services.hashing import Argon2Hasher, Hasher
from accounts_service.services.token_service import JwtTokenIssuer, TokenIssuer

logger = logging.getLogger(__name__)

# Process-wide singletons. The in-memory repo is only used when no
# DATABASE_URL is configured.
memory_user_repo = InMemoryUserRepo()
password_hasher = Argon2Hasher.from_settings()
token_issuer = JwtTokenIssuer.from_settings()

_bearer = HTTPBearer(auto_error=False)


async def get_user_repo() -> AsyncGenerator[UserRepo, None]:
    """Yield a request-scoped repo.

    Postgres sessions commit when the handler returns and roll back if it
    raises.
    """
    if async_session_factory is None:
        yield memory_user_repo
        return

    async with async_session_factory() as session:
        try:
            yield PgUserRepo(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_hasher() -> Hasher:
    return password_hasher


def get_token_issuer() -> TokenIssuer:
    return token_issuer


def require_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> Principal:
    """Validate ``Authorization: Bearer <token>`` and return the caller."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = issuer.verify(credentials.credentials)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    try:
        role = Role(claims.get("role", Role.USER))
    except ValueError:
        role = Role.USER
    return Principal(user_id=claims["sub"], role=role)
