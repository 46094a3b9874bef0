from __future__ import annotations

import logging
from dataclasses import dataclass

from starlette.concurrency import run_in_threadpool

from accounts_service.core.errors import InvalidCredentialsError
from accounts_service.core.metrics import SESSION_ATTEMPTS
from accounts_service.core.result import Err, Ok, Result
from accounts_service.models.user import normalize_email
from accounts_service.repos.user_repo import UserRepo
from accounts_service.services.hashing import Hasher
from accounts_service.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AccessGrant:
    access_token: str


async def authenticate_user(
    repo: UserRepo,
    hasher: Hasher,
    issuer: TokenIssuer,
    *,
    email: str,
    password: str,
) -> Result[AccessGrant, InvalidCredentialsError]:
    """Exchange email + password for a signed access token.

    Unknown email and wrong password produce the same error so responses
    cannot be used to discover which addresses have accounts. Hashing runs
    in the threadpool. Nothing is written; the token is self-contained.
    """
    email = normalize_email(email)

    user = await repo.get_by_email(email)
    if user is None:
        # same Argon2 cost as a real check, so timing does not reveal the miss
        await run_in_threadpool(hasher.dummy_verify, password)
        logger.info("Authentication failed: unknown email=%s", email)
        SESSION_ATTEMPTS.labels(outcome="invalid_credentials").inc()
        return Err(InvalidCredentialsError())

    if not await run_in_threadpool(hasher.verify, password, user.password_hash):
        logger.info("Authentication failed: bad password user_id=%s", user.id)
        SESSION_ATTEMPTS.labels(outcome="invalid_credentials").inc()
        return Err(InvalidCredentialsError())

    token = issuer.issue(subject=str(user.id), role=user.role)
    SESSION_ATTEMPTS.labels(outcome="issued").inc()
    logger.info("Issued access token user_id=%s", user.id)
    return Ok(AccessGrant(access_token=token))
