from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool

from accounts_service.core.errors import AlreadyExistsError
from accounts_service.core.metrics import ACCOUNT_REGISTRATIONS
from accounts_service.core.result import Err, Ok, Result
from accounts_service.models.user import Role, User, normalize_email
from accounts_service.repos.user_repo import DuplicateEmailError, UserRepo
from accounts_service.services.hashing import Hasher

logger = logging.getLogger(__name__)


async def register_user(
    repo: UserRepo,
    hasher: Hasher,
    *,
    name: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> Result[User, AlreadyExistsError]:
    """Create an account.

    The email is checked before hashing so a taken address costs one read
    and no Argon2 work. Password strength is the caller's concern.

    Returns ``Err(AlreadyExistsError)`` when the email is taken, including
    when a concurrent request wins the race between the check and the
    insert. Store faults raise ``UserStoreError``.
    """
    email = normalize_email(email)

    if await repo.get_by_email(email) is not None:
        logger.warning("Rejected duplicate email=%s", email)
        ACCOUNT_REGISTRATIONS.labels(outcome="already_exists").inc()
        return Err(AlreadyExistsError(email))

    # Argon2 is CPU-bound; keep it off the event loop
    password_hash = await run_in_threadpool(hasher.hash, password)
    user = User.new(
        name=name,
        email=email,
        password_hash=password_hash,
        role=role,
    )

    try:
        await repo.add(user)
    except DuplicateEmailError:
        logger.warning("Duplicate email=%s detected on insert", email)
        ACCOUNT_REGISTRATIONS.labels(outcome="already_exists").inc()
        return Err(AlreadyExistsError(email))

    ACCOUNT_REGISTRATIONS.labels(outcome="created").inc()
    logger.info("Created user id=%s email=%s role=%s", user.id, email, user.role)
    return Ok(user)
