"""Password hashing.

Argon2id encoded hashes carry their own salt and cost parameters, so a hash
produced under old settings still verifies after the settings change.
"""

from __future__ import annotations

import secrets
from functools import cached_property
from typing import Protocol

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from accounts_service.core.config import SETTINGS, Settings
from accounts_service.core.metrics import PASSWORD_HASH_SECONDS


class Hasher(Protocol):
    def hash(self, plain_password: str) -> str: ...
    def verify(self, plain_password: str, password_hash: str) -> bool: ...
    def dummy_verify(self, plain_password: str) -> bool: ...


class Argon2Hasher:
    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost: int = 64 * 1024,
        parallelism: int = 4,
    ) -> None:
        self._ph = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    @classmethod
    def from_settings(cls, settings: Settings = SETTINGS) -> Argon2Hasher:
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
        )

    def hash(self, plain_password: str) -> str:
        if not plain_password:
            raise ValueError("password must be non-empty")
        with PASSWORD_HASH_SECONDS.time():
            return self._ph.hash(plain_password)

    # verify() must swallow Argon2 errors and answer False
    def verify(self, plain_password: str, password_hash: str) -> bool:
        if not plain_password or not password_hash:
            return False
        try:
            return self._ph.verify(password_hash, plain_password)
        except (VerifyMismatchError, VerificationError, InvalidHash):
            return False

    @cached_property
    def _dummy_hash(self) -> str:
        return self._ph.hash(secrets.token_urlsafe(32))

    def dummy_verify(self, plain_password: str) -> bool:
        """Spend the cost of a real verify() on a hash nothing can match.

        Used when the account does not exist. Always False.
        """
        self.verify(plain_password, self._dummy_hash)
        return False
