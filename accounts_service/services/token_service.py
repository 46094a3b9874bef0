"""Signed access tokens (JWT, ES256).

``JwtTokenIssuer`` both issues tokens (POST /sessions) and verifies them
(the bearer dependency in api/dependencies.py), so the two sides always
agree on key, algorithm and claims.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Protocol

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from accounts_service.core.config import SETTINGS, Settings
from accounts_service.models.user import Role

logger = logging.getLogger(__name__)

ALGORITHM = "ES256"
ISSUER = "accounts-service"
AUDIENCE = "accounts-service"
REQUIRED_CLAIMS = ["sub", "exp", "iat", "jti"]


class TokenIssuer(Protocol):
    def issue(self, *, subject: str, role: Role = Role.USER) -> str: ...
    def verify(self, token: str) -> dict: ...


class JwtTokenIssuer:
    def __init__(
        self,
        private_key: ec.EllipticCurvePrivateKey,
        *,
        ttl: timedelta = timedelta(minutes=15),
    ) -> None:
        self._private_key = private_key
        self._public_key = private_key.public_key()
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings = SETTINGS) -> JwtTokenIssuer:
        """Load the signing key from JWT_PRIVATE_KEY, or generate one.

        A generated key lives only as long as the process, so tokens stop
        verifying after a restart and across replicas.
        """
        if settings.jwt_private_key:
            key = serialization.load_pem_private_key(
                settings.jwt_private_key.encode(), password=None
            )
            if not isinstance(key, ec.EllipticCurvePrivateKey):
                raise ValueError("JWT_PRIVATE_KEY must be an EC (P-256) private key")
        else:
            if settings.is_prod:
                logger.warning(
                    "JWT_PRIVATE_KEY not set: signing with an ephemeral key"
                )
            key = ec.generate_private_key(ec.SECP256R1())
        return cls(key, ttl=timedelta(minutes=settings.access_token_ttl_min))

    def issue(self, *, subject: str, role: Role = Role.USER) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": subject,
            "role": role.value,
            "iss": ISSUER,
            "aud": AUDIENCE,
            "iat": now,
            "exp": now + self.ttl,
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(payload, self._private_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        """Check signature, expiry, issuer and audience; return the claims.

        The algorithm is pinned, so ``alg: none`` and HS/ES confusion are
        rejected. Raises ``jwt.ExpiredSignatureError`` or another
        ``jwt.InvalidTokenError`` on failure.
        """
        return jwt.decode(
            token,
            self._public_key,
            algorithms=[ALGORITHM],
            issuer=ISSUER,
            audience=AUDIENCE,
            options={"require": REQUIRED_CLAIMS},
        )
