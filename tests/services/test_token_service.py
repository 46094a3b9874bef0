from __future__ import annotations

import base64
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from accounts_service.core.config import Settings
from accounts_service.models.user import Role
from accounts_service.services.token_service import (
    ALGORITHM,
    AUDIENCE,
    ISSUER,
    JwtTokenIssuer,
)


@pytest.fixture
def private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def issuer(private_key: ec.EllipticCurvePrivateKey) -> JwtTokenIssuer:
    return JwtTokenIssuer(private_key)


def _settings(**overrides) -> Settings:
    params = {
        "app_env": "test",
        "log_level": "info",
        "log_json": False,
        "port": 8000,
        "database_url": None,
    }
    params.update(overrides)
    return Settings(**params)  # type: ignore[arg-type]


def test_issued_token_verifies_with_subject(issuer: JwtTokenIssuer) -> None:
    token = issuer.issue(subject="user-123")
    claims = issuer.verify(token)
    assert claims["sub"] == "user-123"
    assert claims["role"] == "USER"
    assert claims["iss"] == ISSUER
    assert claims["aud"] == AUDIENCE


def test_token_carries_role(issuer: JwtTokenIssuer) -> None:
    claims = issuer.verify(issuer.issue(subject="u", role=Role.ADMIN))
    assert claims["role"] == "ADMIN"


def test_token_expires_after_ttl(private_key: ec.EllipticCurvePrivateKey) -> None:
    issuer = JwtTokenIssuer(private_key, ttl=timedelta(minutes=5))
    claims = issuer.verify(issuer.issue(subject="u"))
    assert claims["exp"] - claims["iat"] == 5 * 60


def test_tokens_are_unique_per_issue(issuer: JwtTokenIssuer) -> None:
    first = issuer.issue(subject="u")
    second = issuer.issue(subject="u")
    assert first != second
    assert issuer.verify(first)["jti"] != issuer.verify(second)["jti"]


def test_verify_rejects_expired_token(issuer: JwtTokenIssuer) -> None:
    expired = JwtTokenIssuer(issuer._private_key, ttl=timedelta(seconds=-1))
    with pytest.raises(jwt.ExpiredSignatureError):
        issuer.verify(expired.issue(subject="u"))


def test_verify_rejects_token_from_other_key(issuer: JwtTokenIssuer) -> None:
    other = JwtTokenIssuer(ec.generate_private_key(ec.SECP256R1()))
    with pytest.raises(jwt.InvalidSignatureError):
        issuer.verify(other.issue(subject="u"))


def test_verify_rejects_tampered_token(issuer: JwtTokenIssuer) -> None:
    header, payload, signature = issuer.issue(subject="u").split(".")
    forged = base64.urlsafe_b64encode(b'{"sub":"admin"}').rstrip(b"=").decode()
    assert forged != payload
    with pytest.raises(jwt.InvalidTokenError):
        issuer.verify(f"{header}.{forged}.{signature}")


def test_verify_rejects_hs256_token(issuer: JwtTokenIssuer) -> None:
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": "u",
            "iss": ISSUER,
            "aud": AUDIENCE,
            "iat": now,
            "exp": now + timedelta(minutes=1),
            "jti": "x",
        },
        "shared-secret",
        algorithm="HS256",
    )
    with pytest.raises(jwt.InvalidTokenError):
        issuer.verify(token)


def test_verify_rejects_wrong_audience(
    issuer: JwtTokenIssuer, private_key: ec.EllipticCurvePrivateKey
) -> None:
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": "u",
            "iss": ISSUER,
            "aud": "some-other-service",
            "iat": now,
            "exp": now + timedelta(minutes=1),
            "jti": "x",
        },
        private_key,
        algorithm=ALGORITHM,
    )
    with pytest.raises(jwt.InvalidAudienceError):
        issuer.verify(token)


def test_from_settings_loads_pem_key(private_key: ec.EllipticCurvePrivateKey) -> None:
    pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    loaded = JwtTokenIssuer.from_settings(
        _settings(jwt_private_key=pem, access_token_ttl_min=30)
    )

    # a token from the loaded key verifies under the original key
    claims = JwtTokenIssuer(private_key).verify(loaded.issue(subject="u"))
    assert claims["sub"] == "u"
    assert loaded.ttl == timedelta(minutes=30)


def test_from_settings_generates_key_when_unset() -> None:
    issuer = JwtTokenIssuer.from_settings(_settings())
    assert issuer.verify(issuer.issue(subject="u"))["sub"] == "u"


def test_from_settings_rejects_non_ec_key() -> None:
    from cryptography.hazmat.primitives.asymmetric import rsa

    rsa_pem = (
        rsa.generate_private_key(public_exponent=65537, key_size=2048)
        .private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        .decode()
    )
    with pytest.raises(ValueError, match="EC"):
        JwtTokenIssuer.from_settings(_settings(jwt_private_key=rsa_pem))
