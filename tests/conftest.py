from __future__ import annotations

import os
import sys
from pathlib import Path

# Settings are read once at import time; pin a test environment and cheap
# Argon2 parameters before anything from accounts_service is imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "8192")
os.environ.setdefault("ARGON2_PARALLELISM", "1")
os.environ.pop("DATABASE_URL", None)

# Ensure repo root is on sys.path so `import accounts_service` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from accounts_service.api import dependencies  # noqa: E402
from accounts_service.main import app  # noqa: E402
from accounts_service.models.user import Role, User  # noqa: E402

DEFAULT_PASSWORD = "123456"


@pytest.fixture(autouse=True)
def reset_user_store() -> None:
    dependencies.memory_user_repo.clear()


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def seed_user(
    email: str = "john@x.com",
    password: str = DEFAULT_PASSWORD,
    name: str = "John Doe",
    role: Role = Role.USER,
) -> User:
    """Put a user with a real Argon2 hash straight into the in-memory store."""
    user = User.new(
        name=name,
        email=email,
        password_hash=dependencies.password_hasher.hash(password),
        role=role,
    )
    dependencies.memory_user_repo._by_email[user.email] = user
    dependencies.memory_user_repo._by_id[user.id] = user
    return user


def mint_token(subject: str, role: Role = Role.USER) -> str:
    return dependencies.token_issuer.issue(subject=subject, role=role)


@pytest.fixture
def user() -> User:
    return seed_user()


@pytest.fixture
def token(user: User) -> str:
    return mint_token(str(user.id))
