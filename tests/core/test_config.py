from __future__ import annotations

import pytest

from accounts_service.core.config import AppEnv, Settings, load_settings

_ENV_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "PORT",
    "DATABASE_URL",
    "JWT_PRIVATE_KEY",
    "ACCESS_TOKEN_TTL_MIN",
    "ARGON2_TIME_COST",
    "ARGON2_MEMORY_COST",
    "ARGON2_PARALLELISM",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ---- valid values ----


def test_load_settings_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = load_settings()
    assert settings.app_env == "dev"
    assert settings.log_level == "info"
    assert settings.log_json is False
    assert settings.port == 8000
    assert settings.database_url is None
    assert settings.jwt_private_key is None
    assert settings.access_token_ttl_min == 15
    assert settings.argon2_time_cost == 3
    assert settings.argon2_memory_cost == 64 * 1024
    assert settings.argon2_parallelism == 4


def test_load_settings_respects_env_vars(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "prod")
    clean_env.setenv("LOG_LEVEL", "error")
    clean_env.setenv("LOG_JSON", "true")
    clean_env.setenv("PORT", "9000")
    clean_env.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/accounts")
    clean_env.setenv("ACCESS_TOKEN_TTL_MIN", "60")
    clean_env.setenv("ARGON2_TIME_COST", "4")
    settings = load_settings()
    assert settings.app_env == "prod"
    assert settings.log_level == "error"
    assert settings.log_json is True
    assert settings.port == 9000
    assert settings.database_url == "postgresql+asyncpg://u:p@db/accounts"
    assert settings.access_token_ttl_min == 60
    assert settings.argon2_time_cost == 4


def test_load_settings_normalizes_case(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "PROD")
    clean_env.setenv("LOG_LEVEL", "DEBUG")
    clean_env.setenv("LOG_JSON", "TRUE")
    settings = load_settings()
    assert settings.app_env == "prod"
    assert settings.log_level == "debug"
    assert settings.log_json is True


def test_load_settings_strips_whitespace(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "  test  ")
    clean_env.setenv("LOG_LEVEL", "  warning  ")
    settings = load_settings()
    assert settings.app_env == "test"
    assert settings.log_level == "warning"


def test_load_settings_unescapes_private_key_newlines(
    clean_env: pytest.MonkeyPatch,
) -> None:
    clean_env.setenv("JWT_PRIVATE_KEY", "-----BEGIN-----\\nabc\\n-----END-----")
    settings = load_settings()
    assert settings.jwt_private_key == "-----BEGIN-----\nabc\n-----END-----"


# ---- invalid values ----


def test_load_settings_rejects_invalid_app_env(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "staging")
    with pytest.raises(ValueError, match="APP_ENV must be dev|test|prod"):
        load_settings()


def test_load_settings_rejects_invalid_log_level(
    clean_env: pytest.MonkeyPatch,
) -> None:
    clean_env.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="LOG_LEVEL must be debug|info|warning|error"):
        load_settings()


def test_load_settings_rejects_invalid_log_json(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("LOG_JSON", "yes please")
    with pytest.raises(ValueError, match="LOG_JSON must be true|false"):
        load_settings()


def test_load_settings_rejects_non_integer_port(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PORT", "eighty")
    with pytest.raises(ValueError, match="PORT must be an integer"):
        load_settings()


def test_load_settings_rejects_zero_ttl(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ACCESS_TOKEN_TTL_MIN", "0")
    with pytest.raises(ValueError, match="ACCESS_TOKEN_TTL_MIN must be >= 1"):
        load_settings()


def test_load_settings_rejects_tiny_argon2_memory(
    clean_env: pytest.MonkeyPatch,
) -> None:
    clean_env.setenv("ARGON2_MEMORY_COST", "4")
    with pytest.raises(ValueError, match="ARGON2_MEMORY_COST must be >= 8"):
        load_settings()


# ---- Settings properties ----


def _make_settings(app_env: AppEnv = "dev") -> Settings:
    return Settings(  # type: ignore[arg-type]
        app_env=app_env,
        log_level="info",
        log_json=False,
        port=8000,
        database_url=None,
    )


@pytest.mark.parametrize(
    ("env", "dev", "test", "prod"),
    [
        ("dev", True, False, False),
        ("test", False, True, False),
        ("prod", False, False, True),
    ],
)
def test_settings_env_flags(env: AppEnv, dev: bool, test: bool, prod: bool) -> None:
    s = _make_settings(env)
    assert (s.is_dev, s.is_test, s.is_prod) == (dev, test, prod)


def test_settings_is_frozen() -> None:
    s = _make_settings()
    with pytest.raises(AttributeError):
        s.app_env = "prod"  # type: ignore[misc]
