"""
Tests for application settings validation (core.settings).
"""
import pytest
from pydantic import ValidationError

from gigaeats.app.core.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.HISTORY_DEFAULT_LIMIT == 20
    assert settings.HISTORY_MAX_LIMIT == 200
    assert settings.MISSING_TIMESTAMP_POLICY in ("skip", "raise")


def test_database_url_overrides_db_fields():
    settings = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///:memory:")
    assert settings.db_url == "sqlite+aiosqlite:///:memory:"


def test_db_url_built_from_parts():
    settings = Settings(
        _env_file=None,
        DATABASE_URL=None,
        DB_USER="eats",
        DB_PASSWORD="p@ss",
        DB_HOST="db",
        DB_PORT="5433",
        DB_NAME="orders",
    )
    assert settings.db_url == "postgresql+asyncpg://eats:p%40ss@db:5433/orders"


def test_invalid_environment():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, ENVIRONMENT="staging")


def test_log_level_is_upper_cased():
    assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_missing_timestamp_policy():
    assert Settings(_env_file=None, MISSING_TIMESTAMP_POLICY="RAISE").MISSING_TIMESTAMP_POLICY == "raise"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, MISSING_TIMESTAMP_POLICY="substitute_now")


def test_timezone():
    settings = Settings(_env_file=None, TIMEZONE="Europe/Moscow")
    assert settings.tzinfo.key == "Europe/Moscow"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, TIMEZONE="Mars/Olympus_Mons")
