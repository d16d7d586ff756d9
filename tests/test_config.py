import pytest

from waiterboard.core.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "CORS_ORIGINS",
        "ENVIRONMENT",
        "LOG_LEVEL",
        "LOG_FILE_PATH",
        "BOARD_MAINTENANCE_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_load_from_env_requires_database_url(clean_env):
    with pytest.raises(ValueError, match="DATABASE_URL"):
        Settings.load_from_env()


def test_load_from_env_defaults(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///./board.db")

    settings = Settings.load_from_env()

    assert settings.ENVIRONMENT == "development"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_FILE_PATH == "logs/app.log"
    assert settings.BOARD_MAINTENANCE_INTERVAL_SECONDS == 60
    assert settings.CORS_ORIGINS == ["http://localhost:3000"]


def test_load_from_env_parses_origins(clean_env):
    clean_env.setenv("DATABASE_URL", "postgresql+asyncpg://board:secret@db/board")
    clean_env.setenv("CORS_ORIGINS", "https://board.example.org, https://kiosk.example.org,")
    clean_env.setenv("BOARD_MAINTENANCE_INTERVAL_SECONDS", "15")

    settings = Settings.load_from_env()

    assert settings.CORS_ORIGINS == [
        "https://board.example.org",
        "https://kiosk.example.org",
        "http://localhost:3000",
    ]
    assert settings.BOARD_MAINTENANCE_INTERVAL_SECONDS == 15


def test_production_does_not_add_localhost(clean_env):
    clean_env.setenv("DATABASE_URL", "postgresql+asyncpg://board:secret@db/board")
    clean_env.setenv("ENVIRONMENT", "production")
    clean_env.setenv("CORS_ORIGINS", "https://board.example.org")

    settings = Settings.load_from_env()

    assert settings.CORS_ORIGINS == ["https://board.example.org"]
    assert settings.is_cors_misconfigured() is False


@pytest.mark.parametrize("origins", [[], ["http://localhost:3000"]])
def test_production_cors_misconfiguration(origins):
    settings = Settings(DATABASE_URL="sqlite+aiosqlite://", CORS_ORIGINS=origins, ENVIRONMENT="production")
    assert settings.is_cors_misconfigured() is True


def test_development_cors_never_misconfigured():
    settings = Settings(DATABASE_URL="sqlite+aiosqlite://", CORS_ORIGINS=[])
    assert settings.is_cors_misconfigured() is False


def test_maintenance_interval_must_be_positive(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite://")
    clean_env.setenv("BOARD_MAINTENANCE_INTERVAL_SECONDS", "0")
    with pytest.raises(ValueError):
        Settings.load_from_env()
