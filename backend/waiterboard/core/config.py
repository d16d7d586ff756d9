import os
from typing import List
from pydantic import BaseModel, Field

class Settings(BaseModel):
    DATABASE_URL: str
    CORS_ORIGINS: List[str]
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "logs/app.log"
    BOARD_MAINTENANCE_INTERVAL_SECONDS: int = Field(60, gt=0)

    @classmethod
    def load_from_env(cls):
        database_url = os.getenv("DATABASE_URL")
        environment = os.getenv("ENVIRONMENT", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        log_file_path = os.getenv("LOG_FILE_PATH", "logs/app.log")
        maintenance_interval = os.getenv("BOARD_MAINTENANCE_INTERVAL_SECONDS", "60")

        cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

        # Board kiosks in the shop run against the local dev server
        if environment != "production" and "http://localhost:3000" not in cors_origins:
            cors_origins.append("http://localhost:3000")

        missing = []
        if not database_url:
            missing.append("DATABASE_URL")

        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

        return cls(
            DATABASE_URL=database_url,
            CORS_ORIGINS=cors_origins,
            ENVIRONMENT=environment,
            LOG_LEVEL=log_level,
            LOG_FILE_PATH=log_file_path,
            BOARD_MAINTENANCE_INTERVAL_SECONDS=int(maintenance_interval),
        )

    def is_cors_misconfigured(self) -> bool:
        """
        Production deployments must name their own origins; a localhost-only
        allow list means CORS_ORIGINS was never set.
        """
        if self.ENVIRONMENT != "production":
            return False
        return not self.CORS_ORIGINS or self.CORS_ORIGINS == ["http://localhost:3000"]


# Loaded at import so a misconfigured deployment fails before serving requests.
_is_test_mode = os.getenv("TEST_MODE", "").lower() == "true" or os.getenv("PYTEST_CURRENT_TEST") is not None

try:
    settings = Settings.load_from_env()
except ValueError as e:
    if _is_test_mode:
        settings = Settings(
            DATABASE_URL=os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:"),
            CORS_ORIGINS=["http://localhost:3000"],
            ENVIRONMENT="test"
        )
    else:
        print(f"CRITICAL: Configuration Error: {e}")
        print("Please set the required environment variables: DATABASE_URL")
        raise e
