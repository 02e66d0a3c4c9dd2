"""Settings module for wiretime."""

import os

from wiretime.database.config import DatabaseConfig


class Settings:
    """Application settings."""

    def __init__(self) -> None:
        # Service info
        self.environment = os.getenv("ENVIRONMENT", "dev")
        self.service_name = os.getenv("SERVICE_NAME", "wiretime")
        self.service_version = os.getenv("SERVICE_VERSION", "0.1.0")
        self.log_level = os.getenv("LOG_LEVEL", "info").lower()
        self.log_to_database = os.getenv("LOG_TO_DATABASE", "false").lower() in (
            "1",
            "true",
            "yes",
        )

        # MySQL when MYSQL_ADDRESS is set, SQLite otherwise
        self.database = DatabaseConfig.from_env()

    def to_dict(self) -> dict[str, object]:
        """Loggable view, database password masked."""
        return {
            "environment": self.environment,
            "service_name": self.service_name,
            "service_version": self.service_version,
            "log_level": self.log_level,
            "log_to_database": self.log_to_database,
            "database": self.database.to_dict(),
        }
