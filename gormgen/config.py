"""Configuration management for gormgen."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_PORTS = {
    "mysql": 3306,
    "postgres": 5432,
    "postgresql": 5432,
}


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.gormgen/.env
    """
    if os.path.exists(".env"):
        return ".env"

    user_env = Path.home() / ".gormgen" / ".env"
    if user_env.exists():
        return str(user_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from GORMGEN_* environment variables."""

    # Database connection defaults
    db_driver: str = Field(default="mysql", description="Database driver: mysql or postgres")
    db_host: str = Field(default="localhost", description="Database host")
    db_port: Optional[int] = Field(default=None, description="Database port (default: engine default)")
    db_user: str = Field(default="root", description="Database user")
    db_password: Optional[str] = Field(default=None, description="Database password")
    db_name: Optional[str] = Field(default=None, description="Database (catalog) name")
    db_schema: str = Field(default="public", description="Schema to introspect (PostgreSQL only)")

    # Timeouts
    connect_timeout: int = Field(default=10, description="Connection handshake timeout in seconds")
    query_timeout: int = Field(
        default=30,
        description="Per-query timeout in seconds for catalog queries (0 disables)"
    )

    # Generator options
    package_name: str = Field(default="models", description="Go package name for generated files")
    output_dir: str = Field(default="./models", description="Directory for generated files")

    log_level: str = Field(default="WARNING", description="Logging level")

    class Config:
        env_prefix = "GORMGEN_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"


class ConnectionParams(BaseModel):
    """Parameters for one database session."""

    driver: str = "mysql"
    host: str = "localhost"
    port: Optional[int] = None
    user: str = "root"
    password: Optional[str] = None
    database: str = ""
    schema_name: str = "public"
    connect_timeout: int = 10
    query_timeout: int = 30

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides) -> "ConnectionParams":
        """Build connection parameters from settings, applying non-None overrides."""
        values = {
            "driver": settings.db_driver,
            "host": settings.db_host,
            "port": settings.db_port,
            "user": settings.db_user,
            "password": settings.db_password,
            "database": settings.db_name or "",
            "schema_name": settings.db_schema,
            "connect_timeout": settings.connect_timeout,
            "query_timeout": settings.query_timeout,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def resolved_port(self) -> int:
        """Return the configured port or the engine's default port."""
        if self.port:
            return self.port
        return DEFAULT_PORTS.get(self.driver.lower(), 3306)


# Global settings instance
settings = Settings()
