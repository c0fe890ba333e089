"""Introspector selection by engine kind."""

from enum import Enum

from ..config import ConnectionParams
from ..errors import UnsupportedEngineError
from .base import DatabaseIntrospector
from .mysql import MySQLIntrospector
from .postgres import PostgresIntrospector


class DatabaseType(str, Enum):
    """Supported database engines."""
    MYSQL = "mysql"
    POSTGRES = "postgres"


DRIVER_ALIASES = {
    "mysql": DatabaseType.MYSQL,
    "postgres": DatabaseType.POSTGRES,
    "postgresql": DatabaseType.POSTGRES,
}

INTROSPECTORS = {
    DatabaseType.MYSQL: MySQLIntrospector,
    DatabaseType.POSTGRES: PostgresIntrospector,
}


def resolve_database_type(driver: str) -> DatabaseType:
    """Map a driver selector to a DatabaseType, or raise UnsupportedEngineError."""
    db_type = DRIVER_ALIASES.get((driver or "").strip().lower())
    if db_type is None:
        raise UnsupportedEngineError(driver, supported=sorted(DRIVER_ALIASES))
    return db_type


def create_introspector(params: ConnectionParams) -> DatabaseIntrospector:
    """Create the introspector for ``params.driver`` (not yet connected)."""
    db_type = resolve_database_type(params.driver)
    return INTROSPECTORS[db_type](params)
