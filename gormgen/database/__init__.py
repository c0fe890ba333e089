"""Database introspection module for gormgen.

This module provides engine-agnostic introspection capabilities
with specific implementations for MySQL and PostgreSQL.
"""

from .models import ColumnMetadata, TableMetadata
from .base import DatabaseIntrospector
from .type_mappers import GoTypeMapper, TypeMapping, TypeResolution, parse_enum_values
from .mysql import MySQLIntrospector
from .postgres import PostgresIntrospector
from .factory import DatabaseType, create_introspector, resolve_database_type

__all__ = [
    # Data models
    "ColumnMetadata",
    "TableMetadata",
    # Base classes
    "DatabaseIntrospector",
    # Type mapping
    "GoTypeMapper",
    "TypeMapping",
    "TypeResolution",
    "parse_enum_values",
    # Introspectors
    "MySQLIntrospector",
    "PostgresIntrospector",
    "DatabaseType",
    "create_introspector",
    "resolve_database_type",
]
