"""PostgreSQL database introspector."""

import logging
from dataclasses import replace
from typing import List, Optional, Set

from .base import DatabaseIntrospector
from .models import ColumnMetadata, TableMetadata

logger = logging.getLogger(__name__)

EXCLUDED_SCHEMAS = ("pg_catalog", "information_schema", "pg_toast")

# SQLSTATE query_canceled, also raised when statement_timeout expires
QUERY_CANCELED_SQLSTATE = "57014"

# information_schema reports these only by udt_name
UDT_TYPE_NAMES = {
    "int2": "smallint",
    "int4": "integer",
    "int8": "bigint",
    "float4": "real",
    "float8": "double precision",
    "bool": "boolean",
    "varchar": "varchar",
    "bpchar": "varchar",
    "timestamptz": "timestamptz",
    "timestamp": "timestamp",
    "jsonb": "jsonb",
    "json": "json",
    "uuid": "uuid",
    "bytea": "bytea",
}


def normalize_data_type(data_type: str, udt_name: str) -> str:
    """Normalize a PostgreSQL type to a common name using its udt_name.

    Arrays are reported as ``[]<element udt>``, e.g. ``_int4`` -> ``[]int4``;
    extension and user-defined types by their udt_name (``citext``).
    """
    if udt_name in UDT_TYPE_NAMES:
        return UDT_TYPE_NAMES[udt_name]
    if data_type == "ARRAY" and udt_name.startswith("_"):
        return "[]" + udt_name[1:]
    if data_type == "USER-DEFINED":
        return udt_name
    return data_type


def build_raw_type(
    data_type: str,
    udt_name: str,
    char_max_length: Optional[int] = None,
    numeric_precision: Optional[int] = None,
    numeric_scale: Optional[int] = None,
) -> str:
    """Rebuild the declared type with its size/precision suffix."""
    normalized = normalize_data_type(data_type, udt_name)

    if normalized in ("varchar", "character varying") and char_max_length is not None:
        return f"varchar({char_max_length})"

    if normalized in ("numeric", "decimal") and numeric_precision is not None:
        if numeric_scale:
            return f"numeric({numeric_precision},{numeric_scale})"
        return f"numeric({numeric_precision})"

    return normalized


class PostgresIntrospector(DatabaseIntrospector):
    """Client for introspecting PostgreSQL schema.

    Queries target the currently selected schema (``public`` unless the
    connection parameters or ``set_schema`` say otherwise).
    """

    driver = "postgres"

    def __init__(self, params):
        super().__init__(params)
        self._current_schema = params.schema_name or "public"

    def _open_connection(self):
        import psycopg2

        options = None
        if self.params.query_timeout:
            options = f"-c statement_timeout={self.params.query_timeout * 1000}"
        connection = psycopg2.connect(
            host=self.params.host,
            port=self.params.resolved_port(),
            user=self.params.user,
            password=self.params.password or "",
            dbname=self.params.database,
            connect_timeout=self.params.connect_timeout,
            options=options,
        )
        # Catalog reads only; avoid holding a transaction open between calls
        try:
            connection.autocommit = True
        except Exception:
            connection.close()
            raise
        return connection

    def _is_cancellation(self, error: Exception) -> bool:
        return getattr(error, "pgcode", None) == QUERY_CANCELED_SQLSTATE

    @property
    def current_schema(self) -> str:
        return self._current_schema

    def set_schema(self, schema: str):
        """Select the schema subsequent queries target."""
        logger.info("Switching PostgreSQL schema from %s to %s", self._current_schema, schema)
        self._current_schema = schema

    def get_schemas(self) -> List[str]:
        """Get user schemas, excluding system namespaces."""
        rows = self._execute_query(
            """
            SELECT schema_name
            FROM information_schema.schemata
            WHERE schema_name NOT IN %s
            ORDER BY schema_name
            """,
            (EXCLUDED_SCHEMAS,),
            operation="list schemas",
        )
        return [row[0] for row in rows]

    def get_tables(self) -> List[str]:
        """Get base tables of the current schema."""
        rows = self._execute_query(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s AND table_type = 'BASE TABLE'
            ORDER BY table_name
            """,
            (self._current_schema,),
            operation="list tables",
        )
        return [row[0] for row in rows]

    def get_columns(self, table: str) -> List[ColumnMetadata]:
        """Get all columns for a table, with primary keys marked."""
        rows = self._execute_query(
            """
            SELECT
                c.column_name,
                c.data_type,
                c.udt_name,
                c.is_nullable,
                c.column_default,
                c.character_maximum_length,
                c.numeric_precision,
                c.numeric_scale,
                c.ordinal_position,
                COALESCE(pgd.description, '') AS column_comment,
                c.is_identity
            FROM information_schema.columns c
            LEFT JOIN pg_catalog.pg_statio_all_tables st
                ON c.table_schema = st.schemaname AND c.table_name = st.relname
            LEFT JOIN pg_catalog.pg_description pgd
                ON pgd.objoid = st.relid AND pgd.objsubid = c.ordinal_position
            WHERE c.table_schema = %s AND c.table_name = %s
            ORDER BY c.ordinal_position
            """,
            (self._current_schema, table),
            operation="fetch columns",
            table=table,
        )

        columns = []
        for row in rows:
            (name, data_type, udt_name, is_nullable, default, char_max_length,
             numeric_precision, numeric_scale, ordinal, comment, is_identity) = row

            is_auto_increment = is_identity == "YES" or (
                default is not None and "nextval" in default
            )
            columns.append(ColumnMetadata(
                name=name,
                data_type=normalize_data_type(data_type, udt_name),
                raw_type=build_raw_type(
                    data_type, udt_name, char_max_length, numeric_precision, numeric_scale
                ),
                is_nullable=(is_nullable == "YES"),
                is_auto_increment=is_auto_increment,
                default_value=default,
                char_max_length=char_max_length,
                numeric_precision=numeric_precision,
                numeric_scale=numeric_scale,
                comment=comment or "",
                ordinal_position=int(ordinal),
            ))

        pk_columns = self._get_primary_key_columns(table)
        columns = [
            replace(col, is_primary_key=True) if col.name in pk_columns else col
            for col in columns
        ]

        logger.debug("Fetched %d columns for %s.%s", len(columns), self._current_schema, table)
        return columns

    def _get_primary_key_columns(self, table: str) -> Set[str]:
        """Primary key role is not exposed on information_schema.columns."""
        rows = self._execute_query(
            """
            SELECT a.attname
            FROM pg_index i
            JOIN pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey)
            WHERE i.indrelid = %s::regclass AND i.indisprimary
            """,
            (self._qualified_name(table),),
            operation="fetch primary keys",
            table=table,
        )
        return {row[0] for row in rows}

    def get_table_metadata(self, table: str) -> TableMetadata:
        """Get columns and table comment."""
        columns = self.get_columns(table)
        row = self._fetch_one(
            "SELECT obj_description(%s::regclass, 'pg_class')",
            (self._qualified_name(table),),
            operation="fetch table comment",
            table=table,
        )
        comment = row[0] if row and row[0] else ""

        return TableMetadata(
            schema=self._current_schema,
            name=table,
            columns=columns,
            comment=comment,
        )

    def _qualified_name(self, table: str) -> str:
        return f'"{_quote_ident(self._current_schema)}"."{_quote_ident(table)}"'


def _quote_ident(name: str) -> str:
    return name.replace('"', '""')
