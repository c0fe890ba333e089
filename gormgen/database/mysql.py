"""MySQL database introspector."""

import logging
from typing import List

from .base import DatabaseIntrospector
from .models import ColumnMetadata, TableMetadata
from .type_mappers import parse_enum_values

logger = logging.getLogger(__name__)

# ER_QUERY_INTERRUPTED, ER_QUERY_TIMEOUT (max_execution_time exceeded)
CANCELLATION_ERROR_CODES = {1317, 3024}
# CR_SERVER_LOST, raised by PyMySQL when read_timeout expires mid-query
SERVER_LOST_ERROR_CODE = 2013


class MySQLIntrospector(DatabaseIntrospector):
    """Client for introspecting MySQL schema via information_schema."""

    driver = "mysql"

    def _open_connection(self):
        import pymysql

        return pymysql.connect(
            host=self.params.host,
            port=self.params.resolved_port(),
            user=self.params.user,
            password=self.params.password or "",
            database=self.params.database,
            charset="utf8mb4",
            connect_timeout=self.params.connect_timeout,
            read_timeout=self.params.query_timeout or None,
        )

    def _is_cancellation(self, error: Exception) -> bool:
        code = error.args[0] if error.args else None
        if code in CANCELLATION_ERROR_CODES:
            return True
        return code == SERVER_LOST_ERROR_CODE and "timed out" in str(error).lower()

    def get_tables(self) -> List[str]:
        """Get base tables of the connected database."""
        rows = self._execute_query(
            """
            SELECT TABLE_NAME
            FROM information_schema.TABLES
            WHERE TABLE_SCHEMA = %s AND TABLE_TYPE = 'BASE TABLE'
            ORDER BY TABLE_NAME
            """,
            (self.params.database,),
            operation="list tables",
        )
        return [row[0] for row in rows]

    def get_columns(self, table: str) -> List[ColumnMetadata]:
        """Get all columns for a table."""
        rows = self._execute_query(
            """
            SELECT
                COLUMN_NAME,
                DATA_TYPE,
                COLUMN_TYPE,
                IS_NULLABLE,
                COLUMN_KEY,
                EXTRA,
                COLUMN_DEFAULT,
                CHARACTER_MAXIMUM_LENGTH,
                NUMERIC_PRECISION,
                NUMERIC_SCALE,
                COLUMN_COMMENT,
                ORDINAL_POSITION
            FROM information_schema.COLUMNS
            WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
            ORDER BY ORDINAL_POSITION
            """,
            (self.params.database, table),
            operation="fetch columns",
            table=table,
        )

        columns = []
        for row in rows:
            (name, data_type, column_type, is_nullable, column_key, extra, default,
             char_max_length, numeric_precision, numeric_scale, comment, ordinal) = row

            enum_values = ()
            if (data_type or "").lower() == "enum":
                enum_values = tuple(parse_enum_values(column_type))

            columns.append(ColumnMetadata(
                name=name,
                data_type=data_type,
                raw_type=column_type,
                is_nullable=(is_nullable == "YES"),
                is_primary_key=(column_key == "PRI"),
                is_auto_increment="auto_increment" in (extra or ""),
                default_value=default,
                enum_values=enum_values,
                is_unsigned="unsigned" in column_type.lower(),
                char_max_length=_optional_int(char_max_length),
                numeric_precision=_optional_int(numeric_precision),
                numeric_scale=_optional_int(numeric_scale),
                comment=comment or "",
                ordinal_position=int(ordinal),
            ))

        logger.debug("Fetched %d columns for %s", len(columns), table)
        return columns

    def get_table_metadata(self, table: str) -> TableMetadata:
        """Get columns and table comment."""
        columns = self.get_columns(table)
        row = self._fetch_one(
            """
            SELECT TABLE_COMMENT
            FROM information_schema.TABLES
            WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
            """,
            (self.params.database, table),
            operation="fetch table comment",
            table=table,
        )
        comment = row[0] if row and row[0] else ""

        return TableMetadata(
            schema=self.params.database,
            name=table,
            columns=columns,
            comment=comment,
        )


def _optional_int(value):
    return int(value) if value is not None else None
