"""Fake DB-API connection and introspector for testing without a database."""

import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from gormgen.config import ConnectionParams
from gormgen.database.base import DatabaseIntrospector
from gormgen.database.models import ColumnMetadata, TableMetadata
from gormgen.errors import QueryError

Response = Union[List[tuple], Exception, Callable[[tuple], List[tuple]]]


class FakeDriverError(Exception):
    """Stands in for a driver exception; ``pgcode`` mimics psycopg2 errors."""

    def __init__(self, *args, pgcode: Optional[str] = None):
        super().__init__(*args)
        self.pgcode = pgcode


class FakeCursor:
    def __init__(self, connection: "FakeConnection"):
        self.connection = connection
        self._rows: List[tuple] = []
        self.closed = False

    def execute(self, sql: str, params: tuple = ()):
        self.connection.executed.append((" ".join(sql.split()), params))
        for pattern, response in self.connection._responses:
            if pattern.search(sql):
                if isinstance(response, Exception):
                    raise response
                rows = response(params) if callable(response) else response
                self._rows = list(rows)
                return
        self._rows = []

    def fetchall(self) -> List[tuple]:
        return self._rows

    def close(self):
        self.closed = True


class FakeConnection:
    """DB-API connection returning canned rows for SQL matching a regex.

    Patterns are tried in registration order; the first match wins.
    Unmatched queries return no rows.
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self.executed: List[tuple] = []
        self.cursors: List[FakeCursor] = []
        self.closed = False
        self.autocommit = False

    def add_response(self, sql_pattern: str, response: Response) -> "FakeConnection":
        self._responses.append((re.compile(sql_pattern, re.DOTALL), response))
        return self

    def cursor(self) -> FakeCursor:
        if self.closed:
            raise FakeDriverError("connection already closed")
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def close(self):
        self.closed = True

    def queries_matching(self, sql_pattern: str) -> List[tuple]:
        pattern = re.compile(sql_pattern)
        return [(sql, params) for sql, params in self.executed if pattern.search(sql)]


class FakeIntrospector(DatabaseIntrospector):
    """In-memory introspector serving prebuilt TableMetadata."""

    driver = "fake"

    def __init__(
        self,
        tables: Optional[Dict[str, TableMetadata]] = None,
        failing: Iterable[str] = (),
        params: Optional[ConnectionParams] = None,
        fail_connect: bool = False,
    ):
        super().__init__(params or ConnectionParams(driver="mysql", database="testdb"))
        self.tables = dict(tables or {})
        self.failing = set(failing)
        self.fail_connect = fail_connect
        self.metadata_calls: List[str] = []
        self.close_calls = 0

    def _open_connection(self):
        if self.fail_connect:
            raise FakeDriverError("connection refused")
        return FakeConnection()

    def close(self):
        if self.is_connected:
            self.close_calls += 1
        super().close()

    def get_tables(self) -> List[str]:
        self._require_connection("list tables")
        return sorted(self.tables)

    def get_columns(self, table: str) -> List[ColumnMetadata]:
        return list(self.get_table_metadata(table).columns)

    def get_table_metadata(self, table: str) -> TableMetadata:
        self._require_connection("fetch table metadata")
        self.metadata_calls.append(table)
        if table in self.failing or table not in self.tables:
            raise QueryError(
                f"Failed to fetch columns for table {table}: relation does not exist",
                details={"driver": self.driver, "operation": "fetch columns", "table": table},
            )
        return self.tables[table]


def column(name: str, raw_type: str, position: int, **kwargs: Any) -> ColumnMetadata:
    """Shorthand for building ColumnMetadata in tests."""
    data_type = kwargs.pop("data_type", raw_type.split("(")[0].split(" ")[0])
    return ColumnMetadata(
        name=name,
        data_type=data_type,
        raw_type=raw_type,
        ordinal_position=position,
        **kwargs,
    )
