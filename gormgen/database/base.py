"""Abstract base class for database introspection."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ..config import ConnectionParams
from ..errors import ConnectionError, NotConnectedError, QueryCancelledError, QueryError
from .models import ColumnMetadata, TableMetadata

logger = logging.getLogger(__name__)


class DatabaseIntrospector(ABC):
    """Abstract base class for database introspection.

    Subclasses open the driver connection and issue the engine-specific
    catalog queries. Query execution, error wrapping and the connected-state
    guard are shared here.
    """

    driver: str = ""

    def __init__(self, params: ConnectionParams):
        self.params = params
        self._connection = None
        # DB-API connections are not shareable between threads mid-query
        self._query_lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def connect(self):
        """Establish the engine session.

        Raises:
            ConnectionError: if the driver is missing or the handshake or
                authentication fails.
        """
        if self._connection is not None:
            self.close()

        logger.info(
            "Connecting to %s at %s:%s/%s",
            self.driver, self.params.host, self.params.resolved_port(), self.params.database,
        )
        try:
            self._connection = self._open_connection()
        except ImportError as e:
            raise ConnectionError(
                f"Missing database driver for {self.driver}: {e}",
                details={"driver": self.driver, "operation": "connect"},
            ) from e
        except Exception as e:
            self._connection = None
            raise ConnectionError(
                f"Failed to connect to {self.driver} database {self.params.database!r}: {e}",
                details={
                    "driver": self.driver,
                    "host": self.params.host,
                    "database": self.params.database,
                    "operation": "connect",
                },
            ) from e
        return self._connection

    def close(self):
        """Close the connection. Safe to call when already closed."""
        if self._connection is None:
            return
        connection, self._connection = self._connection, None
        try:
            connection.close()
        except Exception as e:
            raise ConnectionError(
                f"Failed to close {self.driver} connection: {e}",
                details={"driver": self.driver, "operation": "close"},
            ) from e
        logger.info("Closed %s connection", self.driver)

    @abstractmethod
    def _open_connection(self):
        """Open and return a DB-API connection for this engine."""

    @abstractmethod
    def get_tables(self) -> List[str]:
        """Get base table names in lexicographic order (views excluded)."""

    @abstractmethod
    def get_columns(self, table: str) -> List[ColumnMetadata]:
        """Get column metadata for a table in ordinal order."""

    @abstractmethod
    def get_table_metadata(self, table: str) -> TableMetadata:
        """Get columns plus the table-level comment."""

    def _is_cancellation(self, error: Exception) -> bool:
        """Whether a driver error means the query was cancelled or timed out."""
        return False

    def _require_connection(self, operation: str):
        if self._connection is None:
            raise NotConnectedError(operation)
        return self._connection

    def _execute_query(
        self,
        sql: str,
        params: Sequence[Any] = (),
        operation: str = "query",
        table: Optional[str] = None,
    ) -> List[tuple]:
        """Execute a parameterized catalog query and return all rows.

        Driver errors are wrapped into QueryError (or QueryCancelledError)
        annotated with the operation and table.
        """
        connection = self._require_connection(operation)
        details = {"driver": self.driver, "operation": operation}
        if table is not None:
            details["table"] = table

        logger.debug("%s: running %s", self.driver, operation)
        with self._query_lock:
            return self._run_query(connection, sql, params, operation, table, details)

    def _run_query(self, connection, sql, params, operation, table, details) -> List[tuple]:
        cursor = None
        try:
            cursor = connection.cursor()
            cursor.execute(sql, tuple(params))
            return list(cursor.fetchall())
        except Exception as e:
            target = f" for table {table}" if table else ""
            if self._is_cancellation(e):
                raise QueryCancelledError(f"{operation}{target} was cancelled: {e}", details=details) from e
            raise QueryError(f"Failed to {operation}{target}: {e}", details=details) from e
        finally:
            if cursor is not None:
                try:
                    cursor.close()
                except Exception:
                    logger.debug("Ignoring error while closing cursor", exc_info=True)

    def _fetch_one(
        self,
        sql: str,
        params: Sequence[Any] = (),
        operation: str = "query",
        table: Optional[str] = None,
    ) -> Optional[tuple]:
        rows = self._execute_query(sql, params, operation=operation, table=table)
        return rows[0] if rows else None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
