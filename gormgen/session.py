"""Session state for gormgen.

A Session owns at most one database connection and the model generator
built on it. Front ends (CLI, GUI, services) share one Session; state
changes take the lock exclusively, reads share it.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .config import ConnectionParams
from .database.base import DatabaseIntrospector
from .database.factory import create_introspector
from .database.models import ColumnMetadata
from .database.postgres import PostgresIntrospector
from .errors import ConnectionError, NotConnectedError
from .gorm.generator import DEFAULT_PACKAGE_NAME, GeneratedFile, ModelGenerator

logger = logging.getLogger(__name__)


class RWLock:
    """Readers-writer lock; waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass
class ConnectionStatus:
    """Snapshot of the session's connection."""
    connected: bool
    driver: str = ""
    host: str = ""
    database: str = ""
    schema: str = ""


class Session:
    """Connected-or-not database session plus generator.

    Disconnected -> Connected on a successful ``connect``; back to
    Disconnected on ``disconnect`` or at the start of the next ``connect``.
    Every other operation raises NotConnectedError while disconnected.
    """

    def __init__(self, package_name: str = DEFAULT_PACKAGE_NAME):
        self.package_name = package_name
        self._lock = RWLock()
        self._introspector: Optional[DatabaseIntrospector] = None
        self._generator: Optional[ModelGenerator] = None
        self._params: Optional[ConnectionParams] = None

    @property
    def is_connected(self) -> bool:
        return self._introspector is not None

    def connect(self, params: ConnectionParams):
        """Connect with ``params``, closing any previous connection first.

        Raises:
            UnsupportedEngineError: for an unknown driver.
            ConnectionError: if the engine handshake fails. The session is
                left disconnected.
        """
        with self._lock.write():
            self._teardown()

            introspector = create_introspector(params)
            introspector.connect()

            self._introspector = introspector
            self._params = params
            self._generator = ModelGenerator(introspector, package_name=self.package_name)
            logger.info("Session connected to %s database %s", params.driver, params.database)

    def disconnect(self):
        """Close the connection. No-op when already disconnected."""
        with self._lock.write():
            if self._introspector is None:
                return
            introspector = self._introspector
            self._introspector = None
            self._generator = None
            self._params = None
            introspector.close()
            logger.info("Session disconnected")

    def _teardown(self):
        if self._introspector is None:
            return
        introspector = self._introspector
        self._introspector = None
        self._generator = None
        self._params = None
        try:
            introspector.close()
        except ConnectionError as e:
            logger.warning("Error closing previous connection: %s", e)

    def status(self) -> ConnectionStatus:
        with self._lock.read():
            if self._params is None:
                return ConnectionStatus(connected=False)
            return ConnectionStatus(
                connected=self._introspector is not None,
                driver=self._params.driver,
                host=self._params.host,
                database=self._params.database,
                schema=self._current_schema(),
            )

    def _current_schema(self) -> str:
        if isinstance(self._introspector, PostgresIntrospector):
            return self._introspector.current_schema
        if self._params is not None:
            return self._params.database
        return ""

    def _require(self, operation: str):
        if self._introspector is None or self._generator is None:
            raise NotConnectedError(operation)
        return self._introspector, self._generator

    def current_schema(self) -> str:
        """PostgreSQL: the selected schema. MySQL: the database name."""
        with self._lock.read():
            self._require("get current schema")
            return self._current_schema()

    def list_schemas(self) -> List[str]:
        """List schemas; empty for engines without a schema concept."""
        with self._lock.read():
            introspector, _ = self._require("list schemas")
            if isinstance(introspector, PostgresIntrospector):
                return introspector.get_schemas()
            return []

    def select_schema(self, name: str):
        """Select the schema later queries target (ignored for MySQL)."""
        with self._lock.write():
            introspector, _ = self._require("select schema")
            if isinstance(introspector, PostgresIntrospector):
                introspector.set_schema(name)
            else:
                logger.debug("Ignoring schema selection %s for %s", name, introspector.driver)

    def list_tables(self) -> List[str]:
        with self._lock.read():
            introspector, _ = self._require("list tables")
            return introspector.get_tables()

    def describe_table(self, table: str) -> List[ColumnMetadata]:
        with self._lock.read():
            introspector, _ = self._require("describe table")
            return introspector.get_columns(table)

    def generate(self, table: str) -> GeneratedFile:
        """Generate the model for ``table`` including any formatting error."""
        with self._lock.read():
            _, generator = self._require("generate code")
            return generator.generate(table)

    def preview_generated_source(self, table: str) -> str:
        return self.generate(table).content

    def preview_many(self, tables: Iterable[str]) -> Dict[str, str]:
        with self._lock.read():
            _, generator = self._require("generate code")
            return generator.generate_many(tables)

    def write_generated_source(self, table: str, destination_path: str) -> str:
        with self._lock.read():
            _, generator = self._require("write code")
            return generator.write_file(table, destination_path)

    def write_all_generated_sources(self, destination_dir: str) -> List[str]:
        """Write every table; raises BatchGenerationError with partial paths."""
        with self._lock.read():
            _, generator = self._require("write code")
            return generator.generate_all(destination_dir)

    def write_selected_generated_sources(self, tables: Iterable[str], destination_dir: str) -> List[str]:
        with self._lock.read():
            _, generator = self._require("write code")
            return generator.generate_selected(tables, destination_dir)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
