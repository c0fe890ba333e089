"""Tests for MySQL introspection against a fake DB-API connection."""

import pytest

from fixtures.fake_dbapi import FakeDriverError
from gormgen.database.mysql import MySQLIntrospector
from gormgen.errors import ConnectionError, NotConnectedError, QueryCancelledError, QueryError
from gormgen.gorm.generator import ModelGenerator

TABLES_SQL = r"SELECT TABLE_NAME\s+FROM information_schema\.TABLES"
COLUMNS_SQL = r"FROM information_schema\.COLUMNS"
COMMENT_SQL = r"SELECT TABLE_COMMENT"

USERS_COLUMNS = [
    ("id", "int", "int unsigned", "NO", "PRI", "auto_increment", None, None, 10, 0, "", 1),
    ("email", "varchar", "varchar(255)", "NO", "UNI", "", None, 255, None, None, "login email", 2),
    ("status", "enum", "enum('Active','Banned')", "NO", "", "", "Active", 6, None, None, "", 3),
    ("is_admin", "tinyint", "tinyint(1)", "YES", "", "", "0", None, 3, 0, "", 4),
    (
        "created_at", "timestamp", "timestamp", "NO", "", "DEFAULT_GENERATED",
        "CURRENT_TIMESTAMP", None, None, None, "", 5,
    ),
]


@pytest.fixture
def shop(fake_connection):
    """Catalog responses for a shop database with a users table."""
    fake_connection.add_response(TABLES_SQL, [("orders",), ("users",)])
    fake_connection.add_response(COLUMNS_SQL, USERS_COLUMNS)
    fake_connection.add_response(COMMENT_SQL, [("User accounts",)])
    return fake_connection


class TestMySQLConnect:
    """Test connection handling."""

    def test_connect_and_close(self, mysql_introspector, fake_connection):
        assert mysql_introspector.is_connected
        mysql_introspector.close()
        assert not mysql_introspector.is_connected
        assert fake_connection.closed

    def test_close_is_idempotent(self, mysql_introspector):
        mysql_introspector.close()
        mysql_introspector.close()
        assert not mysql_introspector.is_connected

    def test_connect_failure_wrapped(self, monkeypatch, mysql_params):
        """Test driver failures surface as ConnectionError."""
        def refuse(self):
            raise FakeDriverError(1045, "Access denied for user 'app'@'localhost'")

        monkeypatch.setattr(MySQLIntrospector, "_open_connection", refuse)
        introspector = MySQLIntrospector(mysql_params)

        with pytest.raises(ConnectionError) as exc_info:
            introspector.connect()

        assert "Access denied" in exc_info.value.message
        assert exc_info.value.details["database"] == "shop"
        assert not introspector.is_connected

    def test_missing_driver(self, monkeypatch, mysql_params):
        def no_driver(self):
            raise ImportError("No module named 'pymysql'")

        monkeypatch.setattr(MySQLIntrospector, "_open_connection", no_driver)
        with pytest.raises(ConnectionError) as exc_info:
            MySQLIntrospector(mysql_params).connect()
        assert "Missing database driver" in exc_info.value.message

    def test_context_manager(self, monkeypatch, mysql_params, fake_connection):
        monkeypatch.setattr(MySQLIntrospector, "_open_connection", lambda self: fake_connection)
        with MySQLIntrospector(mysql_params) as introspector:
            assert introspector.is_connected
        assert not introspector.is_connected
        assert fake_connection.closed

    def test_query_requires_connection(self, mysql_params):
        with pytest.raises(NotConnectedError):
            MySQLIntrospector(mysql_params).get_tables()

    def test_default_port(self, mysql_params):
        assert mysql_params.resolved_port() == 3306


class TestMySQLCatalog:
    """Test catalog queries and row conversion."""

    def test_get_tables(self, mysql_introspector, shop):
        assert mysql_introspector.get_tables() == ["orders", "users"]
        sql, params = shop.queries_matching(TABLES_SQL)[0]
        assert params == ("shop",)
        assert "TABLE_TYPE = 'BASE TABLE'" in sql

    def test_get_columns(self, mysql_introspector, shop):
        columns = mysql_introspector.get_columns("users")

        assert [c.name for c in columns] == ["id", "email", "status", "is_admin", "created_at"]
        id_col, email, status, is_admin, created_at = columns

        assert id_col.is_primary_key and id_col.is_auto_increment and id_col.is_unsigned
        assert not id_col.is_nullable
        assert id_col.raw_type == "int unsigned"
        assert not email.is_primary_key
        assert email.char_max_length == 255
        assert email.comment == "login email"
        assert status.enum_values == ("Active", "Banned")
        assert status.default_value == "Active"
        assert is_admin.is_nullable
        assert not created_at.is_auto_increment
        assert shop.queries_matching(COLUMNS_SQL)[0][1] == ("shop", "users")

    def test_get_table_metadata(self, mysql_introspector, shop):
        meta = mysql_introspector.get_table_metadata("users")
        assert meta.schema == "shop"
        assert meta.name == "users"
        assert meta.comment == "User accounts"
        assert meta.primary_key_columns == ("id",)

    def test_empty_comment(self, mysql_introspector, fake_connection):
        fake_connection.add_response(COLUMNS_SQL, USERS_COLUMNS[:1])
        fake_connection.add_response(COMMENT_SQL, [(None,)])
        assert mysql_introspector.get_table_metadata("users").comment == ""

    def test_cursors_closed(self, mysql_introspector, shop):
        mysql_introspector.get_table_metadata("users")
        assert shop.cursors
        assert all(cursor.closed for cursor in shop.cursors)

    def test_generated_model(self, mysql_introspector, shop):
        """Test a full model generated from MySQL catalog rows."""
        content = ModelGenerator(mysql_introspector).generate_string("users")

        assert "type User struct {" in content
        assert '`gorm:"primaryKey;autoIncrement;column:id;type:int unsigned" json:"id"`' in content
        assert "IsAdmin   bool" in content
        assert "// enum('Active','Banned')" in content
        assert "// login email" in content
        assert "// User accounts" in content


class TestMySQLErrors:
    """Test driver error wrapping."""

    def test_query_error(self, mysql_introspector, fake_connection):
        fake_connection.add_response(COLUMNS_SQL, FakeDriverError(1146, "Table 'shop.nope' doesn't exist"))

        with pytest.raises(QueryError) as exc_info:
            mysql_introspector.get_columns("nope")

        error = exc_info.value
        assert not isinstance(error, QueryCancelledError)
        assert error.message.startswith("Failed to fetch columns for table nope")
        assert error.details == {"driver": "mysql", "operation": "fetch columns", "table": "nope"}
        assert isinstance(error.__cause__, FakeDriverError)

    @pytest.mark.parametrize("driver_error", [
        FakeDriverError(3024, "Query execution was interrupted, maximum statement execution time exceeded"),
        FakeDriverError(1317, "Query execution was interrupted"),
        FakeDriverError(2013, "Lost connection to MySQL server during query (timed out)"),
    ])
    def test_cancellation(self, mysql_introspector, fake_connection, driver_error):
        fake_connection.add_response(TABLES_SQL, driver_error)
        with pytest.raises(QueryCancelledError) as exc_info:
            mysql_introspector.get_tables()
        assert exc_info.value.code == "QUERY_CANCELLED"

    def test_lost_connection_is_not_cancellation(self, mysql_introspector, fake_connection):
        fake_connection.add_response(TABLES_SQL, FakeDriverError(2013, "Lost connection to MySQL server"))
        with pytest.raises(QueryError) as exc_info:
            mysql_introspector.get_tables()
        assert not isinstance(exc_info.value, QueryCancelledError)
