"""Shared pytest fixtures for gormgen tests."""

import pytest

from fixtures.fake_dbapi import FakeConnection, FakeIntrospector, column
from gormgen.config import ConnectionParams
from gormgen.database.models import TableMetadata
from gormgen.database.mysql import MySQLIntrospector
from gormgen.database.postgres import PostgresIntrospector


@pytest.fixture
def users_table():
    """The users table: bigint auto-increment id, email and created_at."""
    return TableMetadata(
        schema="shop",
        name="users",
        columns=[
            column("id", "bigint", 1, is_nullable=False, is_primary_key=True, is_auto_increment=True),
            column("email", "varchar(255)", 2, is_nullable=False, char_max_length=255),
            column(
                "created_at", "timestamp", 3,
                is_nullable=False, default_value="CURRENT_TIMESTAMP",
            ),
        ],
    )


@pytest.fixture
def orders_table():
    """An orders table exercising enums, decimals, unsigned ints and comments."""
    return TableMetadata(
        schema="shop",
        name="orders",
        columns=[
            column(
                "id", "int unsigned", 1,
                data_type="int", is_nullable=False, is_primary_key=True,
                is_auto_increment=True, is_unsigned=True,
            ),
            column("user_id", "bigint", 2, is_nullable=False),
            column(
                "status", "enum('pending','paid','shipped')", 3,
                data_type="enum", is_nullable=False, default_value="pending",
                enum_values=("pending", "paid", "shipped"),
            ),
            column("total", "decimal(10,2)", 4, numeric_precision=10, numeric_scale=2),
            column("note", "text", 5, comment="free-form\nnote"),
        ],
        comment="Customer orders",
    )


@pytest.fixture
def products_table():
    return TableMetadata(
        schema="shop",
        name="products",
        columns=[
            column("id", "int", 1, is_nullable=False, is_primary_key=True),
            column("sku", "uuid", 2, is_nullable=False),
            column("attributes", "jsonb", 3),
        ],
    )


@pytest.fixture
def fake_introspector(users_table, orders_table, products_table):
    """A connected in-memory introspector serving users, orders and products."""
    introspector = FakeIntrospector(
        tables={
            "users": users_table,
            "orders": orders_table,
            "products": products_table,
        }
    )
    introspector.connect()
    return introspector


@pytest.fixture
def fake_connection():
    """An empty FakeConnection; tests register responses on it."""
    return FakeConnection()


@pytest.fixture
def mysql_params():
    return ConnectionParams(driver="mysql", database="shop", user="app", password="secret")


@pytest.fixture
def postgres_params():
    return ConnectionParams(driver="postgres", database="shop", user="app", schema_name="public")


@pytest.fixture
def mysql_introspector(monkeypatch, mysql_params, fake_connection):
    """MySQLIntrospector connected to ``fake_connection``."""
    monkeypatch.setattr(MySQLIntrospector, "_open_connection", lambda self: fake_connection)
    introspector = MySQLIntrospector(mysql_params)
    introspector.connect()
    return introspector


@pytest.fixture
def postgres_introspector(monkeypatch, postgres_params, fake_connection):
    """PostgresIntrospector connected to ``fake_connection``."""
    monkeypatch.setattr(PostgresIntrospector, "_open_connection", lambda self: fake_connection)
    introspector = PostgresIntrospector(postgres_params)
    introspector.connect()
    return introspector
