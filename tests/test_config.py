"""Tests for settings and connection parameters."""

from gormgen.config import ConnectionParams, Settings


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GORMGEN_DB_DRIVER", raising=False)
        monkeypatch.delenv("GORMGEN_DB_NAME", raising=False)
        settings = Settings(_env_file=None)
        assert settings.db_driver == "mysql"
        assert settings.db_name is None
        assert settings.db_schema == "public"
        assert settings.package_name == "models"
        assert settings.query_timeout == 30

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("GORMGEN_DB_DRIVER", "postgres")
        monkeypatch.setenv("GORMGEN_DB_PORT", "6543")
        monkeypatch.setenv("GORMGEN_PACKAGE_NAME", "entities")
        settings = Settings(_env_file=None)
        assert settings.db_driver == "postgres"
        assert settings.db_port == 6543
        assert settings.package_name == "entities"


class TestConnectionParams:
    """Test connection parameter construction."""

    def test_from_settings(self):
        settings = Settings(_env_file=None, db_driver="postgres", db_name="shop", db_schema="sales")
        params = ConnectionParams.from_settings(settings)
        assert params.driver == "postgres"
        assert params.database == "shop"
        assert params.schema_name == "sales"

    def test_overrides_skip_none(self):
        """Test only explicitly given overrides replace settings values."""
        settings = Settings(_env_file=None, db_host="db.internal", db_name="shop")
        params = ConnectionParams.from_settings(settings, host=None, database="other", port=3307)
        assert params.host == "db.internal"
        assert params.database == "other"
        assert params.port == 3307

    def test_resolved_port(self):
        assert ConnectionParams(driver="mysql").resolved_port() == 3306
        assert ConnectionParams(driver="postgresql").resolved_port() == 5432
        assert ConnectionParams(driver="postgres", port=6432).resolved_port() == 6432
