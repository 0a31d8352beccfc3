"""
MapIt Backend: Configuration and Connection Provider Tests
=============================================================

What:  Settings parsing, engine URL construction and asyncpg connect args.
How:   Builds Settings objects directly; no engine connects anywhere.
"""

import ssl

import pytest
from pydantic import ValidationError as SettingsValidationError

from mapit.config import Settings
from mapit.database import (
    Database,
    build_connect_args,
    build_engine_url,
    relaxed_ssl_context,
)
from mapit.exceptions import ConfigurationError


def make_settings(**overrides):
    """Settings that ignore the process environment and any .env file."""
    values = {"database_url": None, "db_host": None}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:

    def test_blank_url_counts_as_missing(self):
        config = make_settings(database_url="   ")

        assert config.database_url is None
        assert config.has_database_config is False

    def test_discrete_host_counts_as_configured(self):
        assert make_settings(db_host="db.internal").has_database_config is True

    def test_log_level_is_validated(self):
        assert make_settings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(SettingsValidationError):
            make_settings(log_level="chatty")


class TestEngineUrl:

    @pytest.mark.parametrize("scheme", ["postgres", "postgresql", "postgresql+psycopg2"])
    def test_postgres_schemes_use_asyncpg(self, scheme):
        url = build_engine_url(make_settings(database_url=f"{scheme}://u:p@db:5432/mapit"))

        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db"
        assert url.database == "mapit"

    def test_libpq_only_options_are_stripped(self):
        url = build_engine_url(
            make_settings(
                database_url="postgresql://u:p@db/mapit?sslmode=require&channel_binding=require"
            )
        )

        assert "sslmode" not in url.query
        assert "channel_binding" not in url.query

    def test_other_backends_are_untouched(self):
        url = build_engine_url(make_settings(database_url="sqlite+aiosqlite:///./mapit.db"))

        assert url.drivername == "sqlite+aiosqlite"

    def test_discrete_parameters(self):
        url = build_engine_url(
            make_settings(db_host="db.internal", db_port=6543, db_name="maps",
                          db_user="mapit", db_password="s3cret")
        )

        assert url.drivername == "postgresql+asyncpg"
        assert (url.host, url.port, url.database) == ("db.internal", 6543, "maps")
        assert url.username == "mapit"
        assert url.password == "s3cret"

    def test_connection_string_wins_over_host(self):
        url = build_engine_url(
            make_settings(database_url="postgresql://u:p@primary/mapit", db_host="other")
        )

        assert url.host == "primary"

    def test_missing_configuration(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_engine_url(make_settings())

        assert exc_info.value.error == "DATABASE_URL environment variable is not set"

    @pytest.mark.parametrize("raw", ["not a url at all", "postgresql://u:p@db:notaport/mapit"])
    def test_malformed_url(self, raw):
        with pytest.raises(ConfigurationError) as exc_info:
            build_engine_url(make_settings(database_url=raw))

        assert exc_info.value.error.startswith("Invalid DATABASE_URL: ")
        assert exc_info.value.status_code == 500


class TestConnectArgs:

    def test_timeouts(self):
        args = build_connect_args(
            make_settings(db_host="db", db_connect_timeout=3, db_command_timeout=7)
        )

        assert args["timeout"] == 3
        assert args["command_timeout"] == 7
        assert "ssl" not in args

    def test_sslmode_is_forwarded(self):
        args = build_connect_args(
            make_settings(database_url="postgresql://u:p@db/mapit?sslmode=require")
        )

        assert args["ssl"] == "require"

    def test_relaxed_ssl(self):
        args = build_connect_args(
            make_settings(
                database_url="postgresql://u:p@db/mapit?sslmode=require",
                database_ssl_relaxed=True,
            )
        )

        assert isinstance(args["ssl"], ssl.SSLContext)
        assert args["ssl"].verify_mode == ssl.CERT_NONE

    def test_sqlite_has_no_connect_args(self):
        assert build_connect_args(make_settings(database_url="sqlite+aiosqlite://")) == {}

    def test_relaxed_context_skips_verification(self):
        context = relaxed_ssl_context()

        assert context.check_hostname is False
        assert context.verify_mode == ssl.CERT_NONE


class TestDatabaseFromSettings:

    def test_missing_configuration(self):
        with pytest.raises(ConfigurationError):
            Database.from_settings(make_settings())

    def test_unknown_dialect(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Database.from_settings(make_settings(database_url="nosuchdb://u:p@db/mapit"))

        assert exc_info.value.error.startswith("Invalid DATABASE_URL: ")

    @pytest.mark.asyncio
    async def test_pool_parameters(self):
        database = Database.from_settings(
            make_settings(database_url="postgresql://u:p@db/mapit", db_pool_size=5,
                          db_max_overflow=2)
        )
        try:
            assert database.engine.pool.size() == 5
            assert database.engine.pool._max_overflow == 2
            assert database.engine.url.drivername == "postgresql+asyncpg"
        finally:
            await database.dispose()
