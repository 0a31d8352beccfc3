"""
MapIt Backend: Map Service Unit Tests
=======================================

What:  Tests for MapService (list, create, per-customer list).
How:   Uses mock DB sessions (no real database).

What we test:
    ✅ Listing rows map onto MapSummary with zone_count and customer_name
    ✅ Create validates title/customer_id before touching the store
    ✅ Defaults: description/country '' and active unless literal false
    ✅ Foreign-key violation on insert becomes "Customer not found"
    ✅ Driver failures become DatabaseError carrying the driver message
"""

import pytest
from unittest.mock import AsyncMock
from sqlalchemy.exc import IntegrityError, OperationalError

from conftest import make_result
from mapit.exceptions import DatabaseError, NotFoundError, ValidationError
from mapit.schemas.map import MapCreate
from mapit.services.map_service import MapService


class DriverError(Exception):
    """Stand-in for an asyncpg exception carrying a SQLSTATE."""

    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


def compiled_params(mock_db_session):
    """Bound parameters of the statement passed to the last execute()."""
    statement = mock_db_session.execute.await_args.args[0]
    return statement.compile().params


class TestMapServiceList:
    """Tests for list_maps."""

    def setup_method(self):
        self.service = MapService()

    @pytest.mark.asyncio
    async def test_list_maps_returns_summaries(self, mock_db_session, listing_row):
        mock_db_session.execute.return_value = make_result(rows=[listing_row])

        maps = await self.service.list_maps(mock_db_session)

        assert len(maps) == 1
        assert maps[0].customer_name == "Ada Lovelace"
        assert maps[0].zone_count == 2
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_maps_empty_store(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(rows=[])

        assert await self.service.list_maps(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_list_maps_statement_shape(self, mock_db_session):
        """Outer joins, grouped by map and name parts, newest first."""
        mock_db_session.execute.return_value = make_result(rows=[])

        await self.service.list_maps(mock_db_session)

        sql = str(mock_db_session.execute.await_args.args[0]).upper()
        assert "LEFT OUTER JOIN CUSTOMER" in sql
        assert "LEFT OUTER JOIN ZONES" in sql
        assert "COUNT(ZONES.ZONE_ID)" in sql
        assert "GROUP BY MAP.MAP_ID, CUSTOMER.FIRST_NAME, CUSTOMER.LAST_NAME" in sql
        assert "ORDER BY MAP.CREATED_AT DESC" in sql

    @pytest.mark.asyncio
    async def test_list_maps_store_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT ...", {}, DriverError('relation "map" does not exist')
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_maps(mock_db_session)

        assert exc_info.value.error == "Server error"
        assert exc_info.value.message == 'relation "map" does not exist'


class TestMapServiceCreate:
    """Tests for create_map."""

    def setup_method(self):
        self.service = MapService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"customer_id": 7},
            {"title": "", "customer_id": 7},
            {"title": "Trip"},
            {"title": "Trip", "customer_id": 0},
            {},
        ],
    )
    async def test_create_requires_title_and_customer(self, mock_db_session, body):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_map(mock_db_session, MapCreate(**body))

        assert exc_info.value.error == "Title and customer_id are required"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_returns_stored_row(self, mock_db_session, sample_map):
        mock_db_session.execute.return_value = make_result(scalar=sample_map)

        created = await self.service.create_map(
            mock_db_session, MapCreate(title="Beirut districts", customer_id=7)
        )

        assert created.map_id == 12
        assert created.description == ""
        assert created.active is True
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, mock_db_session, sample_map):
        mock_db_session.execute.return_value = make_result(scalar=sample_map)

        await self.service.create_map(
            mock_db_session, MapCreate(title="Trip", customer_id=7)
        )

        params = compiled_params(mock_db_session)
        assert params["description"] == ""
        assert params["country"] == ""
        assert params["active"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "active, expected",
        [(False, False), (True, True), (None, True), ("false", True), (0, True)],
    )
    async def test_create_only_literal_false_deactivates(
        self, mock_db_session, sample_map, active, expected
    ):
        mock_db_session.execute.return_value = make_result(scalar=sample_map)

        await self.service.create_map(
            mock_db_session, MapCreate(title="Trip", customer_id=7, active=active)
        )

        assert compiled_params(mock_db_session)["active"] is expected

    @pytest.mark.asyncio
    async def test_create_unknown_customer(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT ...",
            {},
            DriverError('violates foreign key constraint "fk_map_customer"', sqlstate="23503"),
        )

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.create_map(
                mock_db_session, MapCreate(title="Trip", customer_id=999)
            )

        assert exc_info.value.error == "Customer not found"

    @pytest.mark.asyncio
    async def test_create_other_integrity_error_is_server_error(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT ...", {}, DriverError("value too long", sqlstate="22001")
        )

        with pytest.raises(DatabaseError):
            await self.service.create_map(
                mock_db_session, MapCreate(title="Trip", customer_id=7)
            )

    @pytest.mark.asyncio
    async def test_commit_failure_becomes_database_error(self, mock_db_session, sample_map):
        mock_db_session.execute.return_value = make_result(scalar=sample_map)
        mock_db_session.commit.side_effect = OperationalError(
            "COMMIT", {}, DriverError("could not serialize access")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_map(
                mock_db_session, MapCreate(title="Trip", customer_id=7)
            )

        assert exc_info.value.message == "could not serialize access"


class TestMapServiceCustomerList:
    """Tests for list_customer_maps."""

    def setup_method(self):
        self.service = MapService()

    @pytest.mark.asyncio
    async def test_customer_maps_filters_by_owner(self, mock_db_session, listing_row):
        row = {k: v for k, v in listing_row.items() if k != "customer_name"}
        mock_db_session.execute.return_value = make_result(rows=[row])

        maps = await self.service.list_customer_maps(mock_db_session, 7)

        assert [m.map_id for m in maps] == [12]
        assert compiled_params(mock_db_session)["customer_id_1"] == 7

    @pytest.mark.asyncio
    async def test_unknown_customer_yields_empty_list(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(rows=[])

        assert await self.service.list_customer_maps(mock_db_session, 424242) == []

    @pytest.mark.asyncio
    async def test_timeout_becomes_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=TimeoutError("canceling statement"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_customer_maps(mock_db_session, 7)

        assert "canceling statement" in exc_info.value.message
