"""
MapIt Backend: Zone Service Unit Tests
========================================

What:  Tests for ZoneService (list, get, create, update, delete, bulk save).
How:   Uses mock DB sessions (no real database).
"""

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import make_result
from mapit.exceptions import NotFoundError, ValidationError
from mapit.schemas.zone import ZoneBulkSave, ZoneCreate, ZoneUpdate
from mapit.services.zone_service import ZoneService, coordinates_document

TRIANGLE = [[0, 0], [1, 0], [1, 1]]


class ForeignKeyViolation(Exception):
    sqlstate = "23503"


def test_coordinates_document_keeps_order():
    assert coordinates_document([(1.5, 2.0), (3.0, 4.5)]) == [[1.5, 2.0], [3.0, 4.5]]


class TestZoneServiceRead:

    def setup_method(self):
        self.service = ZoneService()

    @pytest.mark.asyncio
    async def test_list_requires_map_id(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.list_zones(mock_db_session, None)

        assert exc_info.value.error == "map_id is required"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_returns_zones(self, mock_db_session, sample_zone):
        mock_db_session.execute.return_value = make_result(scalars=[sample_zone])

        zones = await self.service.list_zones(mock_db_session, 12)

        assert [z.zone_id for z in zones] == [3]
        assert zones[0].coordinates == sample_zone.coordinates

    @pytest.mark.asyncio
    async def test_get_zone_found(self, mock_db_session, sample_zone):
        mock_db_session.execute.return_value = make_result(scalar=sample_zone)

        zone = await self.service.get_zone(mock_db_session, 3)

        assert zone.name == "Hamra"

    @pytest.mark.asyncio
    async def test_get_zone_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalar=None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_zone(mock_db_session, 99)

        assert exc_info.value.error == "Zone not found"


class TestZoneServiceWrite:

    def setup_method(self):
        self.service = ZoneService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"name": "A", "color": "red", "coordinates": TRIANGLE},
            {"map_id": 12, "color": "red", "coordinates": TRIANGLE},
            {"map_id": 12, "name": "A", "coordinates": TRIANGLE},
            {"map_id": 12, "name": "A", "color": "red"},
        ],
    )
    async def test_create_requires_all_fields(self, mock_db_session, body):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_zone(mock_db_session, ZoneCreate(**body))

        assert exc_info.value.error == "map_id, name, color, and coordinates are required"

    @pytest.mark.asyncio
    async def test_create_zone(self, mock_db_session, sample_zone):
        mock_db_session.execute.return_value = make_result(scalar=sample_zone)

        zone = await self.service.create_zone(
            mock_db_session,
            ZoneCreate(map_id=12, name="Hamra", color="#ff0000", coordinates=TRIANGLE),
        )

        assert zone.zone_id == 3
        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_zone_unknown_map(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT ...", {}, ForeignKeyViolation("fk_zones_map")
        )

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.create_zone(
                mock_db_session,
                ZoneCreate(map_id=404, name="A", color="red", coordinates=TRIANGLE),
            )

        assert exc_info.value.error == "Map not found"

    @pytest.mark.asyncio
    async def test_update_only_sends_provided_fields(self, mock_db_session, sample_zone):
        mock_db_session.execute.return_value = make_result(scalar=sample_zone)

        await self.service.update_zone(mock_db_session, 3, ZoneUpdate(color="#00ff00", name=""))

        statement = mock_db_session.execute.await_args.args[0]
        params = statement.compile().params
        assert params["color"] == "#00ff00"
        assert "name" not in params
        assert "coordinates" not in params

    @pytest.mark.asyncio
    async def test_update_missing_zone(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalar=None)

        with pytest.raises(NotFoundError):
            await self.service.update_zone(mock_db_session, 99, ZoneUpdate(name="B"))

        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_zone(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalar=3)

        await self.service.delete_zone(mock_db_session, 3)

        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing_zone(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalar=None)

        with pytest.raises(NotFoundError):
            await self.service.delete_zone(mock_db_session, 99)


class TestZoneServiceBulk:

    def setup_method(self):
        self.service = ZoneService()

    @pytest.mark.asyncio
    async def test_bulk_requires_zones(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.save_zones(mock_db_session, ZoneBulkSave())

        assert exc_info.value.error == "Zones array is required"

    @pytest.mark.asyncio
    async def test_bulk_empty_list_is_noop(self, mock_db_session):
        saved = await self.service.save_zones(mock_db_session, ZoneBulkSave(zones=[]))

        assert saved == []
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bulk_validates_before_writing(self, mock_db_session):
        payload = ZoneBulkSave(
            zones=[
                {"zone_id": 3, "name": "A", "color": "red", "coordinates": TRIANGLE},
                {"name": "B", "color": "blue", "coordinates": TRIANGLE},
            ]
        )

        with pytest.raises(ValidationError):
            await self.service.save_zones(mock_db_session, payload)

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bulk_updates_inserts_and_skips(self, mock_db_session, sample_zone):
        mock_db_session.execute.side_effect = [
            make_result(scalar=sample_zone),  # update of zone 3
            make_result(scalar=None),         # update of unknown zone 77
            make_result(scalar=sample_zone),  # insert
        ]
        payload = ZoneBulkSave(
            zones=[
                {"zone_id": 3, "name": "A", "color": "red", "coordinates": TRIANGLE},
                {"zone_id": 77, "name": "B", "color": "red", "coordinates": TRIANGLE},
                {"map_id": 12, "name": "C", "color": "red", "coordinates": TRIANGLE,
                 "created_at": "ignored"},
            ]
        )

        saved = await self.service.save_zones(mock_db_session, payload)

        assert len(saved) == 2
        assert mock_db_session.execute.await_count == 3
        mock_db_session.commit.assert_awaited_once()
