"""Tests for the SQLAlchemy storage adapters."""
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.entities import UNSAVED_ID, Tank, TankReading
from app.domain.errors import StorageError

BASE = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


def new_tank(serial="SN-1", **overrides) -> Tank:
    data = {
        "id": UNSAVED_ID,
        "name": "Tank",
        "serial_number": serial,
        "capacity": 1000.0,
        "height": 100.0,
    }
    data.update(overrides)
    return Tank(**data)


def new_reading(tank_id, level, timestamp, **overrides) -> TankReading:
    data = {
        "id": UNSAVED_ID,
        "tank_id": tank_id,
        "liquid_level": level,
        "volume": level * 10,
        "percentage": level,
        "reading_timestamp": timestamp,
    }
    data.update(overrides)
    return TankReading(**data)


@pytest.mark.asyncio
async def test_save_assigns_id_and_round_trips(tank_repo):
    saved = await tank_repo.save(new_tank(diameter=50.0, location="Yard"))

    assert saved.id != UNSAVED_ID
    loaded = await tank_repo.find_by_id(saved.id)
    assert loaded.name == "Tank"
    assert loaded.serial_number == "SN-1"
    assert loaded.diameter == 50.0
    assert loaded.location == "Yard"
    assert loaded.active is True
    assert loaded.created_at.tzinfo is not None
    assert loaded.updated_at.tzinfo is not None


@pytest.mark.asyncio
async def test_find_by_serial_number(tank_repo):
    saved = await tank_repo.save(new_tank(serial="ABC"))

    assert (await tank_repo.find_by_serial_number("ABC")).id == saved.id
    assert await tank_repo.find_by_serial_number("missing") is None


@pytest.mark.asyncio
async def test_save_persisted_tank_updates_in_place(tank_repo):
    saved = await tank_repo.save(new_tank())
    saved.rename("Renamed")
    saved.deactivate()

    updated = await tank_repo.save(saved)

    assert updated.id == saved.id
    assert updated.name == "Renamed"
    assert updated.active is False
    assert len(await tank_repo.find_all()) == 1


@pytest.mark.asyncio
async def test_save_unknown_id_creates_tank(tank_repo):
    created = await tank_repo.save(new_tank(id=77))

    assert await tank_repo.find_by_id(created.id) is not None
    assert len(await tank_repo.find_all()) == 1


@pytest.mark.asyncio
async def test_find_all_empty(tank_repo):
    assert await tank_repo.find_all() == []


@pytest.mark.asyncio
async def test_delete_missing_tank_returns_false(tank_repo):
    assert await tank_repo.delete(123) is False


@pytest.mark.asyncio
async def test_delete_tank_removes_its_readings(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())
    keep = await tank_repo.save(new_tank(serial="SN-2"))
    await reading_repo.save(new_reading(tank.id, 10, BASE))
    await reading_repo.save(new_reading(keep.id, 20, BASE))

    assert await tank_repo.delete(tank.id) is True

    assert await tank_repo.find_by_id(tank.id) is None
    assert await reading_repo.find_by_tank_id(tank.id) == []
    assert len(await reading_repo.find_by_tank_id(keep.id)) == 1


@pytest.mark.asyncio
async def test_reading_round_trip_preserves_raw_data(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())
    raw = {"sensor": "ultrasonic", "samples": [101, 99, 100], "meta": {"fw": "1.2.0"}}

    saved = await reading_repo.save(new_reading(tank.id, 42.5, BASE, temperature=21.5, raw_data=raw))

    loaded = await reading_repo.find_by_id(saved.id)
    assert loaded.raw_data == raw
    assert loaded.temperature == 21.5
    assert loaded.liquid_level == 42.5
    assert loaded.reading_timestamp == BASE
    assert loaded.created_at is not None
    assert loaded.updated_at is not None


@pytest.mark.asyncio
async def test_reading_timestamps_are_normalised_to_utc(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())
    plus_two = timezone(timedelta(hours=2))

    saved = await reading_repo.save(
        new_reading(tank.id, 1, datetime(2025, 6, 1, 10, 0, tzinfo=plus_two))
    )

    assert saved.reading_timestamp == BASE
    assert saved.reading_timestamp.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_find_by_tank_id_orders_newest_first(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())
    for level, hours in [(1, 0), (3, 2), (2, 1)]:
        await reading_repo.save(new_reading(tank.id, level, BASE + timedelta(hours=hours)))

    readings = await reading_repo.find_by_tank_id(tank.id)
    latest = await reading_repo.find_latest_by_tank_id(tank.id)

    assert [r.liquid_level for r in readings] == [3, 2, 1]
    assert latest.liquid_level == 3


@pytest.mark.asyncio
async def test_find_latest_without_readings(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())

    assert await reading_repo.find_latest_by_tank_id(tank.id) is None


@pytest.mark.asyncio
async def test_date_range_includes_both_bounds(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())
    for hours in range(5):
        await reading_repo.save(new_reading(tank.id, hours, BASE + timedelta(hours=hours)))

    readings = await reading_repo.find_by_tank_id_and_date_range(
        tank.id, BASE + timedelta(hours=1), BASE + timedelta(hours=3)
    )

    assert [r.liquid_level for r in readings] == [3, 2, 1]


@pytest.mark.asyncio
async def test_delete_old_readings_is_strict(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())
    other = await tank_repo.save(new_tank(serial="SN-2"))
    for hours in range(4):
        await reading_repo.save(new_reading(tank.id, hours, BASE + timedelta(hours=hours)))
    await reading_repo.save(new_reading(other.id, 9, BASE))

    deleted = await reading_repo.delete_old_readings(tank.id, BASE + timedelta(hours=2))

    assert deleted == 2
    remaining = await reading_repo.find_by_tank_id(tank.id)
    assert [r.liquid_level for r in remaining] == [3, 2]
    assert len(await reading_repo.find_by_tank_id(other.id)) == 1


@pytest.mark.asyncio
async def test_delete_old_readings_none_matched(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())

    assert await reading_repo.delete_old_readings(tank.id, BASE) == 0


@pytest.mark.asyncio
async def test_failed_reading_write_rolls_back_and_session_stays_usable(tank_repo, reading_repo):
    tank = await tank_repo.save(new_tank())

    # SQLite stores NaN as NULL, which the volume column refuses.
    with pytest.raises(StorageError):
        await reading_repo.save(new_reading(tank.id, 5, BASE, volume=float("nan")))

    saved = await reading_repo.save(new_reading(tank.id, 6, BASE))

    assert saved.volume == 60
    assert [r.liquid_level for r in await reading_repo.find_by_tank_id(tank.id)] == [6]
