"""Test configuration and fixtures."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.deps import get_db_session
from app.domain.entities import UNSAVED_ID, Tank, TankReading
from app.domain.ports import TankReadingRepository, TankRepository
from app.models import entities  # noqa: F401
from app.repositories.sql import SqlTankReadingRepository, SqlTankRepository
from main import app

FIXED_NOW = datetime(2020, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeTankRepository(TankRepository):
    """In-memory tank storage that records every write."""

    def __init__(self) -> None:
        self.rows: dict[int, Tank] = {}
        self.writes: list[tuple[str, object]] = []
        self._next_id = 1

    async def find_by_id(self, tank_id):
        tank = self.rows.get(tank_id)
        return replace(tank) if tank else None

    async def find_by_serial_number(self, serial_number):
        for tank in self.rows.values():
            if tank.serial_number == serial_number:
                return replace(tank)
        return None

    async def find_all(self):
        return [replace(tank) for tank in self.rows.values()]

    async def save(self, tank):
        self.writes.append(("save", tank))
        if tank.id == UNSAVED_ID or tank.id not in self.rows:
            tank = replace(tank, id=self._next_id)
            self._next_id += 1
        self.rows[tank.id] = replace(tank)
        return replace(tank)

    async def delete(self, tank_id):
        self.writes.append(("delete", tank_id))
        return self.rows.pop(tank_id, None) is not None


class FakeTankReadingRepository(TankReadingRepository):
    """In-memory reading storage that records every write."""

    def __init__(self) -> None:
        self.rows: dict[int, TankReading] = {}
        self.writes: list[tuple[str, object]] = []
        self._next_id = 1

    def _newest_first(self, readings):
        return sorted(readings, key=lambda r: (r.reading_timestamp, r.id), reverse=True)

    async def find_by_id(self, reading_id):
        return self.rows.get(reading_id)

    async def save(self, reading):
        self.writes.append(("save", reading))
        if reading.id == UNSAVED_ID or reading.id not in self.rows:
            reading = replace(reading, id=self._next_id, created_at=FIXED_NOW, updated_at=FIXED_NOW)
            self._next_id += 1
        self.rows[reading.id] = reading
        return reading

    async def find_by_tank_id(self, tank_id):
        return self._newest_first(r for r in self.rows.values() if r.tank_id == tank_id)

    async def find_by_tank_id_and_date_range(self, tank_id, start, end):
        return self._newest_first(
            r
            for r in self.rows.values()
            if r.tank_id == tank_id and start <= r.reading_timestamp <= end
        )

    async def find_latest_by_tank_id(self, tank_id):
        readings = await self.find_by_tank_id(tank_id)
        return readings[0] if readings else None

    async def delete_old_readings(self, tank_id, older_than):
        self.writes.append(("delete_old", (tank_id, older_than)))
        stale = [
            r.id
            for r in self.rows.values()
            if r.tank_id == tank_id and r.reading_timestamp < older_than
        ]
        for reading_id in stale:
            del self.rows[reading_id]
        return len(stale)


@pytest.fixture
def fake_tanks() -> FakeTankRepository:
    return FakeTankRepository()


@pytest.fixture
def fake_readings() -> FakeTankReadingRepository:
    return FakeTankReadingRepository()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest_asyncio.fixture
async def session_factory():
    """Session factory bound to a fresh in-memory database holding the tank tables.

    ``StaticPool`` keeps a single connection so every session sees the same data.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """One session shared by the ``tank_repo`` and ``reading_repo`` adapters."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def tank_repo(db_session: AsyncSession) -> SqlTankRepository:
    return SqlTankRepository(db_session)


@pytest.fixture
def reading_repo(db_session: AsyncSession) -> SqlTankReadingRepository:
    return SqlTankReadingRepository(db_session)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the tank API; each request gets its own in-memory session."""

    async def in_memory_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = in_memory_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def cylinder_tank(client: AsyncClient) -> dict:
    """Create a cylindrical tank through the API."""
    response = await client.post(
        "/tanks",
        json={
            "name": "Cylinder",
            "serial_number": "CYL-001",
            "capacity": 196.35,
            "height": 100,
            "diameter": 50,
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def box_tank(client: AsyncClient) -> dict:
    """Create a tank without a diameter through the API."""
    response = await client.post(
        "/tanks",
        json={
            "name": "Cistern",
            "serial_number": "BOX-001",
            "capacity": 1000,
            "height": 100,
            "location": "Yard B",
        },
    )
    assert response.status_code == 201
    return response.json()
