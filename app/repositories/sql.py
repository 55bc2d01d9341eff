"""Async SQLAlchemy implementations of the tank storage ports.

Every mutating call commits the session it was given. Datetimes are stored
as UTC and handed back timezone-aware.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import ensure_aware
from app.domain.entities import Tank, TankReading
from app.domain.errors import DuplicateSerialNumber, StorageError
from app.domain.ports import TankReadingRepository, TankRepository
from app.models.entities import TankModel, TankReadingModel

log = logging.getLogger("tank-storage")


def _to_tank(row: TankModel) -> Tank:
    return Tank(
        id=row.id,
        name=row.name,
        serial_number=row.serial_number,
        capacity=row.capacity,
        height=row.height,
        diameter=row.diameter,
        location=row.location,
        active=row.is_active,
        created_at=ensure_aware(row.created_at),
        updated_at=ensure_aware(row.updated_at),
    )


def _to_reading(row: TankReadingModel) -> TankReading:
    return TankReading(
        id=row.id,
        tank_id=row.tank_id,
        liquid_level=row.liquid_level,
        volume=row.volume,
        percentage=row.percentage,
        reading_timestamp=ensure_aware(row.reading_timestamp),
        temperature=row.temperature,
        raw_data=row.raw_data,
        created_at=ensure_aware(row.created_at),
        updated_at=ensure_aware(row.updated_at),
    )


class SqlTankRepository(TankRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, tank_id: int) -> Tank | None:
        row = await self.session.get(TankModel, tank_id)
        return _to_tank(row) if row else None

    async def find_by_serial_number(self, serial_number: str) -> Tank | None:
        result = await self.session.execute(
            select(TankModel).where(TankModel.serial_number == serial_number)
        )
        row = result.scalar_one_or_none()
        return _to_tank(row) if row else None

    async def find_all(self) -> list[Tank]:
        result = await self.session.execute(select(TankModel).order_by(TankModel.id))
        return [_to_tank(row) for row in result.scalars().all()]

    async def save(self, tank: Tank) -> Tank:
        row = await self.session.get(TankModel, tank.id) if tank.is_persisted else None
        if row is None:
            row = TankModel(created_at=ensure_aware(tank.created_at))
            self.session.add(row)

        row.name = tank.name
        row.serial_number = tank.serial_number
        row.capacity = tank.capacity
        row.height = tank.height
        row.diameter = tank.diameter
        row.location = tank.location
        row.is_active = tank.active
        row.updated_at = ensure_aware(tank.updated_at)

        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            # A concurrent insert can win the race past the caller's pre-check.
            existing = await self.find_by_serial_number(tank.serial_number)
            if existing is not None and existing.id != tank.id:
                log.warning("Rejected duplicate serial number %s", tank.serial_number)
                raise DuplicateSerialNumber(tank.serial_number) from None
            raise

        await self.session.refresh(row)
        return _to_tank(row)

    async def delete(self, tank_id: int) -> bool:
        row = await self.session.get(TankModel, tank_id)
        if row is None:
            return False

        await self.session.execute(
            delete(TankReadingModel).where(TankReadingModel.tank_id == tank_id)
        )
        await self.session.delete(row)
        await self.session.commit()
        return True


class SqlTankReadingRepository(TankReadingRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, reading_id: int) -> TankReading | None:
        row = await self.session.get(TankReadingModel, reading_id)
        return _to_reading(row) if row else None

    async def save(self, reading: TankReading) -> TankReading:
        row = (
            await self.session.get(TankReadingModel, reading.id)
            if reading.is_persisted
            else None
        )
        if row is None:
            row = TankReadingModel()
            self.session.add(row)

        row.tank_id = reading.tank_id
        row.liquid_level = reading.liquid_level
        row.volume = reading.volume
        row.percentage = reading.percentage
        row.temperature = reading.temperature
        row.reading_timestamp = ensure_aware(reading.reading_timestamp)
        row.raw_data = reading.raw_data

        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            # Leave the session usable for the caller's next write.
            await self.session.rollback()
            log.warning("Could not store reading for tank %s: %s", reading.tank_id, exc)
            raise StorageError(f"Reading for tank {reading.tank_id} could not be stored") from exc

        await self.session.refresh(row)
        return _to_reading(row)

    async def find_by_tank_id(self, tank_id: int) -> list[TankReading]:
        result = await self.session.execute(
            select(TankReadingModel)
            .where(TankReadingModel.tank_id == tank_id)
            .order_by(TankReadingModel.reading_timestamp.desc(), TankReadingModel.id.desc())
        )
        return [_to_reading(row) for row in result.scalars().all()]

    async def find_by_tank_id_and_date_range(
        self, tank_id: int, start: datetime, end: datetime
    ) -> list[TankReading]:
        result = await self.session.execute(
            select(TankReadingModel)
            .where(
                TankReadingModel.tank_id == tank_id,
                TankReadingModel.reading_timestamp.between(ensure_aware(start), ensure_aware(end)),
            )
            .order_by(TankReadingModel.reading_timestamp.desc(), TankReadingModel.id.desc())
        )
        return [_to_reading(row) for row in result.scalars().all()]

    async def find_latest_by_tank_id(self, tank_id: int) -> TankReading | None:
        result = await self.session.execute(
            select(TankReadingModel)
            .where(TankReadingModel.tank_id == tank_id)
            .order_by(TankReadingModel.reading_timestamp.desc(), TankReadingModel.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_reading(row) if row else None

    async def delete_old_readings(self, tank_id: int, older_than: datetime) -> int:
        result = await self.session.execute(
            select(TankReadingModel.id).where(
                TankReadingModel.tank_id == tank_id,
                TankReadingModel.reading_timestamp < ensure_aware(older_than),
            )
        )
        stale_ids = result.scalars().all()
        if stale_ids:
            await self.session.execute(
                delete(TankReadingModel).where(TankReadingModel.id.in_(stale_ids))
            )
        await self.session.commit()
        return len(stale_ids)
