"""Reading registration and query workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable

from app.core.clock import ensure_aware, utcnow
from app.domain.commands import NewReading
from app.domain.entities import UNSAVED_ID, Tank, TankReading
from app.domain.errors import DomainError, InvalidInput, TankNotFound
from app.domain.ports import TankReadingRepository, TankRepository
from app.domain.volume import calculate_percentage, calculate_volume

log = logging.getLogger("tank-readings")


@dataclass
class BatchFailure:
    index: int
    error: DomainError


@dataclass
class BatchResult:
    """Outcome of a batch registration, kept in submission order."""

    registered: list[TankReading] = field(default_factory=list)
    failures: list[BatchFailure] = field(default_factory=list)


async def _require_tank(tanks: TankRepository, tank_id: int) -> Tank:
    tank = await tanks.find_by_id(tank_id)
    if tank is None:
        raise TankNotFound(tank_id)
    return tank


async def register_reading(
    tanks: TankRepository,
    readings: TankReadingRepository,
    payload: NewReading,
    clock: Callable[[], datetime] = utcnow,
) -> TankReading:
    """Derive volume and fill percentage for a level sample and store it.

    The owning tank is looked up before anything is computed; the tank
    itself is never modified.
    """
    tank = await _require_tank(tanks, payload.tank_id)

    volume = calculate_volume(tank, payload.liquid_level)
    reading = TankReading(
        id=UNSAVED_ID,
        tank_id=tank.id,
        liquid_level=payload.liquid_level,
        volume=volume,
        percentage=calculate_percentage(volume, tank.capacity),
        reading_timestamp=payload.reading_timestamp or clock(),
        temperature=payload.temperature,
        raw_data=payload.raw_data,
    )
    return await readings.save(reading)


async def register_readings(
    tanks: TankRepository,
    readings: TankReadingRepository,
    payloads: Iterable[NewReading],
    clock: Callable[[], datetime] = utcnow,
) -> BatchResult:
    """Register each item on its own; a failed item never stops the rest.

    Rejected items and items the storage adapter failed to write are both
    recorded by their position in ``payloads``.
    """
    result = BatchResult()
    for index, payload in enumerate(payloads):
        try:
            reading = await register_reading(tanks, readings, payload, clock=clock)
        except DomainError as exc:
            log.warning("Batch item %d rejected: %s", index, exc)
            result.failures.append(BatchFailure(index=index, error=exc))
            continue
        result.registered.append(reading)
    return result


async def list_readings(
    tanks: TankRepository, readings: TankReadingRepository, tank_id: int
) -> list[TankReading]:
    await _require_tank(tanks, tank_id)
    return list(await readings.find_by_tank_id(tank_id))


async def list_readings_between(
    tanks: TankRepository,
    readings: TankReadingRepository,
    tank_id: int,
    start: datetime,
    end: datetime,
) -> list[TankReading]:
    if ensure_aware(start) > ensure_aware(end):
        raise InvalidInput("start must not be after end")
    await _require_tank(tanks, tank_id)
    return list(await readings.find_by_tank_id_and_date_range(tank_id, start, end))


async def get_latest_reading(
    tanks: TankRepository, readings: TankReadingRepository, tank_id: int
) -> TankReading | None:
    await _require_tank(tanks, tank_id)
    return await readings.find_latest_by_tank_id(tank_id)


async def prune_old_readings(
    tanks: TankRepository,
    readings: TankReadingRepository,
    tank_id: int,
    older_than: datetime,
) -> int:
    """Delete readings observed strictly before ``older_than``."""
    await _require_tank(tanks, tank_id)
    deleted = await readings.delete_old_readings(tank_id, older_than)
    log.info("Pruned %d readings older than %s from tank %s", deleted, older_than.isoformat(), tank_id)
    return deleted
