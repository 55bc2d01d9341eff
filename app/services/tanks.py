"""Tank lifecycle workflows.

Each workflow checks its preconditions first and touches storage only once
they hold, so a failed call leaves nothing persisted.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from app.core.clock import utcnow
from app.domain.commands import NewTank
from app.domain.entities import UNSAVED_ID, Tank
from app.domain.errors import DuplicateSerialNumber, TankNotFound
from app.domain.ports import TankRepository

log = logging.getLogger("tank-workflows")


async def create_tank(
    tanks: TankRepository,
    payload: NewTank,
    clock: Callable[[], datetime] = utcnow,
) -> Tank:
    if await tanks.find_by_serial_number(payload.serial_number) is not None:
        log.info("Tank with serial number %s already exists", payload.serial_number)
        raise DuplicateSerialNumber(payload.serial_number)

    now = clock()
    tank = Tank(
        id=UNSAVED_ID,
        name=payload.name,
        serial_number=payload.serial_number,
        capacity=payload.capacity,
        height=payload.height,
        diameter=payload.diameter,
        location=payload.location,
        active=True,
        created_at=now,
        updated_at=now,
    )
    saved = await tanks.save(tank)
    log.info("Created tank %s (serial %s)", saved.id, saved.serial_number)
    return saved


async def get_tank(tanks: TankRepository, tank_id: int) -> Tank:
    tank = await tanks.find_by_id(tank_id)
    if tank is None:
        raise TankNotFound(tank_id)
    return tank


async def list_tanks(tanks: TankRepository) -> list[Tank]:
    return list(await tanks.find_all())


async def update_tank(tanks: TankRepository, tank_id: int, changes: Mapping[str, Any]) -> Tank:
    """Apply the fields present in ``changes``; absent keys are left alone."""
    tank = await get_tank(tanks, tank_id)

    # name, capacity and height cannot be cleared; an explicit null is ignored
    if changes.get("name") is not None:
        tank.rename(changes["name"])
    if changes.get("capacity") is not None:
        tank.set_capacity(changes["capacity"])
    if changes.get("height") is not None:
        tank.set_height(changes["height"])
    if "diameter" in changes:
        tank.set_diameter(changes["diameter"])
    if "location" in changes:
        tank.set_location(changes["location"])
    if changes.get("active") is not None:
        if changes["active"]:
            tank.activate()
        else:
            tank.deactivate()

    return await tanks.save(tank)


async def delete_tank(tanks: TankRepository, tank_id: int) -> None:
    await get_tank(tanks, tank_id)
    await tanks.delete(tank_id)
    log.info("Deleted tank %s", tank_id)
