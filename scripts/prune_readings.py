"""Delete tank readings older than the retention window."""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import timedelta

from app.core.clock import utcnow
from app.core.config import get_settings
from app.db.session import AsyncSessionLocal, engine
from app.repositories.sql import SqlTankReadingRepository, SqlTankRepository
from app.services.readings import prune_old_readings
from app.services.tanks import list_tanks

log = logging.getLogger("prune-readings")


async def prune(days: int, tank_id: int | None) -> int:
    cutoff = utcnow() - timedelta(days=days)
    total = 0
    async with AsyncSessionLocal() as session:
        tanks = SqlTankRepository(session)
        readings = SqlTankReadingRepository(session)
        if tank_id is not None:
            tank_ids = [tank_id]
        else:
            tank_ids = [tank.id for tank in await list_tanks(tanks)]

        for current_id in tank_ids:
            total += await prune_old_readings(tanks, readings, current_id, cutoff)

    log.info("Removed %d readings older than %s", total, cutoff.isoformat())
    return total


async def _run(days: int, tank_id: int | None) -> None:
    try:
        await prune(days, tank_id)
    finally:
        await engine.dispose()


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--days",
        type=int,
        default=settings.reading_retention_days,
        help="Keep readings observed within this many days",
    )
    parser.add_argument("--tank-id", type=int, default=None, help="Only prune this tank")
    args = parser.parse_args()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(_run(args.days, args.tank_id))


if __name__ == "__main__":
    main()
