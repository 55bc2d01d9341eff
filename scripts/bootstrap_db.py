from __future__ import annotations

import argparse
import asyncio
import logging

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import AsyncSessionLocal, engine
from app.domain.commands import NewTank
from app.domain.errors import DuplicateSerialNumber
from app.models import entities  # noqa: F401  registers the tables on Base.metadata
from app.repositories.sql import SqlTankRepository
from app.services.tanks import create_tank

log = logging.getLogger("bootstrap-db")

DEMO_TANKS: list[NewTank] = [
    NewTank(
        name="Demo cylinder",
        serial_number="DEMO-CYL-0001",
        capacity=196.35,
        height=100,
        diameter=50,
        location="Yard A",
    ),
    NewTank(
        name="Demo cistern",
        serial_number="DEMO-BOX-0001",
        capacity=1000,
        height=100,
        location="Yard B",
    ),
]


async def bootstrap(seed_demo: bool) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if not seed_demo:
        print("Database ready. No demo fixtures created.")
        return

    async with AsyncSessionLocal() as session:
        tanks = SqlTankRepository(session)
        for payload in DEMO_TANKS:
            try:
                tank = await create_tank(tanks, payload)
            except DuplicateSerialNumber:
                log.info("Demo tank %s already present", payload.serial_number)
                continue
            print(f"Tank {tank.id}: {tank.name} ({tank.serial_number})")

    print("Demo data ready!")


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize database and optional demo fixtures.")
    parser.add_argument("--seed-demo", action="store_true", help="Seed demo tanks for quick testing")
    args = parser.parse_args()
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(bootstrap(args.seed_demo))


if __name__ == "__main__":
    main()
