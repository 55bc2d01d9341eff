from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.db.session import AsyncSessionLocal
from app.domain.ports import TankReadingRepository, TankRepository
from app.repositories.sql import SqlTankReadingRepository, SqlTankRepository


async def get_db_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_app_settings() -> Settings:
    return get_settings()


def get_tank_repository(session: AsyncSession = Depends(get_db_session)) -> TankRepository:
    return SqlTankRepository(session)


def get_reading_repository(
    session: AsyncSession = Depends(get_db_session),
) -> TankReadingRepository:
    return SqlTankReadingRepository(session)
