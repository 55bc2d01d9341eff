from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.core.clock import utcnow
from app.core.config import Settings
from app.deps import get_app_settings, get_reading_repository, get_tank_repository
from app.domain.commands import NewReading
from app.domain.errors import InvalidInput, TankNotFound
from app.domain.ports import TankReadingRepository, TankRepository
from app.schemas.reading import (
    PruneOut,
    ReadingBatchIn,
    ReadingBatchOut,
    ReadingError,
    ReadingIn,
    ReadingOut,
)
from app.services import readings as workflows

router = APIRouter(tags=["readings"])


@router.post("/tank-readings", response_model=ReadingOut, status_code=status.HTTP_201_CREATED)
async def register_reading(
    payload: ReadingIn,
    tanks: TankRepository = Depends(get_tank_repository),
    readings: TankReadingRepository = Depends(get_reading_repository),
):
    try:
        reading = await workflows.register_reading(
            tanks, readings, NewReading(**payload.model_dump())
        )
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    return ReadingOut.model_validate(reading)


@router.post("/tank-readings/batch", response_model=ReadingBatchOut)
async def register_reading_batch(
    payload: ReadingBatchIn,
    tanks: TankRepository = Depends(get_tank_repository),
    readings: TankReadingRepository = Depends(get_reading_repository),
):
    items = [NewReading(**item.model_dump()) for item in payload.readings]
    result = await workflows.register_readings(tanks, readings, items)
    body = ReadingBatchOut(
        registered=[ReadingOut.model_validate(r) for r in result.registered],
        errors=[ReadingError(index=f.index, detail=str(f.error)) for f in result.failures],
    )
    # Nothing registered means every item was rejected.
    status_code = status.HTTP_201_CREATED if result.registered else status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.get("/tanks/{tank_id}/readings", response_model=list[ReadingOut])
async def list_readings(
    tank_id: int,
    tanks: TankRepository = Depends(get_tank_repository),
    readings: TankReadingRepository = Depends(get_reading_repository),
):
    try:
        items = await workflows.list_readings(tanks, readings, tank_id)
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    return [ReadingOut.model_validate(r) for r in items]


@router.get("/tanks/{tank_id}/readings/latest", response_model=ReadingOut)
async def get_latest_reading(
    tank_id: int,
    tanks: TankRepository = Depends(get_tank_repository),
    readings: TankReadingRepository = Depends(get_reading_repository),
):
    try:
        reading = await workflows.get_latest_reading(tanks, readings, tank_id)
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    if reading is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No readings available for this tank",
        )
    return ReadingOut.model_validate(reading)


@router.get("/tanks/{tank_id}/readings/date-range", response_model=list[ReadingOut])
async def list_readings_by_date_range(
    tank_id: int,
    start_date: datetime,
    end_date: datetime,
    tanks: TankRepository = Depends(get_tank_repository),
    readings: TankReadingRepository = Depends(get_reading_repository),
):
    try:
        items = await workflows.list_readings_between(tanks, readings, tank_id, start_date, end_date)
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    except InvalidInput as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    return [ReadingOut.model_validate(r) for r in items]


@router.delete("/tanks/{tank_id}/readings", response_model=PruneOut)
async def prune_readings(
    tank_id: int,
    older_than: datetime | None = None,
    tanks: TankRepository = Depends(get_tank_repository),
    readings: TankReadingRepository = Depends(get_reading_repository),
    settings: Settings = Depends(get_app_settings),
):
    """Drop stale readings; defaults to the configured retention window."""
    cutoff = older_than or utcnow() - timedelta(days=settings.reading_retention_days)
    try:
        deleted = await workflows.prune_old_readings(tanks, readings, tank_id, cutoff)
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    return PruneOut(tank_id=tank_id, older_than=cutoff, deleted=deleted)
