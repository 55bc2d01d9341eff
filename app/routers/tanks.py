from fastapi import APIRouter, Depends, HTTPException, status

from app.deps import get_tank_repository
from app.domain.commands import NewTank
from app.domain.errors import DuplicateSerialNumber, TankNotFound
from app.domain.ports import TankRepository
from app.schemas.tank import TankCreate, TankOut, TankUpdate
from app.services import tanks as workflows

router = APIRouter(prefix="/tanks", tags=["tanks"])


@router.get("", response_model=list[TankOut])
async def list_tanks(tanks: TankRepository = Depends(get_tank_repository)):
    return [TankOut.model_validate(tank) for tank in await workflows.list_tanks(tanks)]


@router.post("", response_model=TankOut, status_code=status.HTTP_201_CREATED)
async def create_tank(payload: TankCreate, tanks: TankRepository = Depends(get_tank_repository)):
    try:
        tank = await workflows.create_tank(tanks, NewTank(**payload.model_dump()))
    except DuplicateSerialNumber as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from None
    return TankOut.model_validate(tank)


@router.get("/{tank_id}", response_model=TankOut)
async def get_tank(tank_id: int, tanks: TankRepository = Depends(get_tank_repository)):
    try:
        tank = await workflows.get_tank(tanks, tank_id)
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    return TankOut.model_validate(tank)


@router.api_route("/{tank_id}", methods=["PUT", "PATCH"], response_model=TankOut)
async def update_tank(
    tank_id: int,
    payload: TankUpdate,
    tanks: TankRepository = Depends(get_tank_repository),
):
    try:
        tank = await workflows.update_tank(tanks, tank_id, payload.model_dump(exclude_unset=True))
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    return TankOut.model_validate(tank)


@router.delete("/{tank_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tank(tank_id: int, tanks: TankRepository = Depends(get_tank_repository)):
    try:
        await workflows.delete_tank(tanks, tank_id)
    except TankNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    return None
