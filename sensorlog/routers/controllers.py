from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from sensorlog.core.config import Settings
from sensorlog.deps import get_app_settings, get_db_session
from sensorlog.schemas.readings import ControllerOut, ControllerOverview, GroupedReadingsPage, SensorOut
from sensorlog.services import readings as queries
from sensorlog.services.coercion import INTEGER_PATTERN

router = APIRouter(prefix="/controllers", tags=["controllers"])


@router.get("", response_model=list[ControllerOut])
async def list_controllers(session: AsyncSession = Depends(get_db_session)):
    return await queries.list_controllers(session)


@router.get("/{controller}", response_model=ControllerOverview)
async def get_controller_overview(
    controller: str,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    if await queries.get_controller(session, controller) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Controller not found")
    return await queries.load_controller_overview(session, controller, settings.overview_rows_per_channel)


@router.get("/{controller}/sensors", response_model=list[SensorOut])
async def list_sensors(controller: str, session: AsyncSession = Depends(get_db_session)):
    return await queries.list_sensors(session, controller)


@router.get("/{controller}/sensors/{sensor}/readings", response_model=GroupedReadingsPage)
async def get_sensor_readings(
    controller: str,
    sensor: str,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    start: str | None = None,
    end: str | None = None,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    size = page_size or settings.default_page_size
    if start is None and end is None:
        return await queries.get_readings(session, controller, sensor, page, size)
    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="start and end must be given together"
        )
    try:
        return await queries.get_readings_in_range(
            session, controller, sensor, _time_bound(start), _time_bound(end), page, size
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _time_bound(value: str) -> int | str:
    # Digits-only bounds are Unix seconds, everything else goes through ISO parsing.
    candidate = value.strip()
    if INTEGER_PATTERN.fullmatch(candidate):
        return int(candidate)
    return candidate
