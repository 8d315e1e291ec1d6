"""
Charging station endpoints
==========================

GET    /api/v1/charging-stations      -- list, filter, optional proximity search
POST   /api/v1/charging-stations      -- create a station
GET    /api/v1/charging-stations/{id} -- fetch one station
PUT    /api/v1/charging-stations/{id} -- partial update
DELETE /api/v1/charging-stations/{id} -- delete

Every endpoint requires a bearer token.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user, get_db, get_settings
from src.api.middleware import DEFAULT_LIMIT, limiter
from src.api.schemas import (
    MessageResponse,
    StationCreateRequest,
    StationMutationResponse,
    StationResponse,
    StationUpdateRequest,
)
from src.config import Settings
from src.domain.distance import bounding_box
from src.domain.entities import Coordinate, StationPoint
from src.domain.enums import FILTER_ALL, ConnectorType, StationStatus
from src.domain.proximity import search, validate_radius
from src.infrastructure.repositories import StationQuery, StationRepository
from src.infrastructure.security import TokenPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/charging-stations", tags=["charging-stations"])

# Columns that cannot be cleared by sending null in an update
_NON_NULLABLE = ("name", "latitude", "longitude", "status")


def _to_response(station, distance_km: Optional[float] = None) -> StationResponse:
    return StationResponse(
        id=station.id,
        name=station.name,
        latitude=station.latitude,
        longitude=station.longitude,
        address=station.address,
        connector_type=station.connector_type,
        power_output=station.power_output,
        status=station.status,
        price_per_kwh=station.price_per_kwh,
        created_by=station.created_by,
        created_by_username=station.creator.username if station.creator else None,
        created_by_email=station.creator.email if station.creator else None,
        created_at=station.created_at,
        updated_at=station.updated_at,
        distance_km=distance_km,
    )


def _parse_choice(value: Optional[str], enum_cls, field: str):
    """``None`` / ``"all"`` mean no filter; anything else must be a member."""
    if value is None or value == FILTER_ALL:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join([FILTER_ALL] + [m.value for m in enum_cls])
        raise HTTPException(
            status_code=400, detail=f"Invalid {field} filter; expected one of: {allowed}"
        )


@router.get(
    "",
    response_model=list[StationResponse],
    summary="List charging stations",
    description=(
        "Filters by status, connector type, price and power. With ``lat`` and "
        "``lng`` each station carries ``distance_km``; adding ``radius`` keeps "
        "only stations within that many km, nearest first."
    ),
)
@limiter.limit(DEFAULT_LIMIT)
async def list_stations(
    request: Request,
    status: Optional[str] = Query(None, description="available | occupied | maintenance | all"),
    connector_type: Optional[str] = Query(None, description="Type 1 | Type 2 | CCS | CHAdeMO | Tesla | all"),
    max_price: Optional[float] = Query(None, ge=0, allow_inf_nan=False),
    min_power: Optional[int] = Query(None, ge=0),
    lat: Optional[float] = Query(None, ge=-90, le=90, allow_inf_nan=False),
    lng: Optional[float] = Query(None, ge=-180, le=180, allow_inf_nan=False),
    radius: Optional[float] = Query(None, ge=0, allow_inf_nan=False, description="km"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    user: TokenPayload = Depends(get_current_user),
):
    query = StationQuery(
        status=_parse_choice(status, StationStatus, "status"),
        connector_type=_parse_choice(connector_type, ConnectorType, "connector_type"),
        max_price=max_price,
        min_power=min_power,
    )

    reference: Optional[Coordinate] = None
    if lat is not None or lng is not None:
        if lat is None or lng is None:
            raise HTTPException(
                status_code=400,
                detail="lat and lng must be supplied together",
            )
        reference = Coordinate(lat, lng)

    # radius only means something around a reference point
    if reference is None:
        radius = None
    if radius is not None:
        radius = validate_radius(radius)
        if settings.bounding_box_prefilter:
            query.box = bounding_box(reference, radius)

    stations = await StationRepository(db).list_stations(query)
    if reference is None:
        return [_to_response(s) for s in stations]

    by_id = {s.id: s for s in stations}
    points = [
        StationPoint(id=s.id, coordinate=Coordinate(s.latitude, s.longitude))
        for s in stations
    ]
    return [
        _to_response(by_id[r.station_id], r.distance_km)
        for r in search(reference, points, radius)
    ]


@router.post(
    "",
    status_code=201,
    response_model=StationMutationResponse,
    summary="Create a charging station",
)
@limiter.limit(DEFAULT_LIMIT)
async def create_station(
    request: Request,
    body: StationCreateRequest,
    db: AsyncSession = Depends(get_db),
    user: TokenPayload = Depends(get_current_user),
):
    station = await StationRepository(db).create_station(
        created_by=user.user_id, **body.model_dump()
    )
    logger.info("User %s created station id=%s", user.user_id, station.id)
    return StationMutationResponse(
        message="Charging station created successfully",
        station=_to_response(station),
    )


@router.get(
    "/{station_id}",
    response_model=StationResponse,
    summary="Get a charging station",
)
@limiter.limit(DEFAULT_LIMIT)
async def get_station(
    request: Request,
    station_id: int,
    db: AsyncSession = Depends(get_db),
    user: TokenPayload = Depends(get_current_user),
):
    station = await StationRepository(db).get_by_id(station_id)
    if not station:
        raise HTTPException(status_code=404, detail="Charging station not found")
    return _to_response(station)


@router.put(
    "/{station_id}",
    response_model=StationMutationResponse,
    summary="Update a charging station",
    description="Only the fields present in the body are changed.",
)
@limiter.limit(DEFAULT_LIMIT)
async def update_station(
    request: Request,
    station_id: int,
    body: StationUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: TokenPayload = Depends(get_current_user),
):
    changes = body.model_dump(exclude_unset=True)
    cleared = [f for f in _NON_NULLABLE if f in changes and changes[f] is None]
    if cleared:
        raise HTTPException(
            status_code=400, detail=f"Cannot clear required field(s): {', '.join(cleared)}"
        )

    repo = StationRepository(db)
    station = await repo.get_by_id(station_id)
    if not station:
        raise HTTPException(status_code=404, detail="Charging station not found")

    station = await repo.update_station(station, changes)
    logger.info(
        "User %s updated station id=%s fields=%s",
        user.user_id, station_id, sorted(changes),
    )
    return StationMutationResponse(
        message="Charging station updated successfully",
        station=_to_response(station),
    )


@router.delete(
    "/{station_id}",
    response_model=MessageResponse,
    summary="Delete a charging station",
)
@limiter.limit(DEFAULT_LIMIT)
async def delete_station(
    request: Request,
    station_id: int,
    db: AsyncSession = Depends(get_db),
    user: TokenPayload = Depends(get_current_user),
):
    repo = StationRepository(db)
    station = await repo.get_by_id(station_id)
    if not station:
        raise HTTPException(status_code=404, detail="Charging station not found")

    await repo.delete(station)
    logger.info("User %s deleted station id=%s", user.user_id, station_id)
    return MessageResponse(message="Charging station deleted successfully")
