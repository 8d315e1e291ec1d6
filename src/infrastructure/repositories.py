"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  The mapped class is a class attribute so a
subclass can point the same queries at a different model.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

from geoalchemy2.functions import ST_MakePoint, ST_SetSRID
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import StationModel, UserModel
from src.domain.entities import BoundingBox
from src.domain.enums import ConnectorType, StationStatus


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, enum.Enum) else value


@dataclass
class StationQuery:
    """Non-geospatial listing filters plus an optional bounding box."""

    status: Optional[StationStatus] = None
    connector_type: Optional[ConnectorType] = None
    max_price: Optional[float] = None
    min_power: Optional[int] = None
    box: Optional[BoundingBox] = None


class UserRepository:
    model = UserModel

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(
        self, *, username: str, email: str, password_hash: str
    ) -> UserModel:
        user = self.model(
            username=username, email=email, password_hash=password_hash
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(self.model, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(self.model).where(self.model.email == email)
        )
        return result.scalar_one_or_none()

    async def find_conflicts(self, email: str, username: str) -> list[UserModel]:
        """Users already holding *email* or *username*."""
        result = await self.session.execute(
            select(self.model).where(
                or_(self.model.email == email, self.model.username == username)
            )
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar() or 0


class StationRepository:
    model = StationModel

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _make_point(latitude: float, longitude: float):
        """PostGIS POINT (x = longitude, y = latitude) in WGS 84."""
        return ST_SetSRID(ST_MakePoint(longitude, latitude), 4326)

    async def create_station(self, *, created_by: int, **fields: Any) -> StationModel:
        values = {k: _column_value(v) for k, v in fields.items()}
        station = self.model(
            created_by=created_by,
            location=self._make_point(values["latitude"], values["longitude"]),
            **values,
        )
        self.session.add(station)
        await self.session.flush()
        return await self._reload(station.id)

    async def get_by_id(self, station_id: int) -> Optional[StationModel]:
        return await self.session.get(self.model, station_id)

    async def list_stations(self, query: StationQuery) -> list[StationModel]:
        stmt = select(self.model)
        if query.status is not None:
            stmt = stmt.where(self.model.status == _column_value(query.status))
        if query.connector_type is not None:
            stmt = stmt.where(
                self.model.connector_type == _column_value(query.connector_type)
            )
        if query.max_price is not None:
            stmt = stmt.where(self.model.price_per_kwh <= query.max_price)
        if query.min_power is not None:
            stmt = stmt.where(self.model.power_output >= query.min_power)
        if query.box is not None:
            stmt = stmt.where(
                self.model.latitude.between(query.box.min_lat, query.box.max_lat)
            )
            if query.box.bounds_longitude:
                stmt = stmt.where(
                    self.model.longitude.between(
                        query.box.min_lng, query.box.max_lng
                    )
                )
        stmt = stmt.order_by(self.model.created_at.desc(), self.model.id.desc())
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())

    async def update_station(
        self, station: StationModel, changes: dict[str, Any]
    ) -> StationModel:
        for key, value in changes.items():
            setattr(station, key, _column_value(value))
        if "latitude" in changes or "longitude" in changes:
            station.location = self._make_point(station.latitude, station.longitude)
        await self.session.flush()
        return await self._reload(station.id)

    async def delete(self, station: StationModel) -> None:
        await self.session.delete(station)
        await self.session.flush()

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar() or 0

    async def _reload(self, station_id: int) -> StationModel:
        """Re-read after a flush so server defaults and ``creator`` are loaded."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.id == station_id)
            .execution_options(populate_existing=True)
        )
        return result.unique().scalar_one()
