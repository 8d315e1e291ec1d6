"""
SQLAlchemy ORM models  (maps to PostgreSQL + PostGIS).

Tables
------
* ``users``              -- registered accounts (bcrypt password hash)
* ``charging_stations``  -- station records created by users

Indexes
-------
* **GIST** on ``charging_stations.location`` for spatial queries.
* **B-Tree** on ``(latitude, longitude)`` for the bounding-box pre-filter,
  and on ``status``, ``connector_type``, ``price_per_kwh``, ``created_by``
  for the listing filters.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import relationship
from geoalchemy2 import Geometry

from .database import Base
from src.domain.enums import ConnectorType, StationStatus


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class StationModel(Base):
    __tablename__ = "charging_stations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)

    # Plain floats are the source of truth for reads and the bounding box
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    # Mirrored as PostGIS geometry for spatial indexing
    location = Column(
        Geometry("POINT", srid=4326, spatial_index=False), nullable=True
    )

    address = Column(String(500), nullable=True)
    connector_type = Column(
        Enum(ConnectorType, name="connectortype", values_callable=_enum_values),
        nullable=True,
    )
    power_output = Column(Integer, nullable=True)
    status = Column(
        Enum(StationStatus, name="stationstatus", values_callable=_enum_values),
        default=StationStatus.AVAILABLE.value,
        server_default=StationStatus.AVAILABLE.value,
        nullable=False,
    )
    price_per_kwh = Column(Float, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    creator = relationship(UserModel, lazy="joined")

    __table_args__ = (
        Index("idx_stations_location", "location", postgresql_using="gist"),
        Index("idx_stations_lat_lng", "latitude", "longitude"),
        Index("idx_stations_status", "status"),
        Index("idx_stations_connector", "connector_type"),
        Index("idx_stations_price", "price_per_kwh"),
        Index("idx_stations_created_by", "created_by"),
    )
