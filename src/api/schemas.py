"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from src.domain.enums import ConnectorType, StationStatus


# ── Requests ──────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    username: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)
    ]
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()


class StationCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    address: Optional[str] = Field(None, max_length=500)
    connector_type: Optional[ConnectorType] = None
    power_output: Optional[int] = Field(None, ge=1, le=1000, description="kW")
    status: StationStatus = StationStatus.AVAILABLE
    price_per_kwh: Optional[float] = Field(None, ge=0, le=10, allow_inf_nan=False)

    model_config = {"str_strip_whitespace": True}


class StationUpdateRequest(BaseModel):
    """Partial update: only fields present in the body are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90, allow_inf_nan=False)
    longitude: Optional[float] = Field(None, ge=-180, le=180, allow_inf_nan=False)
    address: Optional[str] = Field(None, max_length=500)
    connector_type: Optional[ConnectorType] = None
    power_output: Optional[int] = Field(None, ge=1, le=1000)
    status: Optional[StationStatus] = None
    price_per_kwh: Optional[float] = Field(None, ge=0, le=10, allow_inf_nan=False)

    model_config = {"str_strip_whitespace": True}


# ── Responses ─────────────────────────────────────────────────────────


class UserResponse(BaseModel):
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class StationResponse(BaseModel):
    id: int
    name: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    connector_type: Optional[ConnectorType] = None
    power_output: Optional[int] = None
    status: StationStatus
    price_per_kwh: Optional[float] = None
    created_by: int
    created_by_username: Optional[str] = None
    created_by_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    distance_km: Optional[float] = Field(
        None, description="Great-circle distance from the reference point."
    )


class StationMutationResponse(BaseModel):
    message: str
    station: StationResponse


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    database: str = "connected"
    timestamp: datetime


class InitDbResponse(BaseModel):
    message: str
    tables: list[str]
    timestamp: datetime


class DatabaseStatusResponse(BaseModel):
    tables: list[str]
    counts: dict[str, int]
    timestamp: datetime


class ErrorResponse(BaseModel):
    detail: str
