"""Initial schema with PostGIS extension, users and charging stations.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Enable PostGIS extension
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), unique=True, nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── charging_stations ─────────────────────────────────────────────
    op.create_table(
        "charging_stations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column(
            "location",
            Geometry("POINT", srid=4326, spatial_index=False),
            nullable=True,
        ),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column(
            "connector_type",
            sa.Enum(
                "Type 1", "Type 2", "CCS", "CHAdeMO", "Tesla",
                name="connectortype",
            ),
            nullable=True,
        ),
        sa.Column("power_output", sa.Integer, nullable=True),
        sa.Column(
            "status",
            sa.Enum("available", "occupied", "maintenance", name="stationstatus"),
            server_default="available",
            nullable=False,
        ),
        sa.Column("price_per_kwh", sa.Float, nullable=True),
        sa.Column(
            "created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_stations_location",
        "charging_stations",
        ["location"],
        postgresql_using="gist",
    )
    op.create_index(
        "idx_stations_lat_lng", "charging_stations", ["latitude", "longitude"]
    )
    op.create_index("idx_stations_status", "charging_stations", ["status"])
    op.create_index(
        "idx_stations_connector", "charging_stations", ["connector_type"]
    )
    op.create_index("idx_stations_price", "charging_stations", ["price_per_kwh"])
    op.create_index("idx_stations_created_by", "charging_stations", ["created_by"])


def downgrade() -> None:
    op.drop_table("charging_stations")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS stationstatus")
    op.execute("DROP TYPE IF EXISTS connectortype")
