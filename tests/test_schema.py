"""
Checks that the Alembic revision and the ORM models describe the same
``charging_stations`` table.  The migration runs against a mocked ``op``
so no PostgreSQL server is needed.
"""

import importlib.util
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import sqlalchemy as sa

from src.infrastructure.models import StationModel, UserModel

MIGRATION = (
    Path(__file__).resolve().parent.parent
    / "migrations" / "versions" / "001_initial_schema.py"
)


@pytest.fixture
def created_tables() -> dict[str, dict[str, sa.Column]]:
    spec = importlib.util.spec_from_file_location("initial_schema", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    module.op = MagicMock()
    module.upgrade()

    tables = {}
    for call in module.op.create_table.call_args_list:
        name, *items = call.args
        tables[name] = {c.name: c for c in items if isinstance(c, sa.Column)}
    return tables


def test_migration_creates_model_columns(created_tables):
    assert set(created_tables["users"]) == set(UserModel.__table__.c.keys())
    assert set(created_tables["charging_stations"]) == set(
        StationModel.__table__.c.keys()
    )


def test_status_defaults_to_available_in_the_database(created_tables):
    status = created_tables["charging_stations"]["status"]
    assert status.server_default is not None
    assert status.server_default.arg == "available"
    assert StationModel.__table__.c.status.server_default.arg == "available"
