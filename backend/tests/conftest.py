import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from ingred import main
from ingred.api import recipes as recipes_api
from ingred.schemas.household import FamilyMemberProfile, HouseholdProfile
from ingred.storage import db as db_module


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(monkeypatch, engine):
    def _get_session_override():
        return Session(engine)

    monkeypatch.setattr(db_module, "engine", engine)
    monkeypatch.setattr(db_module, "get_session", _get_session_override)
    monkeypatch.setattr(recipes_api, "get_session", _get_session_override)

    client = TestClient(main.app)
    return client


@pytest.fixture
def mixed_household() -> HouseholdProfile:
    """Peanut-allergic vegetarian child plus a non-vegetarian adult with no allergies."""
    return HouseholdProfile(
        household_size=2,
        family_members=[
            FamilyMemberProfile(
                id="m1",
                name="Maya",
                age_group="child",
                dietary_restrictions=["Vegetarian"],
                allergies=[{"allergen": "peanuts", "severity": "life_threatening"}],
            ),
            FamilyMemberProfile(id="m2", name="Sam", age_group="adult"),
        ],
    )
