"""
Pytest configuration for TankAlert tests.

DATABASE_URL must point at SQLite before any tankalert module is imported,
since the engine is created from settings at import time.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tankalert.database import Base, get_db
import tankalert.models  # noqa: F401
from tankalert.schemas.analytics import ReadingPoint, TankCalibration, TankSnapshot


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Fresh in-memory database per test"""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """FastAPI test client bound to the test session (lifespan and scheduler not started)"""
    from fastapi.testclient import TestClient

    from tankalert.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_of():
    return datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def make_snapshot(as_of):
    """Build a snapshot from (days_before_as_of, value) pairs"""

    def _make(points=(), safe_level=100000.0, min_level=0.0, tank_id=1, location="Depot A"):
        readings = tuple(
            ReadingPoint(timestamp=as_of - timedelta(days=days_ago), value=value, recorded_by="dipper")
            for days_ago, value in points
        )
        calibration = TankCalibration(
            tank_id=tank_id,
            location=location,
            product_type="Diesel",
            safe_level=safe_level,
            min_level=min_level,
        )
        return TankSnapshot(calibration=calibration, readings=readings)

    return _make
