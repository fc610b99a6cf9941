"""
Shared pytest fixtures.

- Historical inputs (the documented 2022–2024 defaults) raw and derived
- An annual projection on those defaults
- A FastAPI TestClient backed by an in-memory SQLite database
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fincast.core.database import Base, get_db
from fincast.main import app
from fincast.models import financial_data, investment_model, valuation_parameters  # noqa: F401
from fincast.services.modeling.historical import default_historical_statements, derive_historical
from fincast.services.modeling.three_statement import run_three_statement
from fincast.services.modeling.types import DebtParameters, ProjectionParameters
from fincast.services.state.store import ObservableStore


@pytest.fixture
def raw_historical():
    return default_historical_statements()


@pytest.fixture
def derived_historical(raw_historical):
    return derive_historical(raw_historical)


@pytest.fixture
def default_projection(derived_historical):
    return run_three_statement(derived_historical, ProjectionParameters(), forecast_periods=5)


@pytest.fixture
def debt_store():
    """Isolated debt store so tests do not leak into the process-wide one."""
    return ObservableStore(DebtParameters())


@pytest.fixture
def api_client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    try:
        yield client
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)
