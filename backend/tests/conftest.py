import pytest
from fastapi.testclient import TestClient

from app.config import DEFAULT_MARKET
from app.main import create_app
from app.schemas.strategy import MarketParameters


@pytest.fixture()
def client():
    app = create_app(log_level="WARNING")
    return TestClient(app)


@pytest.fixture()
def market():
    return MarketParameters(**DEFAULT_MARKET)
