"""Pytest fixtures for testing"""

import os

# Point the app at SQLite before collection_forecast.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, timedelta
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from collection_forecast.api.main import create_app
from collection_forecast.infrastructure.database.models import Base
from collection_forecast.infrastructure.database.session import get_db
from collection_forecast.domain.models import PaymentRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def as_of() -> date:
    """Fixed forecast date so window arithmetic is deterministic"""
    return date(2024, 6, 15)


@pytest.fixture
def improving_history(as_of: date) -> List[PaymentRecord]:
    """
    Five days of collections trending up.

    Expected 1000/day, paid 800, 820, 850, 860, 900 -> rates 80..90%.
    """
    paid = [800, 820, 850, 860, 900]
    start = as_of - timedelta(days=5)
    return [
        PaymentRecord(
            date=start + timedelta(days=i),
            expected_amount=1000,
            paid_amount=amount,
            was_paid=True,
        )
        for i, amount in enumerate(paid)
    ]
