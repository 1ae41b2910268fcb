import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.auth import AuthService
from app.core.database import Base, get_db
from app.db.models import Property as DBProperty
from app.main import app
import uuid

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine"""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return engine

@pytest.fixture(scope="function")
def test_db_session(test_engine):
    """Create a test database session"""
    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=test_engine)

@pytest.fixture(scope="function")
def override_get_db(test_db_session):
    """Override the get_db dependency for testing"""
    def _override_get_db():
        try:
            yield test_db_session
        finally:
            pass
    return _override_get_db

@pytest.fixture(scope="function")
def client(override_get_db):
    """API client bound to the test database"""
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def user_id():
    return f"user-{uuid.uuid4()}"

@pytest.fixture
def auth_headers(user_id):
    """Bearer header for user_id"""
    token = AuthService.create_access_token({"sub": user_id})
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def make_property(test_db_session):
    """Insert a listing row; later calls get newer created_at values"""
    base_time = datetime(2024, 1, 1, 12, 0, 0)
    counter = {"n": 0}

    def _make_property(**overrides):
        counter["n"] += 1
        values = {
            "title": f"Listing {counter['n']}",
            "property_type": "apartment",
            "status": "active",
            "price_amount": 15000,
            "currency": "HNL",
            "bedrooms": 2,
            "bathrooms": "1",
            "area_sqm": 80.0,
            "neighborhood": "Lomas del Guijarro",
            "address": "Calle Principal 123",
            "amenities": ["parking"],
            "pets_allowed": False,
            "landlord_id": "landlord-1",
            "landlord_whatsapp": "9999-8888",
            "created_at": base_time + timedelta(minutes=counter["n"]),
        }
        values.update(overrides)
        row = DBProperty(**values)
        test_db_session.add(row)
        test_db_session.commit()
        test_db_session.refresh(row)
        return row

    return _make_property
