"""
Shared test fixtures
SQLite test database, API client and user factories
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables BEFORE importing the application
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from timesheet_app.main import app
from timesheet_app.config.database import Base, get_db
from timesheet_app.models.user import User, UserRole
from timesheet_app.utils.security import get_password_hash

# Test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpass123"


def override_get_db():
    """Override database dependency for testing"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def test_db():
    """Create test database"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    """Session bound to the test database"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(test_db):
    return TestClient(app)


@pytest.fixture
def make_user(db_session):
    """Factory creating active users with a known password"""
    def _make_user(email: str, role: UserRole = UserRole.EMPLOYEE, name: str = None) -> User:
        user = User(
            name=name or email.split("@")[0].title(),
            email=email,
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            department="Engineering",
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def staff(make_user):
    """One user per role"""
    return {
        "employee": make_user("employee@example.com", UserRole.EMPLOYEE),
        "manager": make_user("manager@example.com", UserRole.MANAGER),
        "hr": make_user("hr@example.com", UserRole.HR),
        "director": make_user("director@example.com", UserRole.DIRECTOR),
        "admin": make_user("admin@example.com", UserRole.ADMIN),
    }


@pytest.fixture
def login(client):
    """Return Authorization headers for a user email"""
    def _login(email: str) -> dict:
        response = client.post("/api/auth/login", json={"email": email, "password": TEST_PASSWORD})
        assert response.status_code == 200, f"Login failed: {response.json()}"
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login
