import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set testing environment before the app reads its settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from carebook.main import app
from carebook.core.database import get_db, get_redis, Base
from carebook.services.auth_service import AuthService
from tests.utils import auth_headers, register, book

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_EMAIL = "admin@carebook.test"
ADMIN_PASSWORD = "AdminPassword123"


class FakeRedis:
    """In-memory stand-in for the handful of Redis commands the app uses."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, seconds, value):
        self.data[key] = str(value)
        return True

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])


fake_redis = FakeRedis()


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_redis] = lambda: fake_redis


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    fake_redis.data.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def admin(client, db_session):
    user = AuthService(db_session).ensure_admin("admin", ADMIN_EMAIL, ADMIN_PASSWORD)
    response = client.post(
        "/api/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    return {"token": response.json()["token"], "user": {"id": user.id}}


@pytest.fixture
def customer(client):
    return register(client, "alice", "alice@example.com")


@pytest.fixture
def doctor(client):
    return register(client, "drhouse", "house@org.doctor")


@pytest.fixture
def approved_doctor(client, admin, doctor):
    response = client.put(
        f"/api/admin/doctors/{doctor['user']['id']}/approve",
        headers=auth_headers(admin["token"])
    )
    assert response.status_code == 200, response.text
    return doctor


@pytest.fixture
def appointment(client, customer, approved_doctor):
    response = book(client, customer, approved_doctor, notes="Recurring headache")
    assert response.status_code == 201, response.text
    return response.json()["appointment"]


@pytest.fixture
def session_factory(test_db):
    return TestingSessionLocal
