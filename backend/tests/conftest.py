import os

# 앱 import 전에 테스트용 설정을 고정한다.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_taskboard.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("NOTIFICATION_RETRY_BACKOFF_SECONDS", "0")
os.environ.setdefault("MAIL_API_URL", "")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from taskboard.database import Base, get_db
from taskboard.main import app

TEST_DB_URL = "sqlite:///./test_taskboard.db"
DEFAULT_PASSWORD = "password123"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


def register_user(client, name: str, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    resp = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "password_confirmation": password},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["token"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    data = register_user(client, "Alice", "alice@example.com")
    return {"user": data["user"], "token": data["token"], "headers": auth_headers(data["token"])}


@pytest.fixture
def bob(client):
    data = register_user(client, "Bob", "bob@example.com")
    return {"user": data["user"], "token": data["token"], "headers": auth_headers(data["token"])}


def create_project(client, headers: dict, **overrides) -> dict:
    payload = {"name": "Website relaunch"}
    payload.update(overrides)
    resp = client.post("/api/projects", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def create_task(client, headers: dict, project_id: int, **overrides) -> dict:
    payload = {"title": "Write copy", "project_id": project_id}
    payload.update(overrides)
    resp = client.post("/api/tasks", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
