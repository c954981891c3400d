from scripts.init_db import init_db
from scripts.seed_data import DEMO_PASSWORD, seed
from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.models.user import User
from tests.conftest import engine, login


def test_seed_is_idempotent(db):
    assert seed(db) is True
    assert seed(db) is False
    assert db.query(User).count() == 3
    assert db.query(Project).count() == 3
    assert db.query(Task).count() == 4


def test_seeded_user_can_log_in(client, db):
    seed(db)
    token = login(client, "manager@example.com", DEMO_PASSWORD)
    page = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"}).json()["data"]
    assert page["total"] == 1
    assert page["data"][0]["name"] == "Website relaunch"


def test_init_db_reset_recreates_tables(db):
    seed(db)
    db.close()
    tables = init_db(bind=engine, reset=True)
    assert {"users", "projects", "tasks", "auth_tokens", "password_reset_tokens"} <= set(tables)
    assert db.query(User).count() == 0
