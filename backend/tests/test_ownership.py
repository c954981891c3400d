import pytest

from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.utils import permissions
from tests.conftest import create_project, create_task


def test_projects_listing_is_scoped(client, alice, bob):
    create_project(client, alice["headers"], name="Alice 1")
    create_project(client, alice["headers"], name="Alice 2")
    create_project(client, bob["headers"], name="Bob 1")

    alice_page = client.get("/api/projects", headers=alice["headers"]).json()["data"]
    bob_page = client.get("/api/projects", headers=bob["headers"]).json()["data"]
    assert alice_page["total"] == 2
    assert {p["name"] for p in alice_page["data"]} == {"Alice 1", "Alice 2"}
    assert bob_page["total"] == 1


def test_foreign_project_is_forbidden(client, db, alice, bob):
    project = create_project(client, alice["headers"])
    url = f"/api/projects/{project['id']}"

    assert client.get(url, headers=bob["headers"]).status_code == 403
    resp = client.put(url, json={"name": "Hijacked"}, headers=bob["headers"])
    assert resp.status_code == 403
    assert resp.json()["success"] is False
    assert client.delete(url, headers=bob["headers"]).status_code == 403

    db.expire_all()
    assert db.query(Project).filter(Project.id == project["id"]).one().name == project["name"]


def test_foreign_task_is_forbidden(client, db, alice, bob):
    project = create_project(client, alice["headers"])
    task = create_task(client, alice["headers"], project["id"])
    url = f"/api/tasks/{task['id']}"

    assert client.get(url, headers=bob["headers"]).status_code == 403
    assert client.put(url, json={"status": "completed"}, headers=bob["headers"]).status_code == 403
    assert client.delete(url, headers=bob["headers"]).status_code == 403
    assert db.query(Task).one().status == "todo"


def test_tasks_listing_is_scoped(client, alice, bob):
    project = create_project(client, alice["headers"])
    create_task(client, alice["headers"], project["id"])

    # 남의 project_id 로 필터해도 오류 없이 빈 목록이다.
    resp = client.get(f"/api/tasks?project_id={project['id']}", headers=bob["headers"])
    assert resp.status_code == 200
    assert resp.json()["data"]["total"] == 0


def test_foreign_project_tasks_listing_is_forbidden(client, alice, bob):
    project = create_project(client, alice["headers"])
    resp = client.get(f"/api/projects/{project['id']}/tasks", headers=bob["headers"])
    assert resp.status_code == 403


def test_permissions_require_owner_column():
    class Unowned:
        pass

    with pytest.raises(TypeError):
        permissions.owner_column_of(Unowned)


def test_permissions_reject_unknown_action():
    project = Project(owner_id=1)
    with pytest.raises(ValueError):
        permissions.can("archive", project, type("U", (), {"id": 1})())


def test_permissions_owner_check():
    owner = type("U", (), {"id": 7})()
    stranger = type("U", (), {"id": 8})()
    task = Task(user_id=7)
    assert permissions.can(permissions.UPDATE, task, owner)
    assert not permissions.can(permissions.DELETE, task, stranger)
