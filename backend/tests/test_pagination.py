import pytest

from taskboard.config import settings
from taskboard.utils.pagination import clamp_per_page
from tests.conftest import create_project


@pytest.fixture
def many_projects(client, alice):
    for i in range(25):
        create_project(client, alice["headers"], name=f"Project {i + 1}")
    return alice


def test_default_page(client, many_projects):
    page = client.get("/api/projects", headers=many_projects["headers"]).json()["data"]
    assert page["total"] == 25
    assert page["per_page"] == 10
    assert page["current_page"] == 1
    assert page["last_page"] == 3
    assert len(page["data"]) == 10
    assert page["from"] == 1
    assert page["to"] == 10


def test_last_page(client, many_projects):
    page = client.get("/api/projects?page=3", headers=many_projects["headers"]).json()["data"]
    assert len(page["data"]) == 5
    assert page["from"] == 21
    assert page["to"] == 25
    assert page["data"][-1]["name"] == "Project 25"


def test_page_past_the_end_is_empty(client, many_projects):
    page = client.get("/api/projects?page=9", headers=many_projects["headers"]).json()["data"]
    assert page["data"] == []
    assert page["from"] is None
    assert page["to"] is None
    assert page["total"] == 25


def test_per_page_is_clamped(client, many_projects):
    page = client.get("/api/projects?per_page=500", headers=many_projects["headers"]).json()["data"]
    assert page["per_page"] == settings.MAX_PER_PAGE
    assert len(page["data"]) == 25
    assert page["last_page"] == 1


def test_invalid_page_params(client, alice):
    assert client.get("/api/projects?page=0", headers=alice["headers"]).status_code == 422
    assert client.get("/api/projects?per_page=0", headers=alice["headers"]).status_code == 422


def test_empty_listing(client, alice):
    page = client.get("/api/tasks", headers=alice["headers"]).json()["data"]
    assert page["total"] == 0
    assert page["last_page"] == 1
    assert page["data"] == []


def test_clamp_per_page():
    assert clamp_per_page(None) == settings.DEFAULT_PER_PAGE
    assert clamp_per_page(0) == settings.DEFAULT_PER_PAGE
    assert clamp_per_page(25) == 25
    assert clamp_per_page(10_000) == settings.MAX_PER_PAGE


def test_page_beyond_database_range_is_empty(client, alice):
    create_project(client, alice["headers"])
    resp = client.get(f"/api/projects?page={10 ** 20}", headers=alice["headers"])
    assert resp.status_code == 200
    page = resp.json()["data"]
    assert page["data"] == []
    assert page["total"] == 1
    assert page["from"] is None
