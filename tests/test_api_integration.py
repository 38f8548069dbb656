"""Integration tests exercising API endpoints via FastAPI's TestClient."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import func, inspect, select

from huddle.models import User

TABLES = {
    "users",
    "servers",
    "channels",
    "messages",
    "user_reactions",
    "reaction_types",
    "bot_endpoints",
    "server_bot_endpoints",
    "user_servers",
}


def user_count(database) -> int:
    with database.session() as session:
        return session.execute(select(func.count()).select_from(User)).scalar_one()


def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"message": "success"}


def test_startup_provisions_schema(client: TestClient, database):
    assert set(inspect(database.engine).get_table_names()) == TABLES
    assert user_count(database) == 0


def test_add_user_end_to_end(client: TestClient, database):
    """Valid payloads are stored; malformed ones are rejected without writing."""

    response = client.post(
        "/AddUser",
        json={"name": "alice", "active": True, "iconImage": "http://x/icon.png"},
    )
    assert response.status_code == 200, response.text
    assert response.json() == {"message": "success"}

    with database.session() as session:
        users = session.execute(select(User)).scalars().all()
        assert [(user.name, user.active) for user in users] == [("alice", True)]

    response = client.post("/AddUser", json={"name": 123})
    assert response.status_code == 400
    assert response.json()["error"]
    assert user_count(database) == 1


def test_add_user_rejects_invalid_json(client: TestClient, database):
    response = client.post(
        "/AddUser",
        content=b"{oops",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()
    assert user_count(database) == 0


def test_add_user_reports_store_failures(client: TestClient, database):
    User.__table__.drop(database.engine)

    response = client.post("/AddUser", json={"name": "alice", "active": True, "iconImage": ""})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to store user"}


def test_add_user_only_accepts_post(client: TestClient):
    response = client.get("/AddUser")
    assert response.status_code == 405


def test_add_user_accepts_long_names_and_icons(client: TestClient, database):
    response = client.post(
        "/AddUser",
        json={"name": "n" * 300, "active": True, "iconImage": "data:image/png;base64," + "A" * 2000},
    )

    assert response.status_code == 200, response.text
    assert user_count(database) == 1


def test_health_check_ignores_store_state(client: TestClient, database):
    User.__table__.drop(database.engine)

    response = client.get("/health")

    assert response.json() == {"message": "success"}
