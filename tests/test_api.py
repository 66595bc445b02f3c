# tests/test_api.py

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from roombot.models import RequestStatus

from .factories import make_request, make_room, make_user


def test_health(client: TestClient):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"message": "roombot is running"}


def test_list_rooms_returns_available_rooms(client: TestClient, db: Session):
    room_a = make_room(db, make_user(db, 10, game_id="111"))
    room_b = make_room(db, make_user(db, 11, game_id="222"))
    make_request(db, make_user(db, 20), room_a, RequestStatus.APPROVED)

    res = client.get("/api/rooms")
    assert res.status_code == 200

    rooms = res.json()
    assert [r["id"] for r in rooms] == [room_b.id, room_a.id]
    by_name = {r["game_id"]: r for r in rooms}
    assert by_name["111"]["approved_count"] == 1
    assert by_name["111"]["leader_id"] == 10
    assert by_name["222"]["capacity"] == 60


def test_get_room(client: TestClient, db: Session):
    room = make_room(db, make_user(db, 10, game_id="111"))

    res = client.get(f"/api/rooms/{room.id}")
    assert res.status_code == 200
    assert res.json()["game_id"] == "111"


def test_get_nonexistent_room_returns_404(client: TestClient):
    res = client.get("/api/rooms/9999")
    assert res.status_code == 404


def test_user_profiles_are_not_exposed(client: TestClient, db: Session):
    make_user(db, 42, game_id="123")

    res = client.get("/api/users/42")
    assert res.status_code == 404
    assert "123" not in res.text


def test_stats_are_not_exposed(client: TestClient, db: Session):
    make_room(db, make_user(db, 10))

    res = client.get("/api/stats")
    assert res.status_code == 404
    assert "users" not in res.text
