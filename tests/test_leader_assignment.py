# tests/test_leader_assignment.py

from sqlalchemy.orm import Session

from roombot.models import Room, User, UserRole
from roombot.services import rooms
from roombot.services.results import ErrorKind

from .factories import CREATOR_ID, make_user


def test_assign_leader_creates_room_and_promotes(db: Session):
    leader = make_user(db, 10, game_id="777")

    result = rooms.assign_room_leader(db, leader.telegram_id, "777")
    assert result.ok
    assert result.value.game_id == "777"
    assert result.value.leader_id == 10

    db.expire_all()
    assert db.get(User, 10).role == UserRole.ROOM_LEADER.value


def test_reassign_leader_updates_existing_room(db: Session):
    make_user(db, 10, game_id="777")
    make_user(db, 11, game_id="888")
    first = rooms.assign_room_leader(db, 10, "777").value

    result = rooms.assign_room_leader(db, 11, "777")
    assert result.ok
    assert result.value.id == first.id
    assert result.value.leader_id == 11

    # game id の一意性は upsert 後も保たれる
    assert db.query(Room).filter(Room.game_id == "777").count() == 1


def test_previous_leader_without_rooms_is_demoted(db: Session):
    make_user(db, 10)
    make_user(db, 11)
    rooms.assign_room_leader(db, 10, "777")

    rooms.assign_room_leader(db, 11, "777")

    db.expire_all()
    assert db.get(User, 10).role == UserRole.USER.value
    assert db.get(User, 11).role == UserRole.ROOM_LEADER.value


def test_previous_leader_with_other_room_keeps_role(db: Session):
    make_user(db, 10)
    make_user(db, 11)
    rooms.assign_room_leader(db, 10, "777")
    rooms.assign_room_leader(db, 10, "999")

    rooms.assign_room_leader(db, 11, "777")

    db.expire_all()
    assert db.get(User, 10).role == UserRole.ROOM_LEADER.value


def test_assign_same_leader_twice_is_idempotent(db: Session):
    make_user(db, 10)
    first = rooms.assign_room_leader(db, 10, "777").value
    second = rooms.assign_room_leader(db, 10, "777").value

    assert first.id == second.id
    assert db.query(Room).count() == 1
    db.expire_all()
    assert db.get(User, 10).role == UserRole.ROOM_LEADER.value


def test_creator_keeps_creator_role_when_leading(db: Session):
    make_user(db, CREATOR_ID, role=UserRole.CREATOR)

    assert rooms.assign_room_leader(db, CREATOR_ID, "1").ok
    db.expire_all()
    assert db.get(User, CREATOR_ID).role == UserRole.CREATOR.value


def test_assign_leader_validation(db: Session):
    make_user(db, 10)

    bad = rooms.assign_room_leader(db, 10, "room-1")
    assert bad.error == ErrorKind.VALIDATION
    assert bad.reason == "invalid_game_id"

    missing = rooms.assign_room_leader(db, 404, "777")
    assert missing.error == ErrorKind.NOT_FOUND
    assert missing.reason == "user_not_found"

    assert db.query(Room).count() == 0
