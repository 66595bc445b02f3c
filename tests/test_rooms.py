# tests/test_rooms.py
# Room Assignment Engine：部屋の選択と参加申請

from sqlalchemy.orm import Session

from roombot.models import JoinRequest, RequestStatus, ROOM_CAPACITY
from roombot.services import rooms
from roombot.services.results import ErrorKind

from .factories import fill_room, make_request, make_room, make_user


def _leader_and_room(db: Session, leader_id: int = 10):
    leader = make_user(db, leader_id)
    return leader, make_room(db, leader)


# -----------------------------
# 空き部屋一覧
# -----------------------------

def test_list_available_rooms_newest_first(db: Session):
    _, room_a = _leader_and_room(db, 10)
    _, room_b = _leader_and_room(db, 11)
    _, room_c = _leader_and_room(db, 12)

    listed = rooms.list_available_rooms(db)
    assert [r.id for r, _ in listed] == [room_c.id, room_b.id, room_a.id]
    assert all(count == 0 for _, count in listed)


def test_list_available_rooms_excludes_full_rooms(db: Session):
    _, full = _leader_and_room(db, 10)
    _, almost = _leader_and_room(db, 11)
    fill_room(db, full, ROOM_CAPACITY, first_id=50000)
    fill_room(db, almost, ROOM_CAPACITY - 1, first_id=60000)

    listed = rooms.list_available_rooms(db)
    assert [(r.id, count) for r, count in listed] == [(almost.id, ROOM_CAPACITY - 1)]


def test_list_available_rooms_counts_only_approved(db: Session):
    _, room = _leader_and_room(db)
    make_request(db, make_user(db, 20), room, RequestStatus.APPROVED)
    make_request(db, make_user(db, 21), room, RequestStatus.PENDING)
    make_request(db, make_user(db, 22), room, RequestStatus.REJECTED)

    [(listed_room, count)] = rooms.list_available_rooms(db)
    assert listed_room.id == room.id
    assert count == 1


# -----------------------------
# 部屋の割り当て
# -----------------------------

def test_assign_target_room_forces_newest_room_for_new_user(db: Session):
    _leader_and_room(db, 10)
    _, newest = _leader_and_room(db, 11)
    user = make_user(db, 20, is_in_chat=False)

    result = rooms.assign_target_room(db, user)
    assert result.ok
    assert result.value.mode == rooms.MODE_FORCED
    assert [r.id for r, _ in result.value.rooms] == [newest.id]


def test_assign_target_room_lets_chat_member_pick(db: Session):
    _leader_and_room(db, 10)
    _leader_and_room(db, 11)
    user = make_user(db, 20, is_in_chat=True)

    result = rooms.assign_target_room(db, user)
    assert result.value.mode == rooms.MODE_PICK
    assert len(result.value.rooms) == 2


def test_assign_target_room_without_rooms(db: Session):
    user = make_user(db, 20)

    result = rooms.assign_target_room(db, user)
    assert not result.ok
    assert result.error == ErrorKind.NOT_FOUND
    assert result.reason == "no_rooms"


# -----------------------------
# 参加申請
# -----------------------------

def test_submit_join_request_creates_pending_with_room_and_leader(db: Session):
    leader, room = _leader_and_room(db)
    user = make_user(db, 20)

    result = rooms.submit_join_request(db, user.telegram_id, room.id)
    assert result.ok

    req = result.value
    assert req.status == RequestStatus.PENDING.value
    assert req.approved_at is None
    assert req.room.game_id == room.game_id
    assert req.room.leader.telegram_id == leader.telegram_id
    assert req.user.telegram_id == user.telegram_id


def test_duplicate_pending_request_is_rejected(db: Session):
    _, room = _leader_and_room(db)
    user = make_user(db, 20)

    first = rooms.submit_join_request(db, user.telegram_id, room.id)
    second = rooms.submit_join_request(db, user.telegram_id, room.id)

    assert first.ok
    assert not second.ok
    assert second.error == ErrorKind.CONFLICT
    assert second.reason == "duplicate_request"

    pending = (
        db.query(JoinRequest)
        .filter(
            JoinRequest.user_id == user.telegram_id,
            JoinRequest.room_id == room.id,
            JoinRequest.status == RequestStatus.PENDING.value,
        )
        .count()
    )
    assert pending == 1


def test_duplicate_check_ignores_single_active_flag(db: Session):
    _, room = _leader_and_room(db)
    user = make_user(db, 20)
    rooms.submit_join_request(db, user.telegram_id, room.id, single_active=False)

    result = rooms.submit_join_request(db, user.telegram_id, room.id, single_active=False)
    assert result.reason == "duplicate_request"


def test_active_request_in_other_room_blocks_submission(db: Session):
    _, room_a = _leader_and_room(db, 10)
    _, room_b = _leader_and_room(db, 11)
    user = make_user(db, 20)
    make_request(db, user, room_a, RequestStatus.APPROVED)

    result = rooms.submit_join_request(db, user.telegram_id, room_b.id)
    assert result.error == ErrorKind.CONFLICT
    assert result.reason == "active_request_exists"


def test_single_active_can_be_disabled(db: Session):
    _, room_a = _leader_and_room(db, 10)
    _, room_b = _leader_and_room(db, 11)
    user = make_user(db, 20)
    make_request(db, user, room_a, RequestStatus.PENDING)

    result = rooms.submit_join_request(db, user.telegram_id, room_b.id, single_active=False)
    assert result.ok


def test_rejected_request_allows_new_submission(db: Session):
    _, room = _leader_and_room(db)
    user = make_user(db, 20)
    old = make_request(db, user, room, RequestStatus.REJECTED)

    result = rooms.submit_join_request(db, user.telegram_id, room.id)
    assert result.ok
    assert result.value.id != old.id

    db.expire_all()
    assert db.get(JoinRequest, old.id).status == RequestStatus.REJECTED.value


def test_submit_requires_game_id(db: Session):
    _, room = _leader_and_room(db)
    user = make_user(db, 20, game_id="")

    result = rooms.submit_join_request(db, user.telegram_id, room.id)
    assert result.error == ErrorKind.VALIDATION
    assert result.reason == "game_id_missing"


def test_submit_unknown_user_or_room(db: Session):
    _, room = _leader_and_room(db)
    user = make_user(db, 20)

    assert rooms.submit_join_request(db, 999, room.id).reason == "user_not_found"
    assert rooms.submit_join_request(db, user.telegram_id, 999).reason == "room_not_found"
    assert db.query(JoinRequest).count() == 0
