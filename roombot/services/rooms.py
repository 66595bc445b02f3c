# roombot/services/rooms.py
"""Room Assignment Engine と Room Registry（リーダー割り当て）"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.join_request import JoinRequest, RequestStatus
from ..models.room import Room, ROOM_CAPACITY
from ..models.user import User, UserRole
from . import ledger
from .results import ErrorKind, Result, STORE_FAILURE
from .users import is_valid_game_id

logger = logging.getLogger(__name__)

# 部屋選択モード
MODE_PICK = "pick"      # チャット参加済み：空き部屋から本人が選ぶ
MODE_FORCED = "forced"  # 未参加：1部屋だけ提示して承認→招待の流れに乗せる


@dataclass
class RoomChoice:
    mode: str
    rooms: List[Tuple[Room, int]] = field(default_factory=list)


def list_available_rooms(db: Session) -> List[Tuple[Room, int]]:
    """承認済み < 定員 の部屋を (Room, approved_count) で新しい順に返す"""
    approved = (
        db.query(
            JoinRequest.room_id.label("room_id"),
            func.count(JoinRequest.id).label("approved"),
        )
        .filter(JoinRequest.status == RequestStatus.APPROVED.value)
        .group_by(JoinRequest.room_id)
        .subquery()
    )
    approved_col = func.coalesce(approved.c.approved, 0)

    q = (
        db.query(Room, approved_col)
        .outerjoin(approved, approved.c.room_id == Room.id)
        .filter(approved_col < ROOM_CAPACITY)
        .order_by(Room.created_at.desc(), Room.id.desc())
    )
    return [(room, int(count)) for room, count in q.all()]


def list_rooms(db: Session) -> List[Tuple[Room, int]]:
    """作成者向け：満室も含めた全部屋"""
    return [
        (room, ledger.approved_count(db, room.id))
        for room in db.query(Room).order_by(Room.created_at.desc(), Room.id.desc()).all()
    ]


def assign_target_room(db: Session, user: User) -> Result:
    rooms = list_available_rooms(db)
    if not rooms:
        return Result.failure(ErrorKind.NOT_FOUND, "no_rooms")

    if user.is_in_chat:
        return Result.success(RoomChoice(mode=MODE_PICK, rooms=rooms))

    return Result.success(RoomChoice(mode=MODE_FORCED, rooms=rooms[:1]))


def submit_join_request(
    db: Session,
    user_id: int,
    room_id: int,
    single_active: bool = True,
) -> Result:
    """
    PENDING の JoinRequest を作る。
    - 同じ (user, room) に PENDING があれば duplicate_request
    - single_active=True なら、他の部屋も含めて PENDING/APPROVED があれば active_request_exists
    """
    try:
        user = db.get(User, user_id)
        if user is None:
            return Result.failure(ErrorKind.NOT_FOUND, "user_not_found")
        if not user.game_id:
            return Result.failure(ErrorKind.VALIDATION, "game_id_missing")

        room = db.get(Room, room_id)
        if room is None:
            return Result.failure(ErrorKind.NOT_FOUND, "room_not_found")

        if ledger.pending_exists(db, user_id, room_id):
            return Result.failure(ErrorKind.CONFLICT, "duplicate_request")

        if single_active and ledger.active_request_exists(db, user_id):
            return Result.failure(ErrorKind.CONFLICT, "active_request_exists")

        req = JoinRequest(
            user_id=user_id,
            room_id=room_id,
            status=RequestStatus.PENDING.value,
        )
        db.add(req)
        db.commit()
        logger.info("Join request %s: user %s -> room %s", req.id, user_id, room.game_id)
        return Result.success(ledger.get_request(db, req.id))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("submit_join_request failed: user %s room %s", user_id, room_id)
        return STORE_FAILURE


def _leads_other_room(db: Session, user_id: int, except_room_id: int) -> bool:
    q = db.query(Room.id).filter(Room.leader_id == user_id, Room.id != except_room_id)
    return db.query(q.exists()).scalar()


def assign_room_leader(db: Session, leader_user_id: int, room_game_id: str) -> Result:
    """
    game id をキーに部屋を upsert し、リーダーを設定する。
    - 既存の部屋ならリーダーの付け替え（エラーにしない）
    - 新リーダーは ROOM_LEADER に昇格（CREATOR はそのまま）
    - 旧リーダーは他に担当部屋がなければ USER に戻す
    """
    room_game_id = (room_game_id or "").strip()
    if not is_valid_game_id(room_game_id):
        return Result.failure(ErrorKind.VALIDATION, "invalid_game_id")

    try:
        leader = db.get(User, leader_user_id)
        if leader is None:
            return Result.failure(ErrorKind.NOT_FOUND, "user_not_found")

        room = db.query(Room).filter(Room.game_id == room_game_id).first()
        previous_leader_id = None
        if room is None:
            room = Room(game_id=room_game_id, leader_id=leader_user_id)
            db.add(room)
            db.flush()
            logger.info("Room %s created with leader %s", room_game_id, leader_user_id)
        else:
            previous_leader_id = room.leader_id
            room.leader_id = leader_user_id
            logger.info(
                "Room %s leader reassigned: %s -> %s",
                room_game_id, previous_leader_id, leader_user_id,
            )

        if leader.role != UserRole.CREATOR.value:
            leader.role = UserRole.ROOM_LEADER.value

        if previous_leader_id is not None and previous_leader_id != leader_user_id:
            previous = db.get(User, previous_leader_id)
            if (
                previous is not None
                and previous.role == UserRole.ROOM_LEADER.value
                and not _leads_other_room(db, previous_leader_id, room.id)
            ):
                previous.role = UserRole.USER.value
                logger.info("Previous leader %s demoted to USER", previous_leader_id)

        db.commit()
        db.refresh(room)
        return Result.success(room)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("assign_room_leader failed: %s -> %s", leader_user_id, room_game_id)
        return STORE_FAILURE
