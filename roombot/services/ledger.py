# roombot/services/ledger.py
"""Request Ledger: join request の状態遷移と集計クエリ。

PENDING ──approve──▶ APPROVED ──remove──▶ REJECTED
   └──────reject (leader / group admin)──▶ REJECTED

遷移はすべて 1 行の条件付き UPDATE。APPROVED / REJECTED から PENDING には戻らない。
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.join_request import JoinRequest, RequestStatus
from ..models.room import Room, ROOM_CAPACITY
from .results import ErrorKind, Result, STORE_FAILURE

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (RequestStatus.PENDING.value, RequestStatus.APPROVED.value)


# -----------------------------
# 集計・検索
# -----------------------------

def approved_count(db: Session, room_id: int) -> int:
    return (
        db.query(func.count(JoinRequest.id))
        .filter(
            JoinRequest.room_id == room_id,
            JoinRequest.status == RequestStatus.APPROVED.value,
        )
        .scalar()
    )


def pending_exists(db: Session, user_id: int, room_id: int) -> bool:
    q = db.query(JoinRequest.id).filter(
        JoinRequest.user_id == user_id,
        JoinRequest.room_id == room_id,
        JoinRequest.status == RequestStatus.PENDING.value,
    )
    return db.query(q.exists()).scalar()


def active_request_exists(db: Session, user_id: int) -> bool:
    """全部屋を通して PENDING / APPROVED の申請があるか"""
    q = db.query(JoinRequest.id).filter(
        JoinRequest.user_id == user_id,
        JoinRequest.status.in_(ACTIVE_STATUSES),
    )
    return db.query(q.exists()).scalar()


def get_request(db: Session, request_id: int) -> Optional[JoinRequest]:
    """request → room → leader, request → user をまとめて読む"""
    return (
        db.query(JoinRequest)
        .options(
            joinedload(JoinRequest.room).joinedload(Room.leader),
            joinedload(JoinRequest.user),
        )
        .filter(JoinRequest.id == request_id)
        .first()
    )


def _requests_for_leader(db: Session, leader_id: int, status: RequestStatus) -> List[JoinRequest]:
    return (
        db.query(JoinRequest)
        .join(Room, JoinRequest.room_id == Room.id)
        .options(joinedload(JoinRequest.user), joinedload(JoinRequest.room))
        .filter(
            Room.leader_id == leader_id,
            JoinRequest.status == status.value,
        )
        .order_by(JoinRequest.created_at, JoinRequest.id)
        .all()
    )


def pending_for_leader(db: Session, leader_id: int) -> List[JoinRequest]:
    return _requests_for_leader(db, leader_id, RequestStatus.PENDING)


def approved_for_leader(db: Session, leader_id: int) -> List[JoinRequest]:
    return _requests_for_leader(db, leader_id, RequestStatus.APPROVED)


def all_pending(db: Session, limit: int = 50) -> List[JoinRequest]:
    """グループ管理者向け：全部屋の PENDING 申請"""
    return (
        db.query(JoinRequest)
        .options(
            joinedload(JoinRequest.user),
            joinedload(JoinRequest.room),
        )
        .filter(JoinRequest.status == RequestStatus.PENDING.value)
        .order_by(JoinRequest.created_at, JoinRequest.id)
        .limit(limit)
        .all()
    )


def status_counts(db: Session) -> dict:
    rows = (
        db.query(JoinRequest.status, func.count(JoinRequest.id))
        .group_by(JoinRequest.status)
        .all()
    )
    counts = {s.value: 0 for s in RequestStatus}
    for status, n in rows:
        counts[status] = n
    return counts


# -----------------------------
# 状態遷移
# -----------------------------

def _transition(
    db: Session,
    request_id: int,
    from_status: RequestStatus,
    to_status: RequestStatus,
    stamp_approved: bool = False,
) -> bool:
    """from_status のときだけ更新する。更新できたら True"""
    values = {JoinRequest.status: to_status.value}
    if stamp_approved:
        values[JoinRequest.approved_at] = datetime.utcnow()

    updated = (
        db.query(JoinRequest)
        .filter(
            JoinRequest.id == request_id,
            JoinRequest.status == from_status.value,
        )
        .update(values, synchronize_session=False)
    )
    return updated == 1


def _finish(db: Session, request_id: int) -> Result:
    db.commit()
    return Result.success(get_request(db, request_id))


def approve_request(db: Session, request_id: int, actor_id: int) -> Result:
    """
    ガード順: 存在 → リーダー本人 → PENDING → 定員。
    定員は承認時点で数え直す（部屋行をロックしてから COUNT → UPDATE を同一トランザクションで）。
    """
    try:
        req = get_request(db, request_id)
        if req is None:
            return Result.failure(ErrorKind.NOT_FOUND, "request_not_found")

        if req.room.leader_id != actor_id:
            return Result.failure(ErrorKind.FORBIDDEN, "not_leader")

        if req.status != RequestStatus.PENDING.value:
            return Result.failure(ErrorKind.CONFLICT, "already_processed")

        # 同じ部屋への同時承認を直列化（SQLite では FOR UPDATE は無視される）
        db.query(Room).filter(Room.id == req.room_id).with_for_update().one()

        if approved_count(db, req.room_id) >= ROOM_CAPACITY:
            db.rollback()
            return Result.failure(ErrorKind.CONFLICT, "room_full")

        if not _transition(
            db, request_id, RequestStatus.PENDING, RequestStatus.APPROVED, stamp_approved=True
        ):
            db.rollback()
            return Result.failure(ErrorKind.CONFLICT, "already_processed")

        logger.info("Request %s approved by %s", request_id, actor_id)
        return _finish(db, request_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("approve_request failed: %s", request_id)
        return STORE_FAILURE


def reject_request(db: Session, request_id: int, actor_id: int) -> Result:
    try:
        req = get_request(db, request_id)
        if req is None:
            return Result.failure(ErrorKind.NOT_FOUND, "request_not_found")

        if req.room.leader_id != actor_id:
            return Result.failure(ErrorKind.FORBIDDEN, "not_leader")

        if not _transition(db, request_id, RequestStatus.PENDING, RequestStatus.REJECTED):
            db.rollback()
            return Result.failure(ErrorKind.CONFLICT, "already_processed")

        logger.info("Request %s rejected by leader %s", request_id, actor_id)
        return _finish(db, request_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("reject_request failed: %s", request_id)
        return STORE_FAILURE


def reject_as_group_admin(db: Session, request_id: int) -> Result:
    """グループ管理者による却下。権限チェックは AuthorizationGate 側で済ませてから呼ぶ。"""
    try:
        req = get_request(db, request_id)
        if req is None:
            return Result.failure(ErrorKind.NOT_FOUND, "request_not_found")

        if not _transition(db, request_id, RequestStatus.PENDING, RequestStatus.REJECTED):
            db.rollback()
            return Result.failure(ErrorKind.CONFLICT, "already_processed")

        logger.info("Request %s rejected by group admin", request_id)
        return _finish(db, request_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("reject_as_group_admin failed: %s", request_id)
        return STORE_FAILURE


def remove_member(db: Session, request_id: int, actor_id: int) -> Result:
    """承認済みメンバーを外す（APPROVED → REJECTED）。APPROVED 以外は失敗。"""
    try:
        req = get_request(db, request_id)
        if req is None:
            return Result.failure(ErrorKind.NOT_FOUND, "request_not_found")

        if req.room.leader_id != actor_id:
            return Result.failure(ErrorKind.FORBIDDEN, "not_leader")

        if not _transition(db, request_id, RequestStatus.APPROVED, RequestStatus.REJECTED):
            db.rollback()
            return Result.failure(ErrorKind.CONFLICT, "not_approved")

        logger.info("Approved request %s removed by %s", request_id, actor_id)
        return _finish(db, request_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("remove_member failed: %s", request_id)
        return STORE_FAILURE
