# roombot/api/v1/rooms.py
# 閲覧専用。状態を変える操作は bot 側からのみ。

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..deps import get_db
from ...models.room import Room, ROOM_CAPACITY
from ...schemas.room import RoomOut
from ...services import ledger, rooms as room_service

router = APIRouter(prefix="/rooms", tags=["rooms"])


def _room_out(room: Room, approved: int) -> RoomOut:
    return RoomOut(
        id=room.id,
        game_id=room.game_id,
        leader_id=room.leader_id,
        created_at=room.created_at,
        approved_count=approved,
        capacity=ROOM_CAPACITY,
    )


@router.get("", response_model=list[RoomOut])
def list_available_rooms(
    db: Session = Depends(get_db),
):
    """空きのある部屋（新しい順）"""
    return [_room_out(room, count) for room, count in room_service.list_available_rooms(db)]


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: int, db: Session = Depends(get_db)):
    room = db.get(Room, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="room not found")
    return _room_out(room, ledger.approved_count(db, room.id))
