# roombot/models/room.py
from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from datetime import datetime

from ..db import Base

# 1部屋あたりの承認済みメンバー上限
ROOM_CAPACITY = 60


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # 部屋名として見せる game id（リーダー自身の game id を使うのが慣例）
    game_id = Column(String, nullable=False, unique=True)

    leader_id = Column(
        BigInteger,
        ForeignKey("users.telegram_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    leader = relationship("User", foreign_keys=[leader_id])
    requests = relationship(
        "JoinRequest",
        back_populates="room",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
