# roombot/models/join_request.py

import enum
from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from ..db import Base


class RequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class JoinRequest(Base):
    __tablename__ = "join_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        BigInteger,
        ForeignKey("users.telegram_id", ondelete="CASCADE"),
        nullable=False,
    )
    room_id = Column(
        Integer,
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
    )
    status = Column(String, nullable=False, default=RequestStatus.PENDING.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    approved_at = Column(DateTime, nullable=True)

    user = relationship("User")
    room = relationship("Room", back_populates="requests")

    # 部屋ごとの承認数カウント・ユーザーごとの重複チェック用
    __table_args__ = (
        Index("ix_join_requests_room_status", "room_id", "status"),
        Index("ix_join_requests_user_status", "user_id", "status"),
    )
