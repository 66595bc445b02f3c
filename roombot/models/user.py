# roombot/models/user.py

import enum
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, String

from ..db import Base


class UserRole(str, enum.Enum):
    CREATOR = "CREATOR"
    ROOM_LEADER = "ROOM_LEADER"
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    __tablename__ = "users"

    # Telegram の user id をそのまま主キーにする
    telegram_id = Column(BigInteger, primary_key=True, autoincrement=False)
    username = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)

    game_id = Column(String, nullable=True, index=True)  # 数字のみ（一意ではない）
    role = Column(String, nullable=False, default=UserRole.USER.value)
    is_in_chat = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def display_name(self) -> str:
        if self.username:
            return f"@{self.username}"
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or str(self.telegram_id)
