# roombot/schemas/room.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime


class RoomOut(BaseModel):
    id: int
    game_id: str
    leader_id: int
    created_at: datetime
    approved_count: int = 0
    capacity: int = 60

    model_config = ConfigDict(from_attributes=True)
