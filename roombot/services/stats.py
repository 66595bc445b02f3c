# roombot/services/stats.py

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.room import Room
from ..models.user import User
from . import ledger


def collect_stats(db: Session) -> dict:
    return {
        "users": db.query(func.count(User.telegram_id)).scalar(),
        "rooms": db.query(func.count(Room.id)).scalar(),
        "requests": ledger.status_counts(db),
    }
