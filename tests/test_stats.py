# tests/test_stats.py

from sqlalchemy.orm import Session

from roombot.models import RequestStatus
from roombot.services.stats import collect_stats

from .factories import make_request, make_room, make_user


def test_collect_stats(db: Session):
    room = make_room(db, make_user(db, 10))
    make_request(db, make_user(db, 20), room, RequestStatus.APPROVED)
    make_request(db, make_user(db, 21), room)

    assert collect_stats(db) == {
        "users": 3,
        "rooms": 1,
        "requests": {"PENDING": 1, "APPROVED": 1, "REJECTED": 0},
    }


def test_collect_stats_empty(db: Session):
    assert collect_stats(db) == {
        "users": 0,
        "rooms": 0,
        "requests": {"PENDING": 0, "APPROVED": 0, "REJECTED": 0},
    }
