# roombot/api/deps.py

from collections.abc import Generator
from sqlalchemy.orm import Session

from ..db import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """リクエスト 1 件ごとのセッション（bot 側の DbSessionMiddleware と同じ寿命）"""
    with SessionLocal() as db:
        yield db
