# tests/conftest.py
import os

# roombot.db は import 時に URL を読むので先に差し替える
os.environ["DATABASE_URL"] = "sqlite:///./test_roombot.db"

import pytest
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

from roombot.config import Settings
from roombot.db import Base, engine, SessionLocal
from roombot.main import app

from .factories import CREATOR_ID, GROUP_ID, FakeTransport


@pytest.fixture(scope="function")
def db() -> Session:
    """毎回 users / rooms / join_requests を作り直した空の DB（bot・API と同じ engine）"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    with SessionLocal() as session:
        yield session


@pytest.fixture(scope="function")
def client(db) -> TestClient:
    # テーブルを作り直してから app を起動する
    with TestClient(app) as c:
        yield c


@pytest.fixture
def settings() -> Settings:
    return Settings(creator_id=CREATOR_ID, group_chat_id=GROUP_ID)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
