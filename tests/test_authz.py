# tests/test_authz.py
# async の判定は asyncio.run で回す

import asyncio

from sqlalchemy.orm import Session

from roombot.config import Settings
from roombot.models import UserRole
from roombot.services.authz import Action, AuthorizationGate

from .factories import CREATOR_ID, GROUP_ID, FakeTransport, make_room, make_user


def _authorize(gate, db, actor_id, action, room=None):
    return asyncio.run(gate.authorize(db, actor_id, action, room=room))


def test_configured_creator_allowed_without_stored_role(db: Session, settings: Settings):
    gate = AuthorizationGate(settings, FakeTransport())
    # ユーザー行が無くても / ロールがずれていても通る
    assert _authorize(gate, db, CREATOR_ID, Action.ASSIGN_LEADER).allowed

    make_user(db, CREATOR_ID, role=UserRole.USER)
    assert _authorize(gate, db, CREATOR_ID, Action.VIEW_STATS).allowed


def test_stored_creator_role_is_fallback(db: Session):
    gate = AuthorizationGate(Settings(), FakeTransport())
    make_user(db, 5, role=UserRole.CREATOR)
    make_user(db, 6, role=UserRole.ROOM_LEADER)

    assert _authorize(gate, db, 5, Action.LIST_USERS).allowed
    denied = _authorize(gate, db, 6, Action.LIST_USERS)
    assert not denied.allowed
    assert denied.reason == "not_creator"


def test_leader_role_actions(db: Session, settings: Settings):
    gate = AuthorizationGate(settings, FakeTransport())
    make_user(db, 6, role=UserRole.ROOM_LEADER)
    make_user(db, 7, role=UserRole.USER)

    assert _authorize(gate, db, 6, Action.VIEW_OWN_REQUESTS).allowed
    assert _authorize(gate, db, CREATOR_ID, Action.VIEW_OWN_REQUESTS).allowed
    assert _authorize(gate, db, 7, Action.VIEW_OWN_REQUESTS).reason == "not_leader_role"
    assert _authorize(gate, db, 404, Action.VIEW_OWN_REQUESTS).reason == "not_leader_role"


def test_room_leader_must_match_exactly(db: Session, settings: Settings):
    gate = AuthorizationGate(settings, FakeTransport())
    leader = make_user(db, 10, role=UserRole.ROOM_LEADER)
    other_leader = make_user(db, 11, role=UserRole.ROOM_LEADER)
    room = make_room(db, leader)
    make_room(db, other_leader)

    assert _authorize(gate, db, 10, Action.REVIEW_REQUEST, room=room).allowed
    assert _authorize(gate, db, 11, Action.REVIEW_REQUEST, room=room).reason == "not_room_leader"
    # 作成者でも部屋のリーダーでなければ不可
    assert _authorize(gate, db, CREATOR_ID, Action.REMOVE_MEMBER, room=room).reason == "not_room_leader"
    assert _authorize(gate, db, 10, Action.REVIEW_REQUEST).reason == "missing_room"


def test_group_admin_statuses(db: Session, settings: Settings):
    transport = FakeTransport(statuses={1: "administrator", 2: "creator", 3: "member", 4: "left"})
    gate = AuthorizationGate(settings, transport)

    assert _authorize(gate, db, 1, Action.GROUP_REJECT).allowed
    assert _authorize(gate, db, 2, Action.GROUP_LIST_REQUESTS).allowed
    assert _authorize(gate, db, 3, Action.GROUP_REJECT).reason == "not_group_admin"
    assert _authorize(gate, db, 4, Action.GROUP_REJECT).reason == "not_group_admin"


def test_group_admin_not_configured_has_distinct_reason(db: Session):
    transport = FakeTransport(statuses={1: "administrator"})
    gate = AuthorizationGate(Settings(creator_id=CREATOR_ID), transport)

    decision = _authorize(gate, db, 1, Action.GROUP_REJECT)
    assert not decision.allowed
    assert decision.reason == "group_not_configured"


def test_group_admin_lookup_failure_is_denial(db: Session, settings: Settings):
    gate = AuthorizationGate(settings, FakeTransport(fail_lookup=True))

    decision = _authorize(gate, db, 1, Action.GROUP_REJECT)
    assert not decision.allowed
    assert decision.reason == "transport_error"


def test_settings_group_flag():
    assert Settings(group_chat_id=GROUP_ID).group_configured
    assert not Settings().group_configured
