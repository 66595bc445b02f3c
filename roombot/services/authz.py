# roombot/services/authz.py
"""Role & Authorization Gate。

authorize() は例外を投げず、必ず Decision を返す。
文言への変換は呼び出し側（bot）で行う。
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from ..config import Settings
from ..models.room import Room
from ..models.user import User, UserRole
from .transport import MessagingTransport, TransportError

logger = logging.getLogger(__name__)

GROUP_ADMIN_STATUSES = frozenset({"administrator", "creator"})


class Action(str, enum.Enum):
    # 作成者のみ
    ASSIGN_LEADER = "assign_leader"
    LIST_ROOMS = "list_rooms"
    VIEW_STATS = "view_stats"
    LIST_USERS = "list_users"
    # リーダー（ロール）
    VIEW_OWN_REQUESTS = "view_own_requests"
    # その部屋のリーダー本人
    REVIEW_REQUEST = "review_request"
    REMOVE_MEMBER = "remove_member"
    # グループ管理者
    GROUP_LIST_REQUESTS = "group_list_requests"
    GROUP_REJECT = "group_reject"


CREATOR_ACTIONS = frozenset({
    Action.ASSIGN_LEADER,
    Action.LIST_ROOMS,
    Action.VIEW_STATS,
    Action.LIST_USERS,
})
LEADER_ACTIONS = frozenset({Action.VIEW_OWN_REQUESTS})
ROOM_LEADER_ACTIONS = frozenset({Action.REVIEW_REQUEST, Action.REMOVE_MEMBER})
GROUP_ADMIN_ACTIONS = frozenset({Action.GROUP_LIST_REQUESTS, Action.GROUP_REJECT})


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


class AuthorizationGate:
    def __init__(self, settings: Settings, transport: MessagingTransport):
        self.settings = settings
        self.transport = transport

    def _stored_role(self, db: Session, actor_id: int) -> Optional[str]:
        user = db.get(User, actor_id)
        return user.role if user is not None else None

    def is_configured_creator(self, actor_id: int) -> bool:
        return self.settings.creator_id is not None and actor_id == self.settings.creator_id

    def check_creator(self, db: Session, actor_id: int) -> Decision:
        # 設定上の creator は保存されたロールに関係なく通す
        if self.is_configured_creator(actor_id):
            return ALLOW
        if self._stored_role(db, actor_id) == UserRole.CREATOR.value:
            return ALLOW
        return deny("not_creator")

    def check_leader_role(self, db: Session, actor_id: int) -> Decision:
        if self.is_configured_creator(actor_id):
            return ALLOW
        role = self._stored_role(db, actor_id)
        if role in (UserRole.CREATOR.value, UserRole.ROOM_LEADER.value):
            return ALLOW
        return deny("not_leader_role")

    @staticmethod
    def check_room_leader(room: Optional[Room], actor_id: int) -> Decision:
        """部屋単位の操作：グローバルな ROOM_LEADER ロールだけでは不可"""
        if room is None:
            return deny("missing_room")
        if room.leader_id != actor_id:
            return deny("not_room_leader")
        return ALLOW

    async def check_group_admin(self, actor_id: int) -> Decision:
        if not self.settings.group_configured:
            return deny("group_not_configured")
        try:
            status = await self.transport.get_chat_member_status(
                self.settings.group_chat_id, actor_id
            )
        except TransportError:
            logger.warning("Group admin lookup failed for %s", actor_id, exc_info=True)
            return deny("transport_error")
        if status in GROUP_ADMIN_STATUSES:
            return ALLOW
        return deny("not_group_admin")

    async def authorize(
        self,
        db: Session,
        actor_id: int,
        action: Action,
        room: Optional[Room] = None,
    ) -> Decision:
        if action in CREATOR_ACTIONS:
            return self.check_creator(db, actor_id)
        if action in LEADER_ACTIONS:
            return self.check_leader_role(db, actor_id)
        if action in ROOM_LEADER_ACTIONS:
            return self.check_room_leader(room, actor_id)
        if action in GROUP_ADMIN_ACTIONS:
            return await self.check_group_admin(actor_id)
        return deny("unknown_action")
