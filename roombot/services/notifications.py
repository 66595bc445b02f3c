# roombot/services/notifications.py
"""Notification Dispatcher。

状態遷移が commit された後に呼ぶ。送信失敗はログと失敗カウンタに残すだけで、
遷移は巻き戻さない。再送キューは持たない。
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Deque, Optional

from .. import texts
from ..config import Settings
from ..models.join_request import JoinRequest
from .transport import ActionRows, MessagingTransport, TransportError

logger = logging.getLogger(__name__)


@dataclass
class OutboundMessage:
    chat_id: int
    text: str
    delivered: bool
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


class NotificationDispatcher:
    def __init__(
        self,
        settings: Settings,
        transport: MessagingTransport,
        history_size: int = 200,
    ):
        self.settings = settings
        self.transport = transport
        self.history: Deque[OutboundMessage] = deque(maxlen=history_size)
        self.delivered = 0
        self.failed = 0

    async def notify(
        self, chat_id: int, text: str, actions: Optional[ActionRows] = None
    ) -> bool:
        try:
            await self.transport.send_message(chat_id, text, actions)
        except TransportError as e:
            self.failed += 1
            self.history.append(OutboundMessage(chat_id, text, False, str(e)))
            logger.warning("Notification to %s failed: %s", chat_id, e)
            return False

        self.delivered += 1
        self.history.append(OutboundMessage(chat_id, text, True))
        return True

    async def invite_link(self) -> Optional[str]:
        """グループ設定があれば 1 回限り・期限付きの招待リンクを作る"""
        if not self.settings.group_configured:
            return None
        expires_at = datetime.utcnow() + timedelta(hours=self.settings.invite_link_ttl_hours)
        try:
            return await self.transport.create_invite_link(
                self.settings.group_chat_id,
                single_use=True,
                expires_at=expires_at,
            )
        except TransportError as e:
            logger.warning("Invite link creation failed: %s", e)
            return None

    # -----------------------------
    # ワークフロー別の通知
    # -----------------------------

    async def request_submitted(self, req: JoinRequest, actions: ActionRows) -> bool:
        """リーダーへ：新規申請（承認/却下ボタン付き）"""
        text = texts.leader_new_request(
            req.user.display_name, req.user.game_id, req.room.game_id
        )
        return await self.notify(req.room.leader_id, text, actions)

    async def request_approved(self, req: JoinRequest) -> bool:
        link = await self.invite_link()
        return await self.notify(req.user_id, texts.approved_for_user(req.room.game_id, link))

    async def request_rejected(self, req: JoinRequest, by_group_admin: bool = False) -> bool:
        ok = await self.notify(req.user_id, texts.rejected_for_user(req.room.game_id))
        if by_group_admin:
            leader_text = texts.rejected_by_admin_for_leader(
                req.user.display_name, req.room.game_id
            )
            ok = await self.notify(req.room.leader_id, leader_text) and ok
        return ok

    async def member_removed(self, req: JoinRequest) -> bool:
        return await self.notify(req.user_id, texts.removed_for_user(req.room.game_id))
