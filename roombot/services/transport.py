# roombot/services/transport.py
"""コアから見たメッセージ送信の契約。

コア側は MessagingTransport だけを知っていればよい。
本番は roombot.bot.transport.AiogramTransport、テストでは記録用のフェイクを渡す。
"""

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

# (ボタン文言, callback_data)
Action = Tuple[str, str]
ActionRows = Sequence[Sequence[Action]]


class TransportError(Exception):
    """送信・照会の失敗（届かないチャット、ネットワーク断など）"""


class MessagingTransport(Protocol):
    async def send_message(
        self, chat_id: int, text: str, actions: Optional[ActionRows] = None
    ) -> None: ...

    async def get_chat_member_status(self, group_id: int, user_id: int) -> str: ...

    async def create_invite_link(
        self,
        group_id: int,
        single_use: bool = True,
        expires_at: Optional[datetime] = None,
    ) -> str: ...
