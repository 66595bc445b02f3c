# roombot/bot/transport.py
"""MessagingTransport の aiogram 実装"""

from datetime import datetime
from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from ..services.transport import ActionRows, TransportError
from .keyboards import build_markup


class AiogramTransport:
    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_message(
        self, chat_id: int, text: str, actions: Optional[ActionRows] = None
    ) -> None:
        markup = build_markup(actions) if actions else None
        try:
            await self.bot.send_message(chat_id, text, reply_markup=markup)
        except TelegramAPIError as e:
            raise TransportError(f"send_message to {chat_id} failed: {e}") from e

    async def get_chat_member_status(self, group_id: int, user_id: int) -> str:
        try:
            member = await self.bot.get_chat_member(group_id, user_id)
        except TelegramAPIError as e:
            raise TransportError(f"get_chat_member {group_id}/{user_id} failed: {e}") from e
        # ChatMemberStatus は str Enum
        return str(getattr(member.status, "value", member.status))

    async def create_invite_link(
        self,
        group_id: int,
        single_use: bool = True,
        expires_at: Optional[datetime] = None,
    ) -> str:
        try:
            link = await self.bot.create_chat_invite_link(
                group_id,
                expire_date=expires_at,
                member_limit=1 if single_use else None,
            )
        except TelegramAPIError as e:
            raise TransportError(f"create_invite_link for {group_id} failed: {e}") from e
        return link.invite_link
