# roombot/bot/handlers/membership.py
# 設定グループへの参加/退出で is_in_chat を切り替える

import logging

from aiogram import Router
from aiogram.filters import JOIN_TRANSITION, LEAVE_TRANSITION, ChatMemberUpdatedFilter
from aiogram.types import ChatMemberUpdated
from sqlalchemy.orm import Session

from ...config import Settings
from ...services import users
from .profile import touch

logger = logging.getLogger(__name__)

router = Router(name="membership")


def _is_group(event: ChatMemberUpdated, settings: Settings) -> bool:
    return settings.group_configured and event.chat.id == settings.group_chat_id


@router.chat_member(ChatMemberUpdatedFilter(member_status_changed=JOIN_TRANSITION))
async def on_group_join(event: ChatMemberUpdated, db: Session, settings: Settings):
    if not _is_group(event, settings):
        return
    member = event.new_chat_member.user
    if touch(db, settings, member).ok:
        users.set_in_chat(db, member.id, True)
        logger.info("User %s joined the group", member.id)


@router.chat_member(ChatMemberUpdatedFilter(member_status_changed=LEAVE_TRANSITION))
async def on_group_leave(event: ChatMemberUpdated, db: Session, settings: Settings):
    if not _is_group(event, settings):
        return
    member = event.new_chat_member.user
    users.set_in_chat(db, member.id, False)
    logger.info("User %s left the group", member.id)
