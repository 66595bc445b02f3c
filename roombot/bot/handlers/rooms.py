# roombot/bot/handlers/rooms.py
# 部屋選択 → 参加申請

import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from sqlalchemy.orm import Session

from ... import texts
from ...config import Settings
from ...services import ledger, rooms
from ...services.notifications import NotificationDispatcher
from .. import keyboards
from .profile import touch

logger = logging.getLogger(__name__)

router = Router(name="rooms")


async def _offer_rooms(message: Message, db: Session, settings: Settings, tg_user) -> None:
    result = touch(db, settings, tg_user)
    if not result.ok:
        await message.answer(texts.GENERIC_ERROR)
        return
    user = result.value

    if not user.game_id:
        await message.answer(texts.ASK_GAME_ID)
        return

    # 申請中 / 参加済みなら部屋一覧は出さない
    if ledger.active_request_exists(db, user.telegram_id):
        await message.answer(texts.reason_text("active_request_exists"))
        return

    result = rooms.assign_target_room(db, user)
    if not result.ok:
        await message.answer(texts.reason_text(result.reason))
        return

    choice = result.value
    if choice.mode == rooms.MODE_FORCED:
        room, _ = choice.rooms[0]
        text = texts.forced_room(room.game_id)
    else:
        text = texts.pick_room()
    await message.answer(text, reply_markup=keyboards.rooms_menu(choice.rooms))


@router.message(Command("join"), F.chat.type == "private")
async def cmd_join(message: Message, db: Session, settings: Settings):
    await _offer_rooms(message, db, settings, message.from_user)


@router.callback_query(F.data == keyboards.PICK_ROOM)
async def on_pick_room(callback: CallbackQuery, db: Session, settings: Settings):
    await callback.answer()
    await _offer_rooms(callback.message, db, settings, callback.from_user)


@router.callback_query(keyboards.JoinRoomCallback.filter())
async def on_join_room(
    callback: CallbackQuery,
    callback_data: keyboards.JoinRoomCallback,
    db: Session,
    notifier: NotificationDispatcher,
):
    await callback.answer()
    result = rooms.submit_join_request(db, callback.from_user.id, callback_data.room_id)
    if not result.ok:
        await callback.message.answer(texts.reason_text(result.reason))
        return

    req = result.value
    await callback.message.answer(texts.request_sent(req.room.game_id))
    await notifier.request_submitted(req, keyboards.review_actions(req.id))
