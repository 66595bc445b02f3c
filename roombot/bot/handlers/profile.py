# roombot/bot/handlers/profile.py
# /start, /menu, ID の確認・登録

import logging

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import CallbackQuery, Message, User as TgUser
from sqlalchemy.orm import Session

from ... import texts
from ...config import Settings
from ...services import users
from ...services.results import Result
from .. import keyboards

logger = logging.getLogger(__name__)

router = Router(name="profile")
router.message.filter(F.chat.type == "private")


def touch(db: Session, settings: Settings, tg_user: TgUser) -> Result:
    return users.touch_profile(
        db,
        settings,
        tg_user.id,
        username=tg_user.username,
        first_name=tg_user.first_name,
        last_name=tg_user.last_name,
    )


@router.message(CommandStart())
async def cmd_start(message: Message, db: Session, settings: Settings):
    if not touch(db, settings, message.from_user).ok:
        await message.answer(texts.GENERIC_ERROR)
        return
    await message.answer(texts.START, reply_markup=keyboards.check_id_menu())


@router.message(Command("menu"))
async def cmd_menu(message: Message, db: Session, settings: Settings):
    if not touch(db, settings, message.from_user).ok:
        await message.answer(texts.GENERIC_ERROR)
        return
    await message.answer(texts.MAIN_MENU, reply_markup=keyboards.main_menu())


@router.callback_query(F.data == keyboards.HELP)
async def on_help(callback: CallbackQuery):
    await callback.answer()
    await callback.message.answer(texts.HELP)


@router.callback_query(F.data == keyboards.CHECK_GAME_ID)
async def on_check_game_id(callback: CallbackQuery, db: Session):
    await callback.answer()
    user = users.get_user(db, callback.from_user.id)

    if user is not None and user.game_id:
        await callback.message.answer(
            texts.game_id_current(user.game_id),
            reply_markup=keyboards.edit_id_menu(),
        )
        return

    await callback.message.answer(texts.ASK_GAME_ID)


@router.callback_query(F.data == keyboards.EDIT_GAME_ID)
async def on_edit_game_id(callback: CallbackQuery):
    await callback.answer()
    await callback.message.answer(texts.ASK_NEW_GAME_ID)


# コマンド以外のテキストは game id の入力として扱う
@router.message(F.text, ~F.text.startswith("/"))
async def on_game_id_text(message: Message, db: Session, settings: Settings):
    text = message.text.strip()
    if not users.is_valid_game_id(text):
        await message.answer(texts.INVALID_GAME_ID)
        return

    if not touch(db, settings, message.from_user).ok:
        await message.answer(texts.GENERIC_ERROR)
        return

    result = users.save_game_id(db, message.from_user.id, text)
    if not result.ok:
        await message.answer(texts.reason_text(result.reason))
        return

    await message.answer(texts.game_id_saved(text), reply_markup=keyboards.saved_id_menu())
