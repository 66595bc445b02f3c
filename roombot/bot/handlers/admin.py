# roombot/bot/handlers/admin.py
# グループ管理者・作成者向けコマンド

import logging

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message
from sqlalchemy.orm import Session

from ... import texts
from ...services import ledger, rooms, users
from ...services.authz import Action, AuthorizationGate
from ...services.notifications import NotificationDispatcher
from ...services.stats import collect_stats
from .. import keyboards
from .leader import drop_buttons

logger = logging.getLogger(__name__)

router = Router(name="admin")
router.message.filter(F.chat.type == "private")


# -----------------------------
# グループ管理者
# -----------------------------

@router.message(Command("group_requests"))
async def cmd_group_requests(message: Message, db: Session, gate: AuthorizationGate):
    decision = await gate.authorize(db, message.from_user.id, Action.GROUP_LIST_REQUESTS)
    if not decision:
        await message.answer(texts.reason_text(decision.reason))
        return

    pending = ledger.all_pending(db)
    if not pending:
        await message.answer(texts.NO_PENDING)
        return

    for req in pending:
        await message.answer(
            texts.request_line(req.user.display_name, req.user.game_id, req.room.game_id),
            reply_markup=keyboards.build_markup(keyboards.group_reject_actions(req.id)),
        )


@router.callback_query(keyboards.GroupRequestCallback.filter(F.action == "reject"))
async def on_group_reject(
    callback: CallbackQuery,
    callback_data: keyboards.GroupRequestCallback,
    db: Session,
    gate: AuthorizationGate,
    notifier: NotificationDispatcher,
):
    decision = await gate.authorize(db, callback.from_user.id, Action.GROUP_REJECT)
    if not decision:
        await callback.answer(texts.reason_text(decision.reason), show_alert=True)
        return

    result = ledger.reject_as_group_admin(db, callback_data.request_id)
    if not result.ok:
        await callback.answer(texts.reason_text(result.reason), show_alert=True)
        return

    await callback.answer(texts.review_done(result.value.status))
    await drop_buttons(callback)
    await notifier.request_rejected(result.value, by_group_admin=True)


# -----------------------------
# 作成者
# -----------------------------

@router.message(Command("assign_leader"))
async def cmd_assign_leader(
    message: Message,
    command: CommandObject,
    db: Session,
    gate: AuthorizationGate,
    notifier: NotificationDispatcher,
):
    decision = await gate.authorize(db, message.from_user.id, Action.ASSIGN_LEADER)
    if not decision:
        await message.answer(texts.reason_text(decision.reason))
        return

    arg = (command.args or "").strip()
    if not arg.isdigit():
        await message.answer(texts.ASSIGN_LEADER_USAGE)
        return

    leader = users.get_user(db, int(arg))
    if leader is None:
        await message.answer(texts.reason_text("user_not_found"))
        return
    if not leader.game_id:
        await message.answer(texts.LEADER_WITHOUT_GAME_ID)
        return

    # 部屋名 = リーダー自身の game id
    result = rooms.assign_room_leader(db, leader.telegram_id, leader.game_id)
    if not result.ok:
        await message.answer(texts.reason_text(result.reason))
        return

    text = texts.leader_assigned(result.value.game_id, leader.display_name)
    await message.answer(text)
    await notifier.notify(leader.telegram_id, text)


@router.message(Command("rooms"))
async def cmd_rooms(message: Message, db: Session, gate: AuthorizationGate):
    decision = await gate.authorize(db, message.from_user.id, Action.LIST_ROOMS)
    if not decision:
        await message.answer(texts.reason_text(decision.reason))
        return

    rows = rooms.list_rooms(db)
    if not rows:
        await message.answer(texts.reason_text("no_rooms"))
        return

    await message.answer("\n".join(
        texts.room_line(room.game_id, room.leader.display_name, count)
        for room, count in rows
    ))


@router.message(Command("stats"))
async def cmd_stats(
    message: Message,
    db: Session,
    gate: AuthorizationGate,
    notifier: NotificationDispatcher,
):
    decision = await gate.authorize(db, message.from_user.id, Action.VIEW_STATS)
    if not decision:
        await message.answer(texts.reason_text(decision.reason))
        return

    s = collect_stats(db)
    await message.answer(
        texts.stats(s["users"], s["rooms"], s["requests"], notifier.delivered, notifier.failed)
    )


@router.message(Command("users"))
async def cmd_users(message: Message, db: Session, gate: AuthorizationGate):
    decision = await gate.authorize(db, message.from_user.id, Action.LIST_USERS)
    if not decision:
        await message.answer(texts.reason_text(decision.reason))
        return

    rows = users.list_users(db)
    if not rows:
        await message.answer(texts.NO_USERS)
        return

    await message.answer("\n".join(
        texts.user_line(u.display_name, u.telegram_id, u.game_id, u.role) for u in rows
    ))
