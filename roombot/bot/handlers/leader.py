# roombot/bot/handlers/leader.py
# リーダー操作：申請一覧・承認・却下・メンバー除外

import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from sqlalchemy.orm import Session

from ... import texts
from ...models.join_request import RequestStatus
from ...services import ledger
from ...services.authz import Action, AuthorizationGate
from ...services.notifications import NotificationDispatcher
from .. import keyboards

logger = logging.getLogger(__name__)

router = Router(name="leader")
router.message.filter(F.chat.type == "private")


@router.message(Command("requests"))
async def cmd_requests(message: Message, db: Session, gate: AuthorizationGate):
    decision = await gate.authorize(db, message.from_user.id, Action.VIEW_OWN_REQUESTS)
    if not decision:
        await message.answer(texts.reason_text(decision.reason))
        return

    pending = ledger.pending_for_leader(db, message.from_user.id)
    if not pending:
        await message.answer(texts.NO_PENDING)
        return

    for req in pending:
        await message.answer(
            texts.request_line(req.user.display_name, req.user.game_id, req.room.game_id),
            reply_markup=keyboards.build_markup(keyboards.review_actions(req.id)),
        )


@router.message(Command("members"))
async def cmd_members(message: Message, db: Session, gate: AuthorizationGate):
    decision = await gate.authorize(db, message.from_user.id, Action.VIEW_OWN_REQUESTS)
    if not decision:
        await message.answer(texts.reason_text(decision.reason))
        return

    approved = ledger.approved_for_leader(db, message.from_user.id)
    if not approved:
        await message.answer(texts.NO_MEMBERS)
        return

    for req in approved:
        await message.answer(
            texts.request_line(req.user.display_name, req.user.game_id, req.room.game_id),
            reply_markup=keyboards.build_markup(keyboards.remove_actions(req.id)),
        )


async def drop_buttons(callback: CallbackQuery) -> None:
    try:
        await callback.message.edit_reply_markup(reply_markup=None)
    except TelegramBadRequest:
        # 既に消えている / 古すぎて編集できないメッセージ
        logger.debug("Could not clear buttons for callback %s", callback.id)


@router.callback_query(keyboards.RequestCallback.filter())
async def on_request_action(
    callback: CallbackQuery,
    callback_data: keyboards.RequestCallback,
    db: Session,
    gate: AuthorizationGate,
    notifier: NotificationDispatcher,
):
    actor_id = callback.from_user.id
    req = ledger.get_request(db, callback_data.request_id)
    if req is None:
        await callback.answer(texts.reason_text("request_not_found"), show_alert=True)
        return

    action = Action.REMOVE_MEMBER if callback_data.action == "remove" else Action.REVIEW_REQUEST
    decision = await gate.authorize(db, actor_id, action, room=req.room)
    if not decision:
        await callback.answer(texts.reason_text(decision.reason), show_alert=True)
        return

    if callback_data.action == "approve":
        result = ledger.approve_request(db, req.id, actor_id)
    elif callback_data.action == "reject":
        result = ledger.reject_request(db, req.id, actor_id)
    elif callback_data.action == "remove":
        result = ledger.remove_member(db, req.id, actor_id)
    else:
        await callback.answer()
        return

    if not result.ok:
        await callback.answer(texts.reason_text(result.reason), show_alert=True)
        return

    updated = result.value
    await drop_buttons(callback)

    if callback_data.action == "remove":
        await callback.answer(texts.member_removed())
        await notifier.member_removed(updated)
    elif updated.status == RequestStatus.APPROVED.value:
        await callback.answer(texts.review_done(updated.status))
        await notifier.request_approved(updated)
    else:
        await callback.answer(texts.review_done(updated.status))
        await notifier.request_rejected(updated)
