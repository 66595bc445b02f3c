# roombot/bot/keyboards.py

from typing import Iterable, Sequence, Tuple

from aiogram.filters.callback_data import CallbackData
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from .. import texts

# 固定ボタンの callback_data
CHECK_GAME_ID = "CHECK_GAME_ID"
EDIT_GAME_ID = "EDIT_GAME_ID"
HELP = "HELP"
PICK_ROOM = "PICK_ROOM"


class JoinRoomCallback(CallbackData, prefix="join"):
    room_id: int


class RequestCallback(CallbackData, prefix="req"):
    """リーダー操作: approve / reject / remove"""
    action: str
    request_id: int


class GroupRequestCallback(CallbackData, prefix="greq"):
    """グループ管理者操作（現状 reject のみ）"""
    action: str
    request_id: int


def build_markup(rows: Iterable[Sequence[Tuple[str, str]]]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=label, callback_data=data) for label, data in row]
            for row in rows
        ]
    )


def check_id_menu() -> InlineKeyboardMarkup:
    return build_markup([[(texts.BTN_CHECK_ID, CHECK_GAME_ID)]])


def edit_id_menu() -> InlineKeyboardMarkup:
    return build_markup([[(texts.BTN_EDIT_ID, EDIT_GAME_ID)]])


def saved_id_menu() -> InlineKeyboardMarkup:
    return build_markup([
        [(texts.BTN_CHECK_ID, CHECK_GAME_ID), (texts.BTN_EDIT_ID, EDIT_GAME_ID)],
        [(texts.BTN_PICK_ROOM, PICK_ROOM)],
    ])


def main_menu() -> InlineKeyboardMarkup:
    return build_markup([
        [(texts.BTN_CHECK_ID, CHECK_GAME_ID)],
        [(texts.BTN_EDIT_ID, EDIT_GAME_ID)],
        [(texts.BTN_PICK_ROOM, PICK_ROOM)],
        [(texts.BTN_HELP, HELP)],
    ])


def rooms_menu(rooms) -> InlineKeyboardMarkup:
    """rooms: [(Room, approved_count), ...]"""
    return build_markup([
        [(texts.room_button(room.game_id, count), JoinRoomCallback(room_id=room.id).pack())]
        for room, count in rooms
    ])


def review_actions(request_id: int):
    """リーダーに送る承認/却下ボタン（transport にそのまま渡せる形）"""
    return [[
        (texts.BTN_APPROVE, RequestCallback(action="approve", request_id=request_id).pack()),
        (texts.BTN_REJECT, RequestCallback(action="reject", request_id=request_id).pack()),
    ]]


def remove_actions(request_id: int):
    return [[
        (texts.BTN_REMOVE, RequestCallback(action="remove", request_id=request_id).pack()),
    ]]


def group_reject_actions(request_id: int):
    return [[
        (texts.BTN_REJECT, GroupRequestCallback(action="reject", request_id=request_id).pack()),
    ]]
