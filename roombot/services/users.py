# roombot/services/users.py
"""User Directory: プロフィールの作成・更新と game id の保存"""

import logging
import re
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings
from ..models.user import User, UserRole
from .results import ErrorKind, Result, STORE_FAILURE

logger = logging.getLogger(__name__)

GAME_ID_PATTERN = re.compile(r"^\d+$")


def is_valid_game_id(text: Optional[str]) -> bool:
    return bool(text) and GAME_ID_PATTERN.match(text) is not None


def get_user(db: Session, telegram_id: int) -> Optional[User]:
    return db.get(User, telegram_id)


def enforce_creator_role(db: Session, settings: Settings, user: User) -> bool:
    """
    CREATOR は設定された creator_id のユーザーただ一人。
    - 設定 id のユーザーはロールを CREATOR に修復
    - それ以外で CREATOR のまま残っているユーザー（設定変更前の古い値）は USER に戻す
    creator_id 未設定なら何もしない。変更があれば True。commit は呼び出し側。
    """
    if settings.creator_id is None:
        return False

    changed = False
    if user.telegram_id == settings.creator_id:
        if user.role != UserRole.CREATOR.value:
            user.role = UserRole.CREATOR.value
            changed = True
    elif user.role == UserRole.CREATOR.value:
        user.role = UserRole.USER.value
        changed = True

    if changed:
        logger.info("Role of %s repaired to %s", user.telegram_id, user.role)
    return changed


def touch_profile(
    db: Session,
    settings: Settings,
    telegram_id: int,
    username: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> Result:
    """初回なら作成、既存なら表示名を更新する。毎回 CREATOR ロールを再チェック。"""
    try:
        user = db.get(User, telegram_id)
        if user is None:
            user = User(
                telegram_id=telegram_id,
                username=username,
                first_name=first_name,
                last_name=last_name,
                role=UserRole.USER.value,
                is_in_chat=False,
            )
            db.add(user)
            logger.info("User created: %s", telegram_id)
        else:
            user.username = username
            user.first_name = first_name
            user.last_name = last_name

        enforce_creator_role(db, settings, user)
        db.commit()
        db.refresh(user)
        return Result.success(user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("touch_profile failed for %s", telegram_id)
        return STORE_FAILURE


def save_game_id(db: Session, telegram_id: int, game_id: str) -> Result:
    game_id = (game_id or "").strip()
    if not is_valid_game_id(game_id):
        return Result.failure(ErrorKind.VALIDATION, "invalid_game_id")

    try:
        user = db.get(User, telegram_id)
        if user is None:
            return Result.failure(ErrorKind.NOT_FOUND, "user_not_found")

        user.game_id = game_id
        db.commit()
        db.refresh(user)
        logger.info("Game ID saved: %s for %s", game_id, telegram_id)
        return Result.success(user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("save_game_id failed for %s", telegram_id)
        return STORE_FAILURE


def set_in_chat(db: Session, telegram_id: int, in_chat: bool) -> Result:
    try:
        user = db.get(User, telegram_id)
        if user is None:
            return Result.failure(ErrorKind.NOT_FOUND, "user_not_found")

        user.is_in_chat = in_chat
        db.commit()
        db.refresh(user)
        return Result.success(user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("set_in_chat failed for %s", telegram_id)
        return STORE_FAILURE


def list_users(db: Session, limit: int = 50) -> List[User]:
    return (
        db.query(User)
        .order_by(User.created_at.desc(), User.telegram_id.desc())
        .limit(limit)
        .all()
    )
