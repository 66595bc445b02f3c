# roombot/config.py
"""設定値の読み込み。

.env / 環境変数から一度だけ読み込み、変更不可の Settings として各コンポーネントに渡す。
"""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./roombot.db"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    bot_token: str = ""
    creator_id: Optional[int] = None
    # 招待リンク・グループ管理者判定に使うチャット（未設定なら該当機能は無効）
    group_chat_id: Optional[int] = None
    database_url: str = DEFAULT_DATABASE_URL
    static_dir: str = "frontend"
    invite_link_ttl_hours: int = 24
    log_level: str = "INFO"

    @property
    def group_configured(self) -> bool:
        return self.group_chat_id is not None


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return int(raw)


def load_settings() -> Settings:
    """環境変数から Settings を組み立てる"""
    return Settings(
        bot_token=os.getenv("BOT_TOKEN", ""),
        creator_id=_optional_int("CREATOR_ID"),
        group_chat_id=_optional_int("GROUP_CHAT_ID"),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        static_dir=os.getenv("STATIC_DIR", "frontend"),
        invite_link_ttl_hours=int(os.getenv("INVITE_LINK_TTL_HOURS", "24")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
