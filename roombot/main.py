# roombot/main.py
# 静的ファイル配信 + 閲覧用 API（uvicorn roombot.main:app）

import logging
import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import get_settings
from .db import init_db
from .api.v1 import api_router as api_v1_router

logger = logging.getLogger(__name__)

settings = get_settings()

# モデルからテーブル作成
init_db()

app = FastAPI(
    title="roombot",
    version=__version__,
)

# API ルーター
app.include_router(api_v1_router, prefix="/api")

# Web App の build を / で公開（/api より後に mount する）
if os.path.isdir(settings.static_dir):
    app.mount(
        "/",
        StaticFiles(directory=settings.static_dir, html=True),
        name="static",
    )
else:
    logger.warning("Static directory %s not found, static files are not served", settings.static_dir)
