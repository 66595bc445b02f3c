# roombot/bot/main.py
"""Bot のエントリポイント: `roombot-bot` または `python -m roombot.bot.main`"""

import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher

from ..config import Settings, get_settings
from ..db import SessionLocal, init_db
from ..services.authz import AuthorizationGate
from ..services.notifications import NotificationDispatcher
from .handlers import build_router
from .middlewares import DbSessionMiddleware
from .transport import AiogramTransport

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def build_dispatcher(settings: Settings, bot: Bot) -> Dispatcher:
    transport = AiogramTransport(bot)
    dp = Dispatcher(
        settings=settings,
        gate=AuthorizationGate(settings, transport),
        notifier=NotificationDispatcher(settings, transport),
    )
    dp.update.middleware(DbSessionMiddleware(SessionLocal))
    dp.include_router(build_router())
    return dp


async def main() -> None:
    settings = get_settings()
    setup_logging(settings)

    if not settings.bot_token:
        logger.error("BOT_TOKEN is not set")
        raise SystemExit(1)
    if settings.creator_id is None:
        logger.warning("CREATOR_ID is not set: creator commands are disabled")
    if not settings.group_configured:
        logger.warning("GROUP_CHAT_ID is not set: invite links and group admin actions are disabled")

    init_db()

    bot = Bot(token=settings.bot_token)
    dp = build_dispatcher(settings, bot)

    logger.info("Bot started")
    try:
        await dp.start_polling(
            bot,
            allowed_updates=["message", "callback_query", "chat_member"],
        )
    finally:
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
