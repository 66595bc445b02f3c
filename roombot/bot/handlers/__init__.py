# roombot/bot/handlers/__init__.py

from aiogram import Router

from . import admin, leader, membership, profile, rooms


def build_router() -> Router:
    router = Router(name="root")
    # profile は「コマンド以外のテキスト = ID 入力」を拾うので最後に置く
    router.include_router(membership.router)
    router.include_router(admin.router)
    router.include_router(leader.router)
    router.include_router(rooms.router)
    router.include_router(profile.router)
    return router
