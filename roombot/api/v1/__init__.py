# roombot/api/v1/__init__.py

from fastapi import APIRouter

from . import rooms

api_router = APIRouter()

# ユーザー情報・統計は creator 専用なので HTTP には出さない（bot の /users, /stats のみ）
api_router.include_router(rooms.router)  # /rooms


@api_router.get("/health")
def health():
    return {"message": "roombot is running"}
