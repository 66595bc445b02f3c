from .user import User, UserRole
from .room import Room, ROOM_CAPACITY
from .join_request import JoinRequest, RequestStatus

__all__ = [
    "User",
    "UserRole",
    "Room",
    "ROOM_CAPACITY",
    "JoinRequest",
    "RequestStatus",
]
