# roombot/services/results.py
"""サービス層の戻り値。

ワークフロー操作は例外を投げず、成功/失敗と理由コードを Result で返す。
理由コード → ユーザー向け文言の変換は呼び出し側（bot / API）の責務。
"""

import enum
from dataclasses import dataclass
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    STORE = "STORE"


@dataclass(frozen=True)
class Result:
    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, reason: str) -> "Result":
        return cls(ok=False, error=error, reason=reason)


STORE_FAILURE = Result.failure(ErrorKind.STORE, "operation_failed")
