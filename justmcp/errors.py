from __future__ import annotations

from dataclasses import dataclass
from typing import Any


RECIPE_SOURCE_ERROR = "JMCP_001"
INPUT_SCHEMA_ERROR = "JMCP_002"
RECIPE_SPAWN_ERROR = "JMCP_003"
CONFIG_ERROR = "JMCP_004"
UNKNOWN_ERROR = "JMCP_999"


@dataclass
class ErrorPayload:
    error_code: str
    error_type: str
    message: str
    details: dict[str, Any]
    recovery_hint: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "error_type": self.error_type,
            "message": self.message,
            "details": self.details,
            "recovery_hint": self.recovery_hint,
        }


class JustMCPError(Exception):
    def __init__(self, payload: ErrorPayload) -> None:
        super().__init__(payload.message)
        self.payload = payload


def make_error(
    *,
    error_code: str,
    error_type: str,
    message: str,
    details: dict[str, Any] | None = None,
    recovery_hint: str | None = None,
) -> JustMCPError:
    return JustMCPError(
        ErrorPayload(
            error_code=error_code,
            error_type=error_type,
            message=message,
            details=details or {},
            recovery_hint=recovery_hint,
        )
    )
