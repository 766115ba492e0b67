from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """{success, data?, message?, error?, count?}: the shape every service answers with."""

    success: bool
    data: T | None = None
    message: str | None = None
    error: str | None = None
    count: int | None = None


def error_envelope(message: str, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body
