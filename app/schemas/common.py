from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class Page(BaseModel, Generic[T]):
    limit: int
    offset: int
    total: int
    rows: list[T]


def ok(data, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    return body
