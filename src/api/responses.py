from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint"""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


def ok(data=None, message: Optional[str] = None) -> dict:
    return {"success": True, "data": data, "message": message}


def error_body(code: str, message: str, status_code: int) -> dict:
    return {
        "success": False,
        "error": {"code": code, "message": message},
        "statusCode": status_code,
    }
