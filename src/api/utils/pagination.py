from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type
from uuid import UUID

from fastapi import Query

from src.api.error import ValidationError
from src.libs.result import Error


@dataclass
class Pagination:
    limit: int
    offset: int


def paginate(default_limit: int = 50):
    """Build a dependency reading page/limit/offset, offset wins over page"""

    def dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1, le=100),
        offset: Optional[int] = Query(None, ge=0),
    ) -> Pagination:
        if offset is None:
            offset = (page - 1) * limit
        return Pagination(limit=limit, offset=offset)

    return dependency


def _coerce(name: str, raw: str, kind: Type) -> Any:
    try:
        if kind is bool:
            lowered = raw.lower()
            if lowered not in ("true", "false", "1", "0"):
                raise ValueError(raw)
            return lowered in ("true", "1")
        if kind is UUID:
            return UUID(raw)
        if isinstance(kind, type) and issubclass(kind, Enum):
            return kind(raw)
        return raw
    except ValueError:
        raise ValidationError(Error("VALIDATION_ERROR", f"Invalid value for filter '{name}'"))


def query_filters(params: Mapping[str, str], allowed: Dict[str, Type]) -> Dict[str, Any]:
    """Typed equality filters from the query string, unknown keys ignored"""
    return {
        name: _coerce(name, params[name], kind)
        for name, kind in allowed.items()
        if params.get(name) not in (None, "")
    }
