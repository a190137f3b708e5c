from typing import Any, Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class Page(BaseModel, Generic[T]):
    """Offset-paginated list envelope used by every list endpoint."""

    items: List[T]
    pagination: Pagination


def upper_enum_value(v: Any) -> Any:
    """Let clients send ``"approved"`` for ``APPROVED``."""
    if isinstance(v, str):
        return v.strip().upper()
    return v


class SettingResponse(BaseModel):
    key: str
    value: str
    category: str

    model_config = {"from_attributes": True}
