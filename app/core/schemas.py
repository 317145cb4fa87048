from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire (both accepted on input)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Envelope(CamelModel, Generic[T]):
    """Standard success response: {"success": true, "data": ..., "message"?: ...}."""

    success: bool = True
    data: T
    message: Optional[str] = None


class Page(CamelModel, Generic[T]):
    """Paginated list response."""

    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    data: List[T]


class DeletedResponse(CamelModel):
    success: bool = True
    data: Dict[str, Any] = {}
    message: str


def page_count(total: int, limit: int) -> int:
    """ceil(total / limit) without floats."""
    return -(-total // limit) if limit else 0


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim optional free text; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_text(value: Optional[str], label: str) -> str:
    """Trim a mandatory text field, rejecting None/blank with '<label> is required'."""
    if value is None or not value.strip():
        raise ValueError(f"{label} is required")
    return value.strip()
