from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

from ..core.enums import ShiftType
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} không hợp lệ", details={"field": field_name})
    if parsed <= 0:
        raise ValidationError(f"{field_name} không hợp lệ", details={"field": field_name})
    return parsed


def require_date(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError(f"Thiếu {field_name}", details={"field": field_name})
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} không hợp lệ (YYYY-MM-DD)", details={"field": field_name})


def require_shift(value: Any, field_name: str = "shift") -> ShiftType:
    if isinstance(value, ShiftType):
        return value
    try:
        return ShiftType(value)
    except ValueError:
        raise ValidationError(f"Ca làm việc không hợp lệ: {value!r}", details={"field": field_name})


def require_non_empty_list(values: Optional[Iterable[Any]], field_name: str) -> list[Any]:
    if values is not None and not isinstance(values, (list, tuple, set, frozenset)):
        raise ValidationError(f"{field_name} phải là danh sách", details={"field": field_name})
    items = list(values or [])
    if not items:
        raise ValidationError(f"{field_name} không được để trống", details={"field": field_name})
    return items


def optional_note(value: Any, field_name: str = "note") -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} phải là chuỗi", details={"field": field_name})
    return value.strip() or None
