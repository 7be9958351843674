from __future__ import annotations

from ..core.enums import ValidationErrorKind
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, f"{field_name} is required")
    return str(value).strip()


def require_month(month: int, year: int) -> tuple[int, int]:
    month, year = int(month), int(year)
    if not 1 <= month <= 12:
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, f"Invalid month: {month}")
    if year < 1:
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, f"Invalid year: {year}")
    return month, year
