"""
Request parsing helpers. Malformed input raises ValidationError.
"""
from datetime import date
from typing import Any, Dict, Optional
from flask import request

from services.exceptions import ValidationError


def get_json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('No JSON data provided')
    return data


def to_int(value: Any, name: str) -> Optional[int]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def to_float(value: Any, name: str) -> Optional[float]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")


def to_date(value: Any, name: str) -> Optional[date]:
    """Parse an ISO date (YYYY-MM-DD)."""
    if value is None or value == '':
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD)")


def require(data: Dict[str, Any], name: str) -> Any:
    value = data.get(name)
    if value is None or value == '':
        raise ValidationError(f"{name} is required")
    return value


def int_arg(name: str, default: Optional[int] = None) -> Optional[int]:
    value = to_int(request.args.get(name), name)
    return default if value is None else value


TRUE_STRINGS = ('true', '1', 'yes')
FALSE_STRINGS = ('false', '0', 'no')


def to_bool(value: Any, name: str, default: bool) -> bool:
    """Accept JSON booleans and the usual string spellings of them."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    raise ValidationError(f"{name} must be true or false")
