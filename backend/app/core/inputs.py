"""
Permissive input helpers shared by the controllers.

These reproduce the lenient rules existing API clients rely on: "empty"
values count as missing, amounts fall back to zero instead of failing,
pagination parameters are clamped instead of rejected.
"""

import html
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional

from backend.app.core.exceptions import MissingFieldsError

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_TAGS = re.compile(r"<[^>]*>")
CENTS = Decimal("0.01")


def is_blank(value: Any) -> bool:
    """True for None, "", "0", 0, 0.0, False and empty containers."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    if isinstance(value, (list, dict, tuple)):
        return len(value) == 0
    return False


def missing_fields(payload: Mapping[str, Any], required: Iterable[str]) -> List[str]:
    return [name for name in required if is_blank(payload.get(name))]


def require_fields(payload: Mapping[str, Any], required: Iterable[str]) -> Optional[MissingFieldsError]:
    """Error describing the blank required fields, or None when all are present."""
    missing = missing_fields(payload, required)
    return MissingFieldsError(missing) if missing else None


def parse_amount(value: Any) -> Decimal:
    """
    Parse a monetary amount, never failing.

    The longest leading numeric prefix of the value's text is used
    ("12.5abc" -> 12.50); anything without one becomes 0.00.
    """
    if value is None:
        return Decimal("0.00")
    if isinstance(value, bool):
        return Decimal(int(value)).quantize(CENTS)

    match = _LEADING_NUMBER.match(str(value))
    if match is None:
        return Decimal("0.00")
    try:
        return Decimal(match.group(0).strip()).quantize(CENTS)
    except InvalidOperation:
        return Decimal("0.00")


def sanitize_text(value: Any) -> str:
    """Trim, strip HTML tags and escape what remains."""
    text = "" if value is None else str(value)
    return html.escape(_TAGS.sub("", text.strip()), quote=True)


def parse_int(value: Any, default: int) -> int:
    if value is None:
        return default
    match = re.match(r"^\s*[+-]?\d+", str(value))
    return int(match.group(0)) if match else 0


def page_window(page_param: Any, limit_param: Any, default_limit: int, max_limit: int = 100):
    """
    Clamp pagination parameters.

    Returns:
        (page, limit, offset) with page >= 1 and 1 <= limit <= max_limit
    """
    page = max(1, parse_int(page_param, 1))
    limit = min(max_limit, max(1, parse_int(limit_param, default_limit)))
    return page, limit, (page - 1) * limit
