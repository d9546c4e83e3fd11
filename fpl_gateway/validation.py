"""Route parameter checks. Every failure is a 400 raised before any upstream call."""

from typing import Optional, Union

from fpl_gateway.constants import MIN_GAMEWEEK, MAX_GAMEWEEK, MAX_ID_DIGITS
from fpl_gateway.errors import ProxyError


def _parse_positive_int(value: Union[str, int, None]) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = str(value)
    if not (text.isascii() and text.isdigit()) or len(text) > MAX_ID_DIGITS:
        return None
    number = int(text)
    return number if number > 0 else None


def validate_id(value: Union[str, int, None], field_name: str = "ID") -> int:
    """Positive integer identifier (manager, league, player)."""
    number = _parse_positive_int(value)
    if number is None:
        raise ProxyError(400, f"Valid {field_name} is required")
    return number


def validate_gameweek(value: Union[str, int, None]) -> int:
    number = _parse_positive_int(value)
    if number is None or not MIN_GAMEWEEK <= number <= MAX_GAMEWEEK:
        raise ProxyError(400, f"Valid gameweek ({MIN_GAMEWEEK}-{MAX_GAMEWEEK}) is required")
    return number


def validate_page(value: Union[str, int, None]) -> int:
    """League standings page; absent means the first page."""
    if value is None:
        return 1
    return validate_id(value, "page number")
