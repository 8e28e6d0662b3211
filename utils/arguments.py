"""Validation and coercion helpers for tool arguments.

Handlers call these before touching any session so that a bad request never
leaves a partial write behind. Every failure is a ValueError with a message
naming the offending argument.
"""

from typing import Any, Dict, Optional, Sequence
from urllib.parse import urlparse

from models.session_models import DEFAULT_SESSION_ID

_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no"}


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_str(arguments: Dict[str, Any], key: str, message: Optional[str] = None) -> str:
    """Return a non-empty string argument."""
    value = arguments.get(key)
    if _missing(value):
        raise ValueError(message or f"{key} is required")
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def optional_str(arguments: Dict[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
    value = arguments.get(key)
    if _missing(value):
        return default
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{key} must be a boolean")


def require_bool(arguments: Dict[str, Any], key: str) -> bool:
    value = arguments.get(key)
    if value is None:
        raise ValueError(f"{key} is required")
    return _to_bool(key, value)


def optional_bool(arguments: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = arguments.get(key)
    if value is None:
        return default
    return _to_bool(key, value)


def _to_int(key: str, value: Any, minimum: Optional[int]) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer")
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
        result = int(value.strip())
    else:
        raise ValueError(f"{key} must be an integer")
    if minimum is not None and result < minimum:
        raise ValueError(f"{key} must be at least {minimum}")
    return result


def require_int(arguments: Dict[str, Any], key: str, minimum: Optional[int] = None) -> int:
    value = arguments.get(key)
    if value is None:
        raise ValueError(f"{key} is required")
    return _to_int(key, value, minimum)


def optional_int(
    arguments: Dict[str, Any],
    key: str,
    default: Optional[int] = None,
    minimum: Optional[int] = None,
) -> Optional[int]:
    value = arguments.get(key)
    if value is None:
        return default
    return _to_int(key, value, minimum)


def optional_number(arguments: Dict[str, Any], key: str, default: float) -> float:
    """Return a non-negative number, such as a timeout in milliseconds."""
    value = arguments.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number") from exc
    if number < 0:
        raise ValueError(f"{key} must not be negative")
    return number


def optional_choice(arguments: Dict[str, Any], key: str, choices: Sequence[str], default: str) -> str:
    value = optional_str(arguments, key, default) or default
    if value not in choices:
        raise ValueError(f"{key} must be one of: {', '.join(choices)}")
    return value


def session_id_from(arguments: Dict[str, Any]) -> str:
    """Return the `sessionId` argument, defaulting to the shared default session."""
    return optional_str(arguments, "sessionId", DEFAULT_SESSION_ID) or DEFAULT_SESSION_ID


def check_url(url: str) -> str:
    """Return `url` when it has a scheme and a host (or is an `about:` page)."""
    parsed = urlparse(url.strip())
    if parsed.scheme == "about" and parsed.path:
        return url.strip()
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("Invalid URL format provided")
    return url.strip()
