"""Shape checks for bearer-style API keys.

Only the format is verified here. Whether a key is actually authorised is up
to the provider that eventually receives it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

API_KEY_PREFIX = "sk-"
API_KEY_MIN_LENGTH = 20
PREVIEW_LENGTH = 10
SENSITIVE_ARGUMENTS = {"apiKey", "api_key", "password", "token"}


@dataclass
class CredentialCheck:
    """Outcome of a credential shape check."""

    success: bool
    error: Optional[str] = None
    api_key: Optional[str] = None


def validate_api_key(api_key: Any) -> CredentialCheck:
    """Check that `api_key` is a non-empty `sk-` string of at least 20 characters."""
    if not isinstance(api_key, str) or not api_key.strip():
        return CredentialCheck(success=False, error="Missing API key. Required format: sk-...")
    api_key = api_key.strip()
    if not api_key.startswith(API_KEY_PREFIX) or len(api_key) < API_KEY_MIN_LENGTH:
        return CredentialCheck(
            success=False,
            error=(
                f"Invalid OpenAI API key format. Must start with {API_KEY_PREFIX} "
                f"and be at least {API_KEY_MIN_LENGTH} characters"
            ),
        )
    return CredentialCheck(success=True, api_key=api_key)


def require_api_key(api_key: Any) -> str:
    """Return the validated key or raise ValueError describing the problem."""
    check = validate_api_key(api_key)
    if not check.success:
        raise ValueError(f"Authentication failed: {check.error}")
    return check.api_key


def key_preview(api_key: str) -> str:
    """Return a truncated form of a key that is safe to store and display."""
    return api_key[:PREVIEW_LENGTH] + "..."


def redact_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Copy tool arguments with secrets truncated and URLs stripped of query strings."""
    safe_args = dict(arguments)
    for key in SENSITIVE_ARGUMENTS & safe_args.keys():
        value = safe_args[key]
        safe_args[key] = key_preview(value) if isinstance(value, str) and value else "***"
    if isinstance(safe_args.get("url"), str):
        safe_args["url"] = safe_args["url"].split("?")[0]
    return safe_args
