"""
MCP protocol constants.
"""

SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")
DEFAULT_PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
# Dispatch failures and handler failures share this code; the message tells them apart.
SERVER_ERROR = -32000


def negotiate_protocol_version(version: str | None) -> str:
    if version and version in SUPPORTED_PROTOCOL_VERSIONS:
        return version
    return DEFAULT_PROTOCOL_VERSION
