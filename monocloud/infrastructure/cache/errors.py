"""Classification of persistent-tier failures.

Maps redis-py exception types to a closed set of failure kinds. Message
matching is only a fallback for errors the client does not map to a
dedicated exception type (e.g. proxies or managed services returning
their own error strings).
"""

from __future__ import annotations

from enum import Enum

from redis.exceptions import (
    AuthenticationError,
    ConnectionError as RedisConnectionError,
    NoPermissionError,
    ReadOnlyError,
    RedisError,
    TimeoutError as RedisTimeoutError,
)

# Everything a persistent-tier call may raise; builtin TimeoutError (raised by
# asyncio.wait_for) is an OSError subclass.
PERSISTENT_ERRORS: tuple[type[BaseException], ...] = (RedisError, OSError)

_PERMISSION_MARKERS = (
    "NOPERM",
    "READONLY",
    "NOAUTH",
    "WRONGPASS",
    "PERMISSION",
    "NOT ALLOWED",
    "UNAUTHORIZED",
    "FORBIDDEN",
)
_CONNECTIVITY_MARKERS = (
    "TIMEOUT",
    "TIMED OUT",
    "CONNECTION",
    "ECONNREFUSED",
    "ECONNRESET",
    "NETWORK",
    "UNREACHABLE",
)


class FailureKind(str, Enum):
    """Why a persistent-tier call failed."""

    PERMISSION = "permission"
    CONNECTIVITY = "connectivity"
    UNKNOWN = "unknown"


def classify_error(exc: BaseException) -> FailureKind:
    """Return the failure kind for an exception raised by a persistent-tier call."""
    # Permission types first: AuthenticationError subclasses ConnectionError.
    if isinstance(exc, (NoPermissionError, ReadOnlyError, AuthenticationError)):
        return FailureKind.PERMISSION
    if isinstance(exc, (RedisConnectionError, RedisTimeoutError, TimeoutError, OSError)):
        return FailureKind.CONNECTIVITY
    return _classify_message(str(exc))


def _classify_message(message: str) -> FailureKind:
    text = message.upper()
    if any(marker in text for marker in _PERMISSION_MARKERS):
        return FailureKind.PERMISSION
    if any(marker in text for marker in _CONNECTIVITY_MARKERS):
        return FailureKind.CONNECTIVITY
    return FailureKind.UNKNOWN


def is_read_only_error(exc: BaseException) -> bool:
    """True when the store rejected a write because it is a read-only replica."""
    return isinstance(exc, ReadOnlyError) or "READONLY" in str(exc).upper()
