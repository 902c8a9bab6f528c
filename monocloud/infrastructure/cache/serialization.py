"""JSON encode/decode for cached values.

Redis transports strings only, so every value crosses the tier boundary
as JSON text. Encoding never raises: a value JSON cannot represent is
stored as its str() form (itself JSON-encoded, so it still decodes).
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


class CacheDecodeError(ValueError):
    """Stored text is not valid JSON (poisoned or foreign entry)."""


def encode_value(value: Any) -> str:
    """Serialize value to JSON text, degrading to a JSON string of str(value)."""
    try:
        return json.dumps(value, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        logger.warning("Cache value of type %s is not JSON-serializable (%s); storing str()", type(value).__name__, e)
        return json.dumps(str(value))


def decode_value(raw: str | bytes) -> Any:
    """Parse JSON text produced by encode_value.

    Raises:
        CacheDecodeError: If raw is not valid JSON.
    """
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CacheDecodeError(f"Malformed cached value: {e}") from e
