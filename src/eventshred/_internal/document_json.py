"""JSON serialization of output documents for downstream indexing.

Rules:
- UTF-8 (ensure_ascii=False)
- Sorted keys
- Compact separators (",", ":")
- Timestamps as ISO 8601 UTC with millisecond precision and a "Z" suffix
- NaN and infinities, which JSON cannot represent, become null
"""

import json
import math
from datetime import datetime, timezone
from typing import Any, Mapping

from eventshred.kernel.values import FieldValue, ValueKind


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def _encode_json(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _encode_json(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_encode_json(item) for item in value]
    return value


def _encode_value(value: Any) -> Any:
    if isinstance(value, FieldValue):
        if value.kind is ValueKind.TIMESTAMP:
            return format_timestamp(value.value)
        return _encode_json(value.value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    return _encode_json(value)


def document_dumps(document: Mapping[str, Any]) -> str:
    """
    Serialize a plain or typed output document to a JSON string.

    Args:
        document: Mapping of output key to plain value or FieldValue

    Returns:
        Strict JSON string with sorted keys
    """
    return json.dumps(
        {key: _encode_value(value) for key, value in document.items()},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
