"""Error code constants for eventshred.

These constants prevent stringly-typed error codes and give callers a
stable value to branch on when a record is rejected.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes attached to every eventshred exception."""

    # Schema naming
    MALFORMED_SCHEMA_URI = "MALFORMED_SCHEMA_URI"

    # JSON shredding
    INVALID_CONTEXTS_JSON = "INVALID_CONTEXTS_JSON"
    INVALID_UNSTRUCT_JSON = "INVALID_UNSTRUCT_JSON"
    MISSING_INNER_DATA = "MISSING_INNER_DATA"

    # Record transform
    CONVERSION_FAILURE = "CONVERSION_FAILURE"
    FIELD_COUNT_MISMATCH = "FIELD_COUNT_MISMATCH"
    AGGREGATE_CONVERSION_ERROR = "AGGREGATE_CONVERSION_ERROR"

    # Configuration
    UNKNOWN_CONVERTER = "UNKNOWN_CONVERTER"
    INVALID_FIELD_TABLE = "INVALID_FIELD_TABLE"
