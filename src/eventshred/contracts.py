"""Public result models for eventshred.api."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class TransformIssue(BaseModel):
    """A single reason a record was rejected."""
    code: str  # ErrorCode value, e.g. "CONVERSION_FAILURE", "FIELD_COUNT_MISMATCH", "MISSING_INNER_DATA"
    message: str
    key: Optional[str] = None  # Output key of the failing column (None for record-level issues)
    value: Optional[str] = None  # Raw column value that failed


class TransformResult(BaseModel):
    """Outcome of try_transform_event()."""
    ok: bool
    document: Optional[Dict[str, Any]] = None  # None whenever ok is False
    issues: List[TransformIssue] = Field(default_factory=list)  # sorted by (key, code)
