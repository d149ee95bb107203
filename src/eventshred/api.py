"""Public API for eventshred.

High-level entry points over the pure kernel. This layer owns logging and
line-terminator handling; the kernel itself is side-effect free.
"""

from typing import Any, Dict, Iterable, List, Optional

import structlog

from eventshred.contracts import TransformIssue, TransformResult
from eventshred.errors import AggregateConversionError, EventShredError, UnknownConverter
from eventshred.kernel.fields import ENRICHED_EVENT_FIELDS, FieldDefinitionLike
from eventshred.kernel.transformer import transform

logger = structlog.get_logger(__name__)


def _strip_line_terminator(line: str) -> str:
    """Remove one trailing "\\n" or "\\r\\n", nothing else."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def transform_event(
    line: str,
    *,
    fields: Optional[Iterable[FieldDefinitionLike]] = None,
    add_geolocation_data: bool = False,
) -> Dict[str, Any]:
    """Transform one enriched-event TSV line into a document.

    Args:
        line: Enriched-event record; a single trailing line terminator is ignored
        fields: Field definitions (defaults to ENRICHED_EVENT_FIELDS)
        add_geolocation_data: Add geo_location from latitude/longitude columns

    Returns:
        Plain key/value document

    Raises:
        FieldCountMismatch: If the record width differs from the field table
        AggregateConversionError: If any field failed to convert
    """
    table = ENRICHED_EVENT_FIELDS if fields is None else fields
    try:
        document = transform(_strip_line_terminator(line), table, add_geolocation_data)
    except EventShredError as e:
        logger.warning(
            "event_transform_rejected",
            code=e.code.value,
            failures=len(e.failures) if isinstance(e, AggregateConversionError) else 1,
        )
        raise
    logger.debug("event_transformed", keys=len(document))
    return document


def _issues_from_error(error: EventShredError) -> List[TransformIssue]:
    if isinstance(error, AggregateConversionError):
        issues = [
            TransformIssue(
                code=failure.cause_code.value,
                message=str(failure),
                key=failure.key,
                value=failure.value,
            )
            for failure in error.failures
        ]
        return sorted(issues, key=lambda i: (i.key or "", i.code))
    return [TransformIssue(code=error.code.value, message=str(error))]


def try_transform_event(
    line: str,
    *,
    fields: Optional[Iterable[FieldDefinitionLike]] = None,
    add_geolocation_data: bool = False,
) -> TransformResult:
    """Like transform_event(), but reports record errors instead of raising.

    Configuration errors (an unknown converter in fields) still raise.
    """
    try:
        document = transform_event(line, fields=fields, add_geolocation_data=add_geolocation_data)
    except UnknownConverter:
        raise
    except EventShredError as e:
        return TransformResult(ok=False, issues=_issues_from_error(e))
    return TransformResult(ok=True, document=document)
