"""eventshred: Snowplow enriched-event TSV to typed, index-ready documents."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("eventshred")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from eventshred.api import transform_event, try_transform_event
from eventshred.codes import ErrorCode
from eventshred.contracts import TransformIssue, TransformResult
from eventshred.errors import (
    AggregateConversionError,
    ConversionFailure,
    EventShredError,
    FieldCountMismatch,
    InvalidContextsJSON,
    InvalidFieldTable,
    InvalidUnstructJSON,
    MalformedSchemaURI,
    MissingInnerData,
    UnknownConverter,
)
from eventshred.kernel.converters import Converter
from eventshred.kernel.fields import ENRICHED_EVENT_FIELDS, FieldDefinition, FieldTable
from eventshred.kernel.transformer import EventTransformer

__all__ = [
    "__version__",
    "transform_event",
    "try_transform_event",
    "TransformIssue",
    "TransformResult",
    "ErrorCode",
    "Converter",
    "ENRICHED_EVENT_FIELDS",
    "FieldDefinition",
    "FieldTable",
    "EventTransformer",
    "EventShredError",
    "MalformedSchemaURI",
    "InvalidContextsJSON",
    "InvalidUnstructJSON",
    "MissingInnerData",
    "ConversionFailure",
    "FieldCountMismatch",
    "AggregateConversionError",
    "UnknownConverter",
    "InvalidFieldTable",
]
