"""Exception taxonomy for eventshred.

Every exception derives from EventShredError (a ValueError) and carries a
stable ErrorCode. Shredder errors are raised by a single converter call;
the record transformer wraps them into ConversionFailure entries and raises
one AggregateConversionError once every field has been processed.
"""

from typing import Sequence, Tuple

from eventshred.codes import ErrorCode


class EventShredError(ValueError):
    """Base class for all eventshred errors."""
    code: ErrorCode


class MalformedSchemaURI(EventShredError):
    """Raised when a schema URI does not match the iglu grammar."""
    code = ErrorCode.MALFORMED_SCHEMA_URI

    def __init__(self, uri: str, pattern: str):
        self.uri = uri
        self.pattern = pattern
        super().__init__(f"Schema {uri} does not conform to regular expression {pattern}")


class InvalidContextsJSON(EventShredError):
    """Raised when a contexts field is not a well-formed context envelope."""
    code = ErrorCode.INVALID_CONTEXTS_JSON


class InvalidUnstructJSON(EventShredError):
    """Raised when an unstruct_event field is not a well-formed envelope."""
    code = ErrorCode.INVALID_UNSTRUCT_JSON


class MissingInnerData(EventShredError):
    """Raised when an unstructured event has no inner data (absent or null)."""
    code = ErrorCode.MISSING_INNER_DATA

    def __init__(self, message: str = "could not extract inner data field from unstructured event"):
        super().__init__(message)


class ConversionFailure(EventShredError):
    """A single field that could not be converted.

    Scalar converters raise it directly; the record transformer also wraps
    shredder errors in it so every failure carries the field key and raw value.
    """
    code = ErrorCode.CONVERSION_FAILURE

    def __init__(self, key: str, value: str, cause: object):
        self.key = key
        self.value = value
        self.cause = cause
        super().__init__(
            f"unexpected exception parsing field with key {key} and value {value}: {cause}"
        )

    @property
    def cause_code(self) -> ErrorCode:
        """Code of the underlying error (CONVERSION_FAILURE for scalar parse errors)."""
        if isinstance(self.cause, EventShredError):
            return self.cause.code
        return self.code


class FieldCountMismatch(EventShredError):
    """Raised before any conversion when the record width is wrong."""
    code = ErrorCode.FIELD_COUNT_MISMATCH

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(f"expected {expected} fields, received {received} fields")


class AggregateConversionError(EventShredError):
    """All field conversion failures of one record."""
    code = ErrorCode.AGGREGATE_CONVERSION_ERROR

    def __init__(self, failures: Sequence[ConversionFailure]):
        self.failures: Tuple[ConversionFailure, ...] = tuple(failures)
        super().__init__(", ".join(str(f) for f in self.failures))


class UnknownConverter(EventShredError):
    """Raised when a field definition names a converter that does not exist."""
    code = ErrorCode.UNKNOWN_CONVERTER

    def __init__(self, identifier: str, known: Sequence[str]):
        self.identifier = identifier
        super().__init__(
            f"Unknown converter '{identifier}'. Known converters: {sorted(known)}"
        )


class InvalidFieldTable(EventShredError):
    """Raised when a field-definition table cannot be loaded."""
    code = ErrorCode.INVALID_FIELD_TABLE
