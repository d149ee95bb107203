"""Record transformer: one enriched-event TSV line to one typed document.

The transform is a single pass over the field table in lock-step with the
split record. Empty columns are skipped. Every conversion failure is
collected and reported together; a partially built document is never
returned alongside an error.
"""

from typing import Any, Dict, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict

from eventshred.errors import AggregateConversionError, ConversionFailure, EventShredError, FieldCountMismatch
from .fields import (
    ENRICHED_EVENT_FIELDS,
    LATITUDE_INDEX,
    LONGITUDE_INDEX,
    FieldDefinition,
    FieldDefinitionLike,
    FieldTable,
    coerce_field_definitions,
)
from .values import FieldValue


GEO_LOCATION_KEY = "geo_location"
FIELD_SEPARATOR = "\t"

TypedDocument = Dict[str, FieldValue]


def split_record(line: str) -> List[str]:
    return line.split(FIELD_SEPARATOR)


def geo_location(values: List[str]) -> str | None:
    """Return "<lat>,<lon>" when both fixed-position columns are non-empty.

    The raw strings are joined as-is, never reformatted as numbers.
    """
    if len(values) <= max(LATITUDE_INDEX, LONGITUDE_INDEX):
        return None
    latitude = values[LATITUDE_INDEX]
    longitude = values[LONGITUDE_INDEX]
    if latitude == "" or longitude == "":
        return None
    return f"{latitude},{longitude}"


def transform_values(
    values: List[str],
    fields: Tuple[FieldDefinition, ...],
    add_geolocation_data: bool,
) -> TypedDocument:
    """Convert an already split record.

    Raises:
        FieldCountMismatch: If len(values) != len(fields); nothing is converted
        AggregateConversionError: If one or more fields failed to convert
    """
    if len(values) != len(fields):
        raise FieldCountMismatch(expected=len(fields), received=len(values))

    out: TypedDocument = {}
    failures: List[ConversionFailure] = []

    if add_geolocation_data:
        location = geo_location(values)
        if location is not None:
            out[GEO_LOCATION_KEY] = FieldValue.string(location)

    for definition, raw in zip(fields, values):
        if raw == "":
            continue
        try:
            pairs = definition.converter.convert(definition.key, raw)
        except ConversionFailure as e:
            failures.append(e)
            continue
        except EventShredError as e:
            failures.append(ConversionFailure(definition.key, raw, e))
            continue
        for key, value in pairs:
            out[key] = value

    if failures:
        raise AggregateConversionError(failures)
    return out


def unwrap_document(document: TypedDocument) -> Dict[str, Any]:
    """Drop value kinds, keeping the plain Python values."""
    return {key: value.value for key, value in document.items()}


def transform_typed(
    line: str,
    fields: Iterable[FieldDefinitionLike] = ENRICHED_EVENT_FIELDS,
    add_geolocation_data: bool = False,
) -> TypedDocument:
    """Transform one TSV line into a document of FieldValue entries."""
    return transform_values(split_record(line), coerce_field_definitions(fields), add_geolocation_data)


def transform(
    line: str,
    fields: Iterable[FieldDefinitionLike] = ENRICHED_EVENT_FIELDS,
    add_geolocation_data: bool = False,
) -> Dict[str, Any]:
    """Transform one TSV line into a plain key/value document.

    Args:
        line: One enriched-event record, tab separated, without line terminator
        fields: Ordered field definitions or (key, converter) pairs
        add_geolocation_data: Synthesize geo_location from latitude/longitude

    Returns:
        Mapping of output key to str, int, float, bool, datetime or JSON value

    Raises:
        FieldCountMismatch: If the record width differs from the table
        AggregateConversionError: If any field failed to convert
        UnknownConverter: If a (key, converter) pair names no converter
    """
    return unwrap_document(transform_typed(line, fields, add_geolocation_data))


class EventTransformer(BaseModel):
    """Frozen transform configuration, safe to share between threads."""
    fields: Tuple[FieldDefinition, ...] = ENRICHED_EVENT_FIELDS
    add_geolocation_data: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data):
        # resolve pairs here so UnknownConverter is not wrapped in a ValidationError
        if isinstance(data.get("fields"), (list, tuple, FieldTable)):
            data["fields"] = coerce_field_definitions(data["fields"])
        super().__init__(**data)

    def transform_typed(self, line: str) -> TypedDocument:
        return transform_values(split_record(line), self.fields, self.add_geolocation_data)

    def transform(self, line: str) -> Dict[str, Any]:
        return unwrap_document(self.transform_typed(line))
