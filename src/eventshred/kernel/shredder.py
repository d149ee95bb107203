"""Shred self-describing JSON columns into canonically named fields.

Contexts group every payload under the canonical name of its schema;
unstructured events yield exactly one (name, payload) pair. Neither entry
point checks a payload against its declared schema.

Envelope keys match case-insensitively ("Schema" counts as "schema") and a
JSON null anywhere an object is expected reads as an empty object.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from eventshred.errors import InvalidContextsJSON, InvalidUnstructJSON, MissingInnerData
from .schema_uri import CONTEXTS_PREFIX, UNSTRUCT_EVENT_PREFIX, canonical_field_name


class _EnvelopeModel(BaseModel):
    """Base for envelope models: keys are matched ignoring case, last one wins."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def fold_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = {(f.alias or name).lower(): f.alias or name for name, f in cls.model_fields.items()}
        folded = {}
        for key, value in data.items():
            target = known.get(key.lower())
            if target is not None:
                folded[target] = value
        return folded


class SelfDescribingData(_EnvelopeModel):
    """A {schema, data} pair. A missing schema is an empty string downstream."""
    schema_uri: Optional[str] = Field(None, alias="schema")
    data: Any = None


class ContextEnvelope(_EnvelopeModel):
    """Batch of tagged sub-documents attached to one event."""
    schema_uri: Optional[str] = Field(None, alias="schema")
    data: Optional[List[Optional[SelfDescribingData]]] = None


class UnstructEnvelope(_EnvelopeModel):
    """Wrapper around exactly one tagged sub-document."""
    data: Optional[SelfDescribingData] = None


RawJSON = Union[str, bytes, bytearray]

_CONTEXTS_ADAPTER = TypeAdapter(Optional[ContextEnvelope])
_UNSTRUCT_ADAPTER = TypeAdapter(Optional[UnstructEnvelope])


def shred_contexts(raw: RawJSON) -> Dict[str, List[Any]]:
    """Group context payloads by canonical field name.

    Payloads sharing a name keep their first-seen relative order. The key
    order of the returned mapping is not part of the contract. A top-level
    null yields no groups.

    Raises:
        InvalidContextsJSON: If raw is not JSON shaped like a context envelope
        MalformedSchemaURI: If any entry's schema is malformed (no partial result)
    """
    try:
        envelope = _CONTEXTS_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise InvalidContextsJSON(f"Invalid contexts JSON: {e}") from e
    if envelope is None:
        return {}

    grouped: Dict[str, List[Any]] = {}
    for entry in envelope.data or ():
        if entry is None:
            entry = SelfDescribingData()
        name = canonical_field_name(CONTEXTS_PREFIX, entry.schema_uri or "")
        grouped.setdefault(name, []).append(entry.data)
    return grouped


def shred_unstruct(raw: RawJSON) -> Tuple[str, Any]:
    """Name the single payload of an unstructured event.

    A JSON null inner payload, or a null envelope, is treated the same as an
    absent one.

    Raises:
        InvalidUnstructJSON: If raw is not JSON shaped like an unstruct envelope
        MissingInnerData: If the inner data is absent or null
        MalformedSchemaURI: If the inner schema is malformed
    """
    try:
        envelope = _UNSTRUCT_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise InvalidUnstructJSON(f"Invalid unstruct_event JSON: {e}") from e

    inner = envelope.data if envelope is not None else None
    if inner is None or inner.data is None:
        raise MissingInnerData()
    name = canonical_field_name(UNSTRUCT_EVENT_PREFIX, inner.schema_uri or "")
    return name, inner.data
