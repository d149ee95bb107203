"""Iglu schema URI parsing and canonical field-name derivation.

Grammar: iglu:<vendor>/<name>/<format>/<model>-<revision>-<addition>

The canonical field name for a schema is
``<prefix>_<snake_vendor>_<snake_name>_<model>``. Only the model component of
the version takes part in the name, so 1-0-0 and 1-2-0 of the same schema
land in the same output field.
"""

import re

from pydantic import BaseModel, ConfigDict

from eventshred.errors import MalformedSchemaURI


SCHEMA_URI = (
    "^iglu:"                          # Protocol
    "([a-zA-Z0-9_.-]+)/"              # Vendor
    "([a-zA-Z0-9_-]+)/"               # Name
    "([a-zA-Z0-9_-]+)/"               # Format
    "([1-9][0-9]*"                    # MODEL (cannot start with 0)
    "(?:-(?:0|[1-9][0-9]*)){2})$"     # REVISION and ADDITION
)

CONTEXTS_PREFIX = "contexts"
UNSTRUCT_EVENT_PREFIX = "unstruct_event"

_SCHEMA_URI_RE = re.compile(SCHEMA_URI)
_CAMEL_BOUNDARY_RE = re.compile(r"([^A-Z_])([A-Z])")


class SchemaIdentity(BaseModel):
    """Components of a parsed iglu schema URI."""
    vendor: str
    name: str
    format: str
    model_version: str  # full "model-revision-addition" triple

    model_config = ConfigDict(frozen=True, extra="forbid", protected_namespaces=())

    @property
    def model(self) -> str:
        """Leading (model) component of the version triple."""
        return self.model_version.split("-")[0]

    def to_uri(self) -> str:
        return f"iglu:{self.vendor}/{self.name}/{self.format}/{self.model_version}"


def parse_schema_uri(uri: str) -> SchemaIdentity:
    """Parse an iglu schema URI.

    Args:
        uri: Schema URI, e.g. "iglu:com.acme/link_click/jsonschema/1-0-1"

    Returns:
        SchemaIdentity with vendor, name, format and version triple

    Raises:
        MalformedSchemaURI: If the whole string does not match the grammar
    """
    match = _SCHEMA_URI_RE.fullmatch(uri)
    if match is None:
        raise MalformedSchemaURI(uri, SCHEMA_URI)
    vendor, name, fmt, version = match.groups()
    return SchemaIdentity(vendor=vendor, name=name, format=fmt, model_version=version)


def snake_case_vendor(vendor: str) -> str:
    return vendor.replace(".", "_").lower()


def snake_case_name(name: str) -> str:
    """Insert "_" at camel-case boundaries, then lower-case.

    A capital preceded by anything other than a capital or "_" gets an
    underscore ("linkClick" -> "link_click", "HTTPRequest" -> "httprequest").
    """
    return _CAMEL_BOUNDARY_RE.sub(r"\1_\2", name).lower()


def canonical_field_name(prefix: str, uri: str) -> str:
    """Build the output field name for a schema URI.

    Raises:
        MalformedSchemaURI: Propagated unchanged from parse_schema_uri
    """
    schema = parse_schema_uri(uri)
    return f"{prefix}_{snake_case_vendor(schema.vendor)}_{snake_case_name(schema.name)}_{schema.model}"
