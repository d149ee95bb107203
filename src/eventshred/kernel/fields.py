"""Field-definition tables: ordered (output key, converter) pairs, one per TSV column.

Converter identifiers are resolved before pydantic validation runs, so an
unknown identifier surfaces as UnknownConverter rather than a pydantic
ValidationError.
"""

import json
from collections.abc import Mapping
from typing import Any, Iterable, List, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from eventshred.errors import EventShredError, InvalidFieldTable
from .converters import Converter


LATITUDE_INDEX = 22
LONGITUDE_INDEX = 23


class FieldDefinition(BaseModel):
    """One TSV column: where its value goes and how it is converted."""
    key: str
    converter: Converter

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data):
        converter = data.get("converter")
        if isinstance(converter, str) and not isinstance(converter, Converter):
            data["converter"] = Converter.from_id(converter)
        super().__init__(**data)

    @field_validator("converter", mode="before")
    @classmethod
    def resolve_converter(cls, v: Any) -> Converter:
        # model_validate() bypasses __init__
        if isinstance(v, Converter):
            return v
        if isinstance(v, str):
            return Converter.from_id(v)
        raise ValueError(f"converter must be a string identifier, got {type(v).__name__}")

    @classmethod
    def from_pair(cls, pair: Sequence[str]) -> "FieldDefinition":
        """Build from a (key, converter) pair.

        Raises:
            UnknownConverter: If the converter identifier is unknown
            InvalidFieldTable: If pair is not a two-item list or tuple
        """
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise InvalidFieldTable(f"Field definition must be a (key, converter) pair, got {pair!r}")
        key, converter = pair
        return cls(key=key, converter=converter)


FieldDefinitionLike = Union[FieldDefinition, Sequence[str], Mapping]


def coerce_field_definitions(fields: Iterable[FieldDefinitionLike]) -> Tuple[FieldDefinition, ...]:
    """Normalize FieldDefinition instances, {key, converter} objects and pairs to a tuple.

    Raises:
        UnknownConverter: If an entry names no converter
        InvalidFieldTable: If an entry is neither a pair nor an object
    """
    if isinstance(fields, FieldTable):
        return fields.fields
    definitions = []
    for f in fields:
        if isinstance(f, FieldDefinition):
            definitions.append(f)
        elif isinstance(f, Mapping):
            definitions.append(FieldDefinition(**f))
        else:
            definitions.append(FieldDefinition.from_pair(f))
    return tuple(definitions)


class FieldTable(BaseModel):
    """A versioned, ordered field-definition table."""
    version: str = "1"
    fields: Tuple[FieldDefinition, ...]

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data):
        if isinstance(data.get("fields"), (list, tuple)):
            data["fields"] = coerce_field_definitions(data["fields"])
        super().__init__(**data)

    def __len__(self) -> int:
        return len(self.fields)

    def get_keys(self) -> List[str]:
        """Output keys in column order."""
        return [f.key for f in self.fields]

    @classmethod
    def from_pairs(cls, pairs: Iterable[FieldDefinitionLike], version: str = "1") -> "FieldTable":
        return cls(version=version, fields=coerce_field_definitions(pairs))

    @classmethod
    def from_json_bytes(cls, data: Union[str, bytes]) -> "FieldTable":
        """Load a field table from JSON bytes (pure, no I/O).

        Accepts {"version": ..., "fields": [[key, converter], ...]} where each
        field may also be an object {"key": ..., "converter": ...}.

        Raises:
            InvalidFieldTable: If the payload is not JSON or not a valid table
        """
        try:
            payload = json.loads(data)
        except ValueError as e:
            raise InvalidFieldTable(f"Field table is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise InvalidFieldTable("Field table JSON must be an object with a 'fields' list")
        try:
            return cls(**payload)
        except InvalidFieldTable:
            raise
        except ValidationError as e:
            raise InvalidFieldTable(f"Invalid field table structure: {e}") from e
        except EventShredError as e:
            raise InvalidFieldTable(f"Invalid field table: {e}") from e


# Snowplow enriched event columns, in TSV order.
_ENRICHED_EVENT_PAIRS = [
    ("app_id", "convertString"),
    ("platform", "convertString"),
    ("etl_tstamp", "convertTimestamp"),
    ("collector_tstamp", "convertTimestamp"),
    ("dvce_created_tstamp", "convertTimestamp"),
    ("event", "convertString"),
    ("event_id", "convertString"),
    ("txn_id", "convertInt"),
    ("name_tracker", "convertString"),
    ("v_tracker", "convertString"),
    ("v_collector", "convertString"),
    ("v_etl", "convertString"),
    ("user_id", "convertString"),
    ("user_ipaddress", "convertString"),
    ("user_fingerprint", "convertString"),
    ("domain_userid", "convertString"),
    ("domain_sessionidx", "convertInt"),
    ("network_userid", "convertString"),
    ("geo_country", "convertString"),
    ("geo_region", "convertString"),
    ("geo_city", "convertString"),
    ("geo_zipcode", "convertString"),
    ("geo_latitude", "convertFloat"),
    ("geo_longitude", "convertFloat"),
    ("geo_region_name", "convertString"),
    ("ip_isp", "convertString"),
    ("ip_organization", "convertString"),
    ("ip_domain", "convertString"),
    ("ip_netspeed", "convertString"),
    ("page_url", "convertString"),
    ("page_title", "convertString"),
    ("page_referrer", "convertString"),
    ("page_urlscheme", "convertString"),
    ("page_urlhost", "convertString"),
    ("page_urlport", "convertInt"),
    ("page_urlpath", "convertString"),
    ("page_urlquery", "convertString"),
    ("page_urlfragment", "convertString"),
    ("refr_urlscheme", "convertString"),
    ("refr_urlhost", "convertString"),
    ("refr_urlport", "convertInt"),
    ("refr_urlpath", "convertString"),
    ("refr_urlquery", "convertString"),
    ("refr_urlfragment", "convertString"),
    ("refr_medium", "convertString"),
    ("refr_source", "convertString"),
    ("refr_term", "convertString"),
    ("mkt_medium", "convertString"),
    ("mkt_source", "convertString"),
    ("mkt_term", "convertString"),
    ("mkt_content", "convertString"),
    ("mkt_campaign", "convertString"),
    ("contexts", "convertContexts"),
    ("se_category", "convertString"),
    ("se_action", "convertString"),
    ("se_label", "convertString"),
    ("se_property", "convertString"),
    ("se_value", "convertString"),
    ("unstruct_event", "convertUnstruct"),
    ("tr_orderid", "convertString"),
    ("tr_affiliation", "convertString"),
    ("tr_total", "convertFloat"),
    ("tr_tax", "convertFloat"),
    ("tr_shipping", "convertFloat"),
    ("tr_city", "convertString"),
    ("tr_state", "convertString"),
    ("tr_country", "convertString"),
    ("ti_orderid", "convertString"),
    ("ti_sku", "convertString"),
    ("ti_name", "convertString"),
    ("ti_category", "convertString"),
    ("ti_price", "convertFloat"),
    ("ti_quantity", "convertInt"),
    ("pp_xoffset_min", "convertInt"),
    ("pp_xoffset_max", "convertInt"),
    ("pp_yoffset_min", "convertInt"),
    ("pp_yoffset_max", "convertInt"),
    ("useragent", "convertString"),
    ("br_name", "convertString"),
    ("br_family", "convertString"),
    ("br_version", "convertString"),
    ("br_type", "convertString"),
    ("br_renderengine", "convertString"),
    ("br_lang", "convertString"),
    ("br_features_pdf", "convertBool"),
    ("br_features_flash", "convertBool"),
    ("br_features_java", "convertBool"),
    ("br_features_director", "convertBool"),
    ("br_features_quicktime", "convertBool"),
    ("br_features_realplayer", "convertBool"),
    ("br_features_windowsmedia", "convertBool"),
    ("br_features_gears", "convertBool"),
    ("br_features_silverlight", "convertBool"),
    ("br_cookies", "convertBool"),
    ("br_colordepth", "convertString"),
    ("br_viewwidth", "convertInt"),
    ("br_viewheight", "convertInt"),
    ("os_name", "convertString"),
    ("os_family", "convertString"),
    ("os_manufacturer", "convertString"),
    ("os_timezone", "convertString"),
    ("dvce_type", "convertString"),
    ("dvce_ismobile", "convertBool"),
    ("dvce_screenwidth", "convertInt"),
    ("dvce_screenheight", "convertInt"),
    ("doc_charset", "convertString"),
    ("doc_width", "convertInt"),
    ("doc_height", "convertInt"),
    ("tr_currency", "convertString"),
    ("tr_total_base", "convertFloat"),
    ("tr_tax_base", "convertFloat"),
    ("tr_shipping_base", "convertFloat"),
    ("ti_currency", "convertString"),
    ("ti_price_base", "convertFloat"),
    ("base_currency", "convertString"),
    ("geo_timezone", "convertString"),
    ("mkt_clickid", "convertString"),
    ("mkt_network", "convertString"),
    ("etl_tags", "convertString"),
    ("dvce_sent_tstamp", "convertTimestamp"),
    ("refr_domain_userid", "convertString"),
    ("refr_device_tstamp", "convertTimestamp"),
    ("derived_contexts", "convertContexts"),
    ("domain_sessionid", "convertString"),
    ("derived_tstamp", "convertTimestamp"),
    ("event_vendor", "convertString"),
    ("event_name", "convertString"),
    ("event_format", "convertString"),
    ("event_version", "convertString"),
    ("event_fingerprint", "convertString"),
    ("true_tstamp", "convertTimestamp"),
]

ENRICHED_EVENT_FIELDS: Tuple[FieldDefinition, ...] = coerce_field_definitions(_ENRICHED_EVENT_PAIRS)

ENRICHED_EVENT_TABLE = FieldTable(version="enriched-event", fields=ENRICHED_EVENT_FIELDS)
