"""Per-field type conversion registry.

The registry is closed: Converter enumerates every conversion kind and each
member resolves to exactly one function. Field tables reference members,
so an unknown converter name fails when the table is built, not while a
record is being transformed.
"""

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Tuple

from eventshred.errors import ConversionFailure, UnknownConverter
from .shredder import shred_contexts, shred_unstruct
from .values import FieldValue


ConvertedPairs = List[Tuple[str, FieldValue]]
ConvertFunc = Callable[[str, str], ConvertedPairs]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

TIMESTAMP_LAYOUT = "%Y-%m-%d %H:%M:%S.%f"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity)|nan",
    re.IGNORECASE,
)
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")
# hour may be one or two digits, every other component has a fixed width
_TIMESTAMP_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{1,2}:[0-9]{2}:[0-9]{2}\.[0-9]{3}")
_INT64_DIGITS = len(str(INT64_MAX))


class Converter(str, Enum):
    """Conversion kinds, valued by their field-table identifier."""
    STRING = "convertString"
    INT = "convertInt"
    FLOAT = "convertFloat"
    BOOL = "convertBool"
    TIMESTAMP = "convertTimestamp"
    CONTEXTS = "convertContexts"
    UNSTRUCT = "convertUnstruct"

    @property
    def short_id(self) -> str:
        return self.name.lower()

    @classmethod
    def from_id(cls, identifier: str) -> "Converter":
        """Resolve "convertInt" or "int" style identifiers.

        Raises:
            UnknownConverter: If identifier names no converter
        """
        for member in cls:
            if identifier == member.value or identifier == member.short_id:
                return member
        known = [m.value for m in cls] + [m.short_id for m in cls]
        raise UnknownConverter(identifier, known)

    def convert(self, key: str, raw: str) -> ConvertedPairs:
        """Convert one non-empty raw column value into output pairs."""
        return _CONVERT_FUNCS[self](key, raw)


def convert_string(key: str, raw: str) -> ConvertedPairs:
    return [(key, FieldValue.string(raw))]


def convert_int(key: str, raw: str) -> ConvertedPairs:
    if not _INT_RE.fullmatch(raw):
        raise ConversionFailure(key, raw, f"invalid syntax for base-10 integer: {raw!r}")
    # bound the digit count before int(), which refuses very long strings
    if len(raw.lstrip("+-").lstrip("0")) > _INT64_DIGITS:
        raise ConversionFailure(key, raw, f"integer out of 64-bit range: {raw[:32]!r}...")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ConversionFailure(key, raw, f"integer out of 64-bit range: {raw!r}")
    return [(key, FieldValue.integer(value))]


def convert_float(key: str, raw: str) -> ConvertedPairs:
    if _HEX_FLOAT_RE.fullmatch(raw):
        try:
            value = float.fromhex(raw)
        except OverflowError as e:
            raise ConversionFailure(key, raw, f"float out of range: {raw!r}") from e
        return [(key, FieldValue.floating(value))]
    if not _FLOAT_RE.fullmatch(raw):
        raise ConversionFailure(key, raw, f"invalid syntax for float: {raw!r}")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise ConversionFailure(key, raw, f"float out of range: {raw!r}")
    return [(key, FieldValue.floating(value))]


def convert_bool(key: str, raw: str) -> ConvertedPairs:
    return [(key, FieldValue.boolean(raw == "1"))]


def convert_timestamp(key: str, raw: str) -> ConvertedPairs:
    """Parse "YYYY-MM-DD HH:MM:SS.mmm" as a UTC timestamp (exactly 3 fraction digits, 1-2 hour digits)."""
    if not _TIMESTAMP_RE.fullmatch(raw):
        raise ConversionFailure(
            key, raw, f"timestamp {raw!r} does not match layout YYYY-MM-DD HH:MM:SS.mmm"
        )
    try:
        parsed = datetime.strptime(raw, TIMESTAMP_LAYOUT)
    except ValueError as e:
        raise ConversionFailure(key, raw, e) from e
    return [(key, FieldValue.timestamp(parsed.replace(tzinfo=timezone.utc)))]


def convert_contexts(key: str, raw: str) -> ConvertedPairs:
    return [(name, FieldValue.json(payloads)) for name, payloads in shred_contexts(raw).items()]


def convert_unstruct(key: str, raw: str) -> ConvertedPairs:
    name, payload = shred_unstruct(raw)
    return [(name, FieldValue.json(payload))]


_CONVERT_FUNCS: Dict[Converter, ConvertFunc] = {
    Converter.STRING: convert_string,
    Converter.INT: convert_int,
    Converter.FLOAT: convert_float,
    Converter.BOOL: convert_bool,
    Converter.TIMESTAMP: convert_timestamp,
    Converter.CONTEXTS: convert_contexts,
    Converter.UNSTRUCT: convert_unstruct,
}

_unregistered = set(Converter) - set(_CONVERT_FUNCS)
if _unregistered:
    raise RuntimeError(f"Converters without a conversion function: {sorted(m.value for m in _unregistered)}")
