"""Field-table I/O helpers (internal)."""

from pathlib import Path
from typing import Union

from eventshred.errors import InvalidFieldTable
from eventshred.kernel.fields import FieldTable


def load_field_table_from_path(path: Union[str, Path]) -> FieldTable:
    """Load a field-definition table from a JSON file path."""
    table_path = Path(path)
    try:
        data = table_path.read_bytes()
    except OSError as e:
        raise InvalidFieldTable(f"Cannot read field table {table_path}: {e}") from e
    return FieldTable.from_json_bytes(data)
