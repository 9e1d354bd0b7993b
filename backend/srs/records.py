"""Duck-typed access to card and deck records.

The scheduling code accepts ORM rows, plain objects and decoded JSON
mappings alike, so fields are read through ``read_field`` rather than by
attribute access.
"""

from collections.abc import Mapping
from typing import Any


def read_field(record: Any, name: str, default: Any = None) -> Any:
    """Return ``record.name`` (or ``record[name]`` for mappings), or ``default``."""
    if isinstance(record, Mapping):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value
