"""Argument checks shared by the Keycloak resource services."""
from __future__ import annotations
from typing import Any, Mapping
from urllib.parse import quote

from .exceptions import MissingArgumentError


def require(value: Any, name: str) -> Any:
    """Return ``value`` unchanged, or raise if it is absent.

    None, empty strings and empty mappings count as absent, mirroring what the
    admin API would refuse anyway.

    Raises:
        MissingArgumentError: If the value is absent
    """
    if value is None or value == "" or (isinstance(value, Mapping) and not value):
        raise MissingArgumentError(name)
    return value


def require_field(record: Mapping[str, Any], field: str, name: str) -> str:
    """Return ``record[field]`` as a path segment, or raise if it is absent.

    Args:
        record: JSON representation
        field: Key to read (e.g. "id", "type")
        name: Argument name used in the error message

    Raises:
        MissingArgumentError: If the field is absent or empty
    """
    return segment(require(record.get(field), f"{name}.{field}"))


def segment(value: Any) -> str:
    """Quote a value for use as one URL path segment."""
    return quote(str(value), safe="")
