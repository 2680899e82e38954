"""Naming policy between Python field names and broker wire names.

The broker speaks snake_case for most fields and kebab-case for a handful of
policy and shovel keys. The mechanical rule lives in to_wire_name; kebab-case
fields declare an explicit alias which always wins over the rule.
"""

import re
from typing import Any, Mapping

from pydantic import BaseModel

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_wire_name(name: str) -> str:
    """Map a field name to its wire name.

    A separator is inserted before every uppercase letter that follows a
    lowercase letter or digit, then the whole name is lowercased. Names that
    are already snake_case pass through unchanged.
    """
    return _WORD_BOUNDARY.sub("_", name).lower()


def wire_names(model: type[BaseModel]) -> dict[str, str]:
    """Return the field name to wire name table of a model."""
    return {
        name: field.alias or to_wire_name(name)
        for name, field in model.model_fields.items()
    }


def field_for_wire_name(model: type[BaseModel], wire_name: str) -> str:
    """Inverse of wire_names for a single key.

    Raises:
        KeyError: If no declared field maps to wire_name
    """
    for name, alias in wire_names(model).items():
        if alias == wire_name:
            return name
    raise KeyError(f"{model.__name__} has no field with wire name '{wire_name}'")


def find_collisions(model: type[BaseModel]) -> list[str]:
    """Return wire names claimed by more than one field of a model."""
    seen: dict[str, int] = {}
    for alias in wire_names(model).values():
        seen[alias] = seen.get(alias, 0) + 1
    return sorted(alias for alias, count in seen.items() if count > 1)


def wire_keys(params: Mapping[str, Any]) -> dict[str, Any]:
    """Apply the naming rule to the keys of a plain mapping."""
    return {to_wire_name(key): value for key, value in params.items()}
