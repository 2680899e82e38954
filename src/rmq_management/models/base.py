"""Base classes for wire models.

WireModel fixes the conventions shared by every entity: immutable instances,
wire names produced by the naming policy, Python names accepted on input, and
None-valued fields left out on write. ExtensibleModel additionally keeps any
field the broker sends that the model does not declare.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)

from rmq_management.naming import to_wire_name


class WireModel(BaseModel):
    """Immutable model mapped to broker JSON."""

    model_config = ConfigDict(
        alias_generator=to_wire_name,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @model_serializer(mode="wrap")
    def _omit_none_fields(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> Any:
        data = handler(self)
        context = info.context or {}
        if not context.get("omit_none", False) or not isinstance(data, dict):
            return data
        for name, field in type(self).model_fields.items():
            if getattr(self, name) is None:
                key = (field.alias or name) if info.by_alias else name
                data.pop(key, None)
        return data


class ExtensibleModel(WireModel):
    """Wire model that preserves undeclared fields verbatim."""

    model_config = ConfigDict(extra="allow")

    @property
    def extension_data(self) -> dict[str, Any]:
        """Undeclared wire fields, keyed by their original names."""
        return dict(self.model_extra or {})
