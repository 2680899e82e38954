"""Exchange entities."""

from typing import Annotated

from pydantic import Field, field_validator

from rmq_management.errors import ManagementValidationError
from rmq_management.models.base import ExtensibleModel, WireModel
from rmq_management.models.stats import MessageStats
from rmq_management.serialization import DynamicMap, EmptyArrayAsNone

EXCHANGE_TYPES = frozenset({"direct", "topic", "fanout", "headers", "x-delayed-message"})


class Exchange(ExtensibleModel):
    """Snapshot of an exchange as reported by the broker."""

    name: str
    vhost: str
    type: str
    durable: bool = True
    auto_delete: bool = False
    internal: bool = False
    arguments: DynamicMap = Field(default_factory=dict)
    user_who_performed_action: str | None = None
    message_stats: Annotated[MessageStats | None, EmptyArrayAsNone] = None


class ExchangeInfo(WireModel):
    """Body of an exchange declaration."""

    type: str
    auto_delete: bool = False
    durable: bool = True
    internal: bool = False
    arguments: DynamicMap = Field(default_factory=dict)

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value not in EXCHANGE_TYPES:
            raise ManagementValidationError(
                f"Exchange type must be one of {sorted(EXCHANGE_TYPES)}, got '{value}'",
                field="type",
            )
        return value
