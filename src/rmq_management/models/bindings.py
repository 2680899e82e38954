"""Binding entities."""

from pydantic import Field

from rmq_management.models.base import WireModel
from rmq_management.serialization import DynamicMap, WireEnum


class DestinationType(WireEnum):
    QUEUE = "queue"
    EXCHANGE = "exchange"


class Binding(WireModel):
    """A routing rule from an exchange to a queue or exchange.

    properties_key identifies one binding among several with the same
    source, destination and routing key. It is needed to delete it.
    """

    source: str
    vhost: str
    destination: str
    destination_type: DestinationType
    routing_key: str = ""
    arguments: DynamicMap = Field(default_factory=dict)
    properties_key: str | None = None


class BindingInfo(WireModel):
    """Body of a binding creation."""

    routing_key: str = ""
    arguments: DynamicMap = Field(default_factory=dict)
