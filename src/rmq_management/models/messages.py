"""Publishing to exchanges and fetching from queues."""

from enum import auto

from pydantic import Field, field_validator

from rmq_management.errors import ManagementValidationError
from rmq_management.models.base import WireModel
from rmq_management.serialization import DynamicMap, WireEnum

PAYLOAD_ENCODINGS = frozenset({"string", "base64"})


class PublishInfo(WireModel):
    """Body of a publish through the management API."""

    routing_key: str
    payload: str
    payload_encoding: str = "string"
    properties: DynamicMap = Field(default_factory=dict)

    @field_validator("payload_encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        if value not in PAYLOAD_ENCODINGS:
            raise ManagementValidationError(
                f"payload_encoding must be 'string' or 'base64', got '{value}'",
                field="payload_encoding",
            )
        return value


class PublishResult(WireModel):
    routed: bool


class AckMode(WireEnum):
    ACK_REQUEUE_TRUE = auto()
    ACK_REQUEUE_FALSE = auto()
    REJECT_REQUEUE_TRUE = auto()
    REJECT_REQUEUE_FALSE = auto()


class GetMessagesFromQueueInfo(WireModel):
    """Body of a get request. ackmode decides what happens to fetched messages."""

    count: int = 1
    ackmode: AckMode = AckMode.ACK_REQUEUE_TRUE
    encoding: str = "auto"
    truncate: int | None = None


class Message(WireModel):
    payload_bytes: int = 0
    redelivered: bool = False
    exchange: str = ""
    routing_key: str = ""
    message_count: int = 0
    properties: DynamicMap = Field(default_factory=dict)
    payload: str = ""
    payload_encoding: str = "string"
