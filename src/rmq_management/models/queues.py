"""Queue entities."""

from typing import Annotated

from pydantic import Field

from rmq_management.models.base import ExtensibleModel, WireModel
from rmq_management.models.stats import BackingQueueStatus, LengthsDetails, MessageStats
from rmq_management.serialization import DynamicMap, EmptyArrayAsNone, WireEnum


class QueueType(WireEnum):
    CLASSIC = "classic"
    QUORUM = "quorum"
    STREAM = "stream"


class QueueName(WireModel):
    """Composite key of a queue."""

    name: str
    vhost: str


class Queue(ExtensibleModel):
    """Snapshot of a queue as reported by the broker."""

    name: str
    vhost: str
    type: QueueType = QueueType.CLASSIC
    node: str | None = None
    state: str | None = None
    arguments: DynamicMap = Field(default_factory=dict)
    durable: bool = True
    exclusive: bool = False
    auto_delete: bool = False
    messages_ready: int = 0
    messages_unacknowledged: int = 0
    messages: int = 0
    memory: int = 0
    idle_since: str | None = None
    policy: str | None = None
    exclusive_consumer_tag: str | None = None
    message_bytes: int = 0
    consumers: int = 0
    active_consumers: int = 0
    backing_queue_status: Annotated[BackingQueueStatus | None, EmptyArrayAsNone] = None
    head_message_timestamp: int | None = None
    slave_nodes: tuple[str, ...] | None = None
    synchronised_slave_nodes: tuple[str, ...] | None = None
    members: tuple[str, ...] | None = None
    leader: str | None = None
    message_stats: Annotated[MessageStats | None, EmptyArrayAsNone] = None
    messages_details: Annotated[LengthsDetails | None, EmptyArrayAsNone] = None
    messages_ready_details: Annotated[LengthsDetails | None, EmptyArrayAsNone] = None
    messages_unacknowledged_details: Annotated[LengthsDetails | None, EmptyArrayAsNone] = None

    @property
    def queue_name(self) -> QueueName:
        return QueueName(name=self.name, vhost=self.vhost)


class QueueInfo(WireModel):
    """Body of a queue declaration."""

    auto_delete: bool = False
    durable: bool = True
    arguments: DynamicMap = Field(default_factory=dict)
    node: str | None = None

    def with_argument(self, key: str, value) -> "QueueInfo":
        return self.model_copy(update={"arguments": {**self.arguments, key: value}})
