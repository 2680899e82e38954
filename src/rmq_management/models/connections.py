"""Connections, channels and consumers."""

from typing import Annotated, Any, Mapping

from pydantic import Field

from rmq_management.models.base import ExtensibleModel, WireModel
from rmq_management.models.queues import QueueName
from rmq_management.models.stats import MessageStats
from rmq_management.serialization import (
    DynamicMap,
    EmptyArrayAsNone,
    TolerantInt,
    TolerantStr,
)


class Capabilities:
    """Typed view over the capabilities table a client announces."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = dict(values or {})

    def _flag(self, key: str) -> bool:
        return self._values.get(key) is True

    @property
    def basic_nack(self) -> bool:
        return self._flag("basic.nack")

    @property
    def publisher_confirms(self) -> bool:
        return self._flag("publisher_confirms")

    @property
    def consumer_cancel_notify(self) -> bool:
        return self._flag("consumer_cancel_notify")

    @property
    def exchange_exchange_bindings(self) -> bool:
        return self._flag("exchange_exchange_bindings")

    @property
    def connection_blocked(self) -> bool:
        return self._flag("connection.blocked")

    @property
    def authentication_failure_close(self) -> bool:
        return self._flag("authentication_failure_close")

    @property
    def per_consumer_qos(self) -> bool:
        return self._flag("per_consumer_qos")


class ClientProperties:
    """Typed view over the client_properties map of a connection.

    Unknown keys stay reachable through get().
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = dict(values or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def _text(self, key: str) -> str | None:
        value = self._values.get(key)
        return value if isinstance(value, str) else None

    @property
    def capabilities(self) -> Capabilities:
        value = self._values.get("capabilities")
        return Capabilities(value if isinstance(value, Mapping) else None)

    @property
    def product(self) -> str | None:
        return self._text("product")

    @property
    def version(self) -> str | None:
        return self._text("version")

    @property
    def platform(self) -> str | None:
        return self._text("platform")

    @property
    def information(self) -> str | None:
        return self._text("information")

    @property
    def copyright(self) -> str | None:
        return self._text("copyright")

    @property
    def connection_name(self) -> str | None:
        return self._text("connection_name")


class Connection(ExtensibleModel):
    """Snapshot of a client connection."""

    name: str
    node: str | None = None
    state: str | None = None
    type: str | None = None
    user: str | None = None
    vhost: str | None = None
    protocol: str | None = None
    host: str | None = None
    port: TolerantInt = 0
    peer_host: TolerantStr = None
    peer_port: TolerantInt = 0
    ssl: bool = False
    peer_cert_subject: str | None = None
    peer_cert_issuer: str | None = None
    peer_cert_validity: str | None = None
    auth_mechanism: str | None = None
    ssl_protocol: str | None = None
    ssl_key_exchange: str | None = None
    ssl_cipher: str | None = None
    ssl_hash: str | None = None
    channels: int = 0
    channel_max: int | None = None
    frame_max: int | None = None
    timeout: int | None = None
    recv_oct: int = 0
    recv_cnt: int = 0
    send_oct: int = 0
    send_cnt: int = 0
    send_pend: int = 0
    last_blocked_by: str | None = None
    last_blocked_age: str | None = None
    connected_at: int | None = None
    client_properties: DynamicMap = Field(default_factory=dict)

    @property
    def client(self) -> ClientProperties:
        return ClientProperties(self.client_properties)


class ConnectionDetails(WireModel):
    name: str | None = None
    peer_host: TolerantStr = None
    peer_port: TolerantInt = 0


class ChannelDetail(WireModel):
    """Channel identification embedded in consumer records."""

    name: str | None = None
    number: TolerantInt = 0
    user: str | None = None
    connection_name: str | None = None
    peer_port: TolerantInt = 0
    peer_host: TolerantStr = None
    node: str | None = None


class ConsumerDetail(WireModel):
    """A consumer as listed on a queue or channel."""

    queue: QueueName | None = None
    consumer_tag: str | None = None
    exclusive: bool = False
    ack_required: bool = False
    arguments: Annotated[DynamicMap | None, EmptyArrayAsNone] = None
    channel_details: Annotated[ChannelDetail | None, EmptyArrayAsNone] = None


class Consumer(ExtensibleModel):
    """A consumer as listed by the consumers endpoint."""

    queue: QueueName
    consumer_tag: str
    exclusive: bool = False
    ack_required: bool = False
    active: bool | None = None
    activity_status: str | None = None
    prefetch_count: int = 0
    arguments: Annotated[DynamicMap | None, EmptyArrayAsNone] = None
    channel_details: Annotated[ChannelDetail | None, EmptyArrayAsNone] = None


class Channel(ExtensibleModel):
    """Snapshot of a channel."""

    name: str
    number: TolerantInt = 0
    node: str | None = None
    user: str | None = None
    vhost: str | None = None
    state: str | None = None
    idle_since: str | None = None
    transactional: bool = False
    confirm: bool = False
    consumer_count: int = 0
    messages_unacknowledged: int = 0
    messages_unconfirmed: int = 0
    messages_uncommitted: int = 0
    acks_uncommitted: int = 0
    prefetch_count: int = 0
    global_prefetch_count: int | None = None
    client_flow_blocked: bool = False
    consumer_details: tuple[ConsumerDetail, ...] = ()
    connection_details: Annotated[ConnectionDetails | None, EmptyArrayAsNone] = None
    message_stats: Annotated[MessageStats | None, EmptyArrayAsNone] = None
