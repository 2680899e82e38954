"""Cluster-wide snapshots: overview, nodes, definitions and plugin status."""

from datetime import datetime
from typing import Annotated

from rmq_management.models.base import ExtensibleModel, WireModel
from rmq_management.models.bindings import Binding
from rmq_management.models.exchanges import Exchange
from rmq_management.models.parameters import Parameter
from rmq_management.models.policies import Policy
from rmq_management.models.queues import Queue
from rmq_management.models.stats import MessageStats, ObjectTotals, QueueTotals
from rmq_management.models.users import Permission, TopicPermission, User
from rmq_management.models.vhosts import Vhost
from rmq_management.serialization import EmptyArrayAsNone, TolerantInt, WireEnum


class ExchangeTypeSpec(WireModel):
    name: str
    description: str | None = None
    enabled: bool = True


class AuthMechanism(WireModel):
    name: str
    description: str | None = None
    enabled: bool = True


class Application(WireModel):
    name: str
    description: str | None = None
    version: str | None = None


class SocketOpts(ExtensibleModel):
    backlog: int | None = None
    nodelay: bool | None = None
    exit_on_close: bool | None = None


class Listener(WireModel):
    node: str
    protocol: str
    ip_address: str | None = None
    port: TolerantInt = 0
    socket_opts: Annotated[SocketOpts | None, EmptyArrayAsNone] = None


class Context(WireModel):
    """An HTTP listener context. Older brokers report the port as a string."""

    node: str | None = None
    description: str | None = None
    path: str | None = None
    port: TolerantInt = 0


class Overview(ExtensibleModel):
    management_version: str | None = None
    rates_mode: str | None = None
    statistics_level: str | None = None
    exchange_types: tuple[ExchangeTypeSpec, ...] = ()
    product_version: str | None = None
    product_name: str | None = None
    rabbitmq_version: str | None = None
    cluster_name: str | None = None
    erlang_version: str | None = None
    erlang_full_version: str | None = None
    message_stats: Annotated[MessageStats | None, EmptyArrayAsNone] = None
    queue_totals: Annotated[QueueTotals | None, EmptyArrayAsNone] = None
    object_totals: Annotated[ObjectTotals | None, EmptyArrayAsNone] = None
    statistics_db_event_queue: int = 0
    node: str | None = None
    listeners: tuple[Listener, ...] = ()
    contexts: tuple[Context, ...] = ()


class Node(ExtensibleModel):
    name: str
    type: str | None = None
    running: bool = False
    os_pid: str | None = None
    mem_used: int = 0
    mem_limit: int = 0
    mem_alarm: bool = False
    disk_free_limit: int = 0
    disk_free: int = 0
    disk_free_alarm: bool = False
    fd_used: int = 0
    fd_total: int = 0
    sockets_used: int = 0
    sockets_total: int = 0
    proc_used: int = 0
    proc_total: int = 0
    uptime: int = 0
    run_queue: int = 0
    processors: int = 0
    exchange_types: tuple[ExchangeTypeSpec, ...] = ()
    auth_mechanisms: tuple[AuthMechanism, ...] = ()
    applications: tuple[Application, ...] = ()
    contexts: tuple[Context, ...] = ()
    partitions: tuple[str, ...] = ()


class Definitions(ExtensibleModel):
    """An export of the broker's definitions."""

    rabbit_version: str | None = None
    rabbitmq_version: str | None = None
    users: tuple[User, ...] = ()
    vhosts: tuple[Vhost, ...] = ()
    permissions: tuple[Permission, ...] = ()
    topic_permissions: tuple[TopicPermission, ...] = ()
    parameters: tuple[Parameter, ...] = ()
    policies: tuple[Policy, ...] = ()
    queues: tuple[Queue, ...] = ()
    exchanges: tuple[Exchange, ...] = ()
    bindings: tuple[Binding, ...] = ()


class FederationStatus(WireEnum):
    STARTING = "starting"
    RUNNING = "running"
    ERROR = "error"
    SHUTDOWN = "shutdown"


class Federation(ExtensibleModel):
    """A federation link."""

    node: str | None = None
    exchange: str | None = None
    upstream_exchange: str | None = None
    queue: str | None = None
    upstream_queue: str | None = None
    type: str | None = None
    vhost: str | None = None
    upstream: str | None = None
    id: str | None = None
    status: FederationStatus
    local_connection: str | None = None
    uri: str | None = None
    timestamp: str | None = None
    error: str | None = None


class ShovelStatus(ExtensibleModel):
    name: str
    vhost: str | None = None
    node: str | None = None
    timestamp: datetime | None = None
    type: str | None = None
    state: str | None = None


class AlivenessResult(WireModel):
    status: str


class HealthCheckResult(ExtensibleModel):
    status: str
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"
