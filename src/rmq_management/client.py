"""Async client for the RabbitMQ HTTP management API.

Each operation builds an escaped resource path, encodes the request body
through the JSON codec, checks the response status against the set accepted
for its HTTP method and decodes the body into a typed model.
"""

from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar
from urllib.parse import urlsplit, urlunsplit

from loguru import logger
from pydantic import ValidationError

from rmq_management.config import Settings, get_settings
from rmq_management.errors import (
    DecodeError,
    ManagementValidationError,
    UnexpectedStatusCodeError,
)
from rmq_management.models import (
    AlivenessResult,
    Binding,
    BindingInfo,
    Channel,
    Connection,
    Consumer,
    Definitions,
    DeleteExchangeCriteria,
    DeleteQueueCriteria,
    Exchange,
    ExchangeInfo,
    Federation,
    GetMessagesFromQueueInfo,
    HealthCheckResult,
    LengthsCriteria,
    Message,
    Node,
    Overview,
    PageCriteria,
    PageResult,
    Parameter,
    Permission,
    PermissionInfo,
    Policy,
    PublishInfo,
    PublishResult,
    Queue,
    QueueInfo,
    RatesCriteria,
    ShovelStatus,
    TopicPermission,
    TopicPermissionInfo,
    User,
    UserInfo,
    UserLimits,
    Vhost,
)
from rmq_management.paths import RelativePath, properties_key_segment, vhost_segment
from rmq_management.serialization import JsonCodec
from rmq_management.transport import HttpTransport, TransportResponse

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

GET_OK = frozenset({200})
PUT_OK = frozenset({200, 201, 204})
POST_OK = frozenset({200, 201})
DELETE_OK = frozenset({204})
HEALTH_CHECK_OK = frozenset({200, 503})

API = RelativePath("api")


def operation(func: F) -> F:
    """Tag every log record emitted during the call with the operation name."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        with logger.contextualize(operation=func.__name__):
            return await func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _strip_credentials(endpoint: str) -> str:
    parts = urlsplit(endpoint)
    netloc = parts.hostname or ""
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


def _normalise_endpoint(endpoint: str) -> str:
    parts = urlsplit(endpoint)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ManagementValidationError(
            f"Endpoint must be an absolute http(s) URL, got '{endpoint}'",
            field="endpoint",
        )
    if parts.query or parts.fragment:
        raise ManagementValidationError(
            "Endpoint must not carry a query string or fragment", field="endpoint"
        )
    return endpoint if endpoint.endswith("/") else endpoint + "/"


class ManagementClient:
    """Typed facade over the management API.

    Explicit arguments win over settings. Use it as an async context manager
    or call aclose() when done.

    Example:
        async with ManagementClient("http://localhost:15672/", "guest", "guest") as client:
            queues = await client.get_queues("/")
    """

    def __init__(
        self,
        endpoint: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
        *,
        settings: Settings | None = None,
        transport: HttpTransport | None = None,
        codec: JsonCodec | None = None,
    ):
        settings = settings or get_settings()
        self.endpoint = _normalise_endpoint(endpoint or settings.management_url_str)
        self.max_name_length = settings.max_name_length
        self._codec = codec or JsonCodec()
        self._transport = transport or HttpTransport(
            endpoint=self.endpoint,
            username=username or settings.rabbitmq_username,
            password=(
                password if password is not None else settings.rabbitmq_password.get_secret_value()
            ),
            timeout=timeout or settings.request_timeout,
            metrics_enabled=not settings.disable_prometheus,
        )
        logger.debug("Management client created", endpoint=_strip_credentials(self.endpoint))

    async def __aenter__(self) -> "ManagementClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    # =========================================================================
    # Request plumbing
    # =========================================================================

    def _name(self, value: str, field: str) -> str:
        if not value:
            raise ManagementValidationError(f"{field} cannot be empty", field=field)
        if len(value.encode("utf-8")) > self.max_name_length:
            raise ManagementValidationError(
                f"{field} exceeds maximum length of {self.max_name_length} bytes",
                field=field,
            )
        return value

    def _vhost(self, vhost: str) -> str:
        return vhost_segment(self._name(vhost, "vhost"))

    async def _send(
        self,
        method: str,
        path: str,
        expected: frozenset[int],
        body: Any = None,
    ) -> TransportResponse:
        payload = self._codec.encode(body) if body is not None else None
        response = await self._transport.send(method, path, payload)
        if response.status_code not in expected:
            logger.warning(
                "Unexpected status code",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise UnexpectedStatusCodeError(response.status_code, method, path, response.text)
        return response

    def _decode(self, target: Any, response: TransportResponse) -> Any:
        try:
            return self._codec.decode(target, response.content)
        except DecodeError as exc:
            logger.error("Failed to decode response", target=exc.target, errors=exc.errors)
            raise

    async def _get(self, path: str, target: type[T] | Any, expected: frozenset[int] = GET_OK) -> T:
        return self._decode(target, await self._send("GET", path, expected))

    async def _put(self, path: str, body: Any = None) -> None:
        await self._send("PUT", path, PUT_OK, body)

    async def _post(self, path: str, body: Any, target: type[T] | None = None) -> T | None:
        response = await self._send("POST", path, POST_OK, body)
        if target is None or not response.content:
            return None
        return self._decode(target, response)

    async def _delete(self, path: str) -> None:
        await self._send("DELETE", path, DELETE_OK)

    # =========================================================================
    # Cluster
    # =========================================================================

    @operation
    async def get_overview(
        self,
        lengths_criteria: LengthsCriteria | None = None,
        rates_criteria: RatesCriteria | None = None,
    ) -> Overview:
        """Cluster-wide overview, optionally with length and rate samples."""
        return await self._get((API / "overview").with_query(lengths_criteria, rates_criteria), Overview)

    @operation
    async def get_nodes(self) -> list[Node]:
        return await self._get(str(API / "nodes"), list[Node])

    @operation
    async def get_definitions(self) -> Definitions:
        """Export users, vhosts, permissions, policies, parameters and topology."""
        return await self._get(str(API / "definitions"), Definitions)

    @operation
    async def is_alive(self, vhost: str) -> bool:
        """Declare a test queue in vhost, publish to it and consume it back."""
        path = str(API / "aliveness-test" / self._vhost(vhost))
        result = await self._get(path, AlivenessResult)
        return result.status == "ok"

    @operation
    async def have_health_check_cluster_alarms(self) -> bool:
        """True when any node in the cluster has a resource alarm in effect."""
        path = str(API / "health" / "checks" / "alarms")
        result = await self._get(path, HealthCheckResult, HEALTH_CHECK_OK)
        return not result.ok

    @operation
    async def have_health_check_local_alarms(self) -> bool:
        """True when the node serving the request has a resource alarm in effect."""
        path = str(API / "health" / "checks" / "local-alarms")
        result = await self._get(path, HealthCheckResult, HEALTH_CHECK_OK)
        return not result.ok

    # =========================================================================
    # Connections and channels
    # =========================================================================

    @operation
    async def get_connections(self) -> list[Connection]:
        return await self._get(str(API / "connections"), list[Connection])

    @operation
    async def close_connection(self, connection_name: str) -> None:
        await self._delete(str(API / "connections" / self._name(connection_name, "connection_name")))

    @operation
    async def get_channels(self) -> list[Channel]:
        return await self._get(str(API / "channels"), list[Channel])

    @operation
    async def get_channels_for_connection(self, connection_name: str) -> list[Channel]:
        path = API / "connections" / self._name(connection_name, "connection_name") / "channels"
        return await self._get(str(path), list[Channel])

    @operation
    async def get_channel(
        self,
        channel_name: str,
        rates_criteria: RatesCriteria | None = None,
    ) -> Channel:
        path = API / "channels" / self._name(channel_name, "channel_name")
        return await self._get(path.with_query(rates_criteria), Channel)

    @operation
    async def get_consumers(self) -> list[Consumer]:
        return await self._get(str(API / "consumers"), list[Consumer])

    # =========================================================================
    # Exchanges
    # =========================================================================

    @operation
    async def get_exchanges(self, vhost: str | None = None) -> list[Exchange]:
        """All exchanges, or only those of vhost."""
        path = API / "exchanges"
        if vhost is not None:
            path = path / self._vhost(vhost)
        return await self._get(str(path), list[Exchange])

    @operation
    async def get_exchanges_by_page(
        self,
        page_criteria: PageCriteria,
        vhost: str | None = None,
    ) -> PageResult[Exchange]:
        path = API / "exchanges"
        if vhost is not None:
            path = path / self._vhost(vhost)
        return await self._get(path.with_query(page_criteria), PageResult[Exchange])

    @operation
    async def get_exchange(
        self,
        vhost: str,
        exchange_name: str,
        rates_criteria: RatesCriteria | None = None,
    ) -> Exchange:
        path = API / "exchanges" / self._vhost(vhost) / self._name(exchange_name, "exchange_name")
        return await self._get(path.with_query(rates_criteria), Exchange)

    @operation
    async def create_exchange(self, vhost: str, exchange_name: str, exchange_info: ExchangeInfo) -> None:
        path = API / "exchanges" / self._vhost(vhost) / self._name(exchange_name, "exchange_name")
        await self._put(str(path), exchange_info)

    @operation
    async def delete_exchange(
        self,
        vhost: str,
        exchange_name: str,
        criteria: DeleteExchangeCriteria | None = None,
    ) -> None:
        path = API / "exchanges" / self._vhost(vhost) / self._name(exchange_name, "exchange_name")
        await self._delete(path.with_query(criteria))

    @operation
    async def get_bindings_with_source(self, vhost: str, exchange_name: str) -> list[Binding]:
        """Bindings in which the exchange is the source."""
        path = API / "exchanges" / self._vhost(vhost) / self._name(exchange_name, "exchange_name")
        return await self._get(str(path / "bindings" / "source"), list[Binding])

    @operation
    async def get_bindings_with_destination(self, vhost: str, exchange_name: str) -> list[Binding]:
        """Bindings in which the exchange is the destination."""
        path = API / "exchanges" / self._vhost(vhost) / self._name(exchange_name, "exchange_name")
        return await self._get(str(path / "bindings" / "destination"), list[Binding])

    @operation
    async def publish(self, vhost: str, exchange_name: str, publish_info: PublishInfo) -> PublishResult:
        """Publish one message. Use "amq.default" for the default exchange."""
        path = API / "exchanges" / self._vhost(vhost) / self._name(exchange_name, "exchange_name")
        return await self._post(str(path / "publish"), publish_info, PublishResult)

    # =========================================================================
    # Queues
    # =========================================================================

    @operation
    async def get_queues(self, vhost: str | None = None) -> list[Queue]:
        """All queues, or only those of vhost."""
        path = API / "queues"
        if vhost is not None:
            path = path / self._vhost(vhost)
        return await self._get(str(path), list[Queue])

    @operation
    async def get_queues_by_page(
        self,
        page_criteria: PageCriteria,
        vhost: str | None = None,
    ) -> PageResult[Queue]:
        path = API / "queues"
        if vhost is not None:
            path = path / self._vhost(vhost)
        return await self._get(path.with_query(page_criteria), PageResult[Queue])

    @operation
    async def get_queue(
        self,
        vhost: str,
        queue_name: str,
        lengths_criteria: LengthsCriteria | None = None,
        rates_criteria: RatesCriteria | None = None,
    ) -> Queue:
        path = API / "queues" / self._vhost(vhost) / self._name(queue_name, "queue_name")
        return await self._get(path.with_query(lengths_criteria, rates_criteria), Queue)

    @operation
    async def create_queue(self, vhost: str, queue_name: str, queue_info: QueueInfo | None = None) -> None:
        path = API / "queues" / self._vhost(vhost) / self._name(queue_name, "queue_name")
        await self._put(str(path), queue_info or QueueInfo())

    @operation
    async def delete_queue(
        self,
        vhost: str,
        queue_name: str,
        criteria: DeleteQueueCriteria | None = None,
    ) -> None:
        path = API / "queues" / self._vhost(vhost) / self._name(queue_name, "queue_name")
        await self._delete(path.with_query(criteria))

    @operation
    async def get_bindings_for_queue(self, vhost: str, queue_name: str) -> list[Binding]:
        path = API / "queues" / self._vhost(vhost) / self._name(queue_name, "queue_name")
        return await self._get(str(path / "bindings"), list[Binding])

    @operation
    async def purge(self, vhost: str, queue_name: str) -> None:
        """Remove every ready message from the queue."""
        path = API / "queues" / self._vhost(vhost) / self._name(queue_name, "queue_name")
        await self._delete(str(path / "contents"))

    @operation
    async def get_messages_from_queue(
        self,
        vhost: str,
        queue_name: str,
        info: GetMessagesFromQueueInfo,
    ) -> list[Message]:
        """Fetch messages. This is destructive unless ackmode requeues them."""
        path = API / "queues" / self._vhost(vhost) / self._name(queue_name, "queue_name")
        return await self._post(str(path / "get"), info, list[Message])

    # =========================================================================
    # Bindings
    # =========================================================================

    @operation
    async def get_bindings(self) -> list[Binding]:
        return await self._get(str(API / "bindings"), list[Binding])

    def _queue_binding_path(self, vhost: str, exchange_name: str, queue_name: str) -> RelativePath:
        return (
            API / "bindings" / self._vhost(vhost)
            / "e" / self._name(exchange_name, "exchange_name")
            / "q" / self._name(queue_name, "queue_name")
        )

    def _exchange_binding_path(self, vhost: str, source: str, destination: str) -> RelativePath:
        return (
            API / "bindings" / self._vhost(vhost)
            / "e" / self._name(source, "source")
            / "e" / self._name(destination, "destination")
        )

    @operation
    async def create_queue_binding(
        self,
        vhost: str,
        exchange_name: str,
        queue_name: str,
        binding_info: BindingInfo | None = None,
    ) -> None:
        path = self._queue_binding_path(vhost, exchange_name, queue_name)
        await self._post(str(path), binding_info or BindingInfo())

    @operation
    async def create_exchange_binding(
        self,
        vhost: str,
        source: str,
        destination: str,
        binding_info: BindingInfo | None = None,
    ) -> None:
        path = self._exchange_binding_path(vhost, source, destination)
        await self._post(str(path), binding_info or BindingInfo())

    @operation
    async def get_queue_bindings(self, vhost: str, exchange_name: str, queue_name: str) -> list[Binding]:
        path = self._queue_binding_path(vhost, exchange_name, queue_name)
        return await self._get(str(path), list[Binding])

    @operation
    async def get_exchange_bindings(self, vhost: str, source: str, destination: str) -> list[Binding]:
        path = self._exchange_binding_path(vhost, source, destination)
        return await self._get(str(path), list[Binding])

    @operation
    async def delete_queue_binding(
        self,
        vhost: str,
        exchange_name: str,
        queue_name: str,
        properties_key: str,
    ) -> None:
        path = self._queue_binding_path(vhost, exchange_name, queue_name)
        key = properties_key_segment(self._name(properties_key, "properties_key"))
        await self._delete(str(path / key))

    @operation
    async def delete_exchange_binding(
        self,
        vhost: str,
        source: str,
        destination: str,
        properties_key: str,
    ) -> None:
        path = self._exchange_binding_path(vhost, source, destination)
        key = properties_key_segment(self._name(properties_key, "properties_key"))
        await self._delete(str(path / key))

    # =========================================================================
    # Vhosts
    # =========================================================================

    @operation
    async def get_vhosts(self) -> list[Vhost]:
        return await self._get(str(API / "vhosts"), list[Vhost])

    @operation
    async def get_vhost(self, vhost: str) -> Vhost:
        return await self._get(str(API / "vhosts" / self._vhost(vhost)), Vhost)

    @operation
    async def create_vhost(self, vhost: str) -> None:
        await self._put(str(API / "vhosts" / self._vhost(vhost)))

    @operation
    async def delete_vhost(self, vhost: str) -> None:
        await self._delete(str(API / "vhosts" / self._vhost(vhost)))

    @operation
    async def enable_tracing(self, vhost: str) -> None:
        await self._put(str(API / "vhosts" / self._vhost(vhost)), Vhost(name=vhost, tracing=True))

    @operation
    async def disable_tracing(self, vhost: str) -> None:
        await self._put(str(API / "vhosts" / self._vhost(vhost)), Vhost(name=vhost, tracing=False))

    # =========================================================================
    # Users and permissions
    # =========================================================================

    @operation
    async def get_users(self) -> list[User]:
        return await self._get(str(API / "users"), list[User])

    @operation
    async def get_user(self, user_name: str) -> User:
        return await self._get(str(API / "users" / self._name(user_name, "user_name")), User)

    @operation
    async def create_user(self, user_info: UserInfo) -> None:
        await self._put(str(API / "users" / self._name(user_info.name, "user_name")), user_info)

    @operation
    async def delete_user(self, user_name: str) -> None:
        await self._delete(str(API / "users" / self._name(user_name, "user_name")))

    @operation
    async def get_user_limits(self) -> list[UserLimits]:
        return await self._get(str(API / "user-limits"), list[UserLimits])

    @operation
    async def get_permissions(self) -> list[Permission]:
        return await self._get(str(API / "permissions"), list[Permission])

    @operation
    async def create_permission(self, vhost: str, permission_info: PermissionInfo) -> None:
        path = API / "permissions" / self._vhost(vhost) / self._name(permission_info.user, "user")
        await self._put(str(path), permission_info)

    @operation
    async def delete_permission(self, vhost: str, user_name: str) -> None:
        path = API / "permissions" / self._vhost(vhost) / self._name(user_name, "user_name")
        await self._delete(str(path))

    @operation
    async def get_topic_permissions(self) -> list[TopicPermission]:
        return await self._get(str(API / "topic-permissions"), list[TopicPermission])

    @operation
    async def create_topic_permission(self, vhost: str, topic_permission_info: TopicPermissionInfo) -> None:
        user = self._name(topic_permission_info.user, "user")
        self._name(topic_permission_info.exchange, "exchange")
        await self._put(str(API / "topic-permissions" / self._vhost(vhost) / user), topic_permission_info)

    @operation
    async def delete_topic_permission(self, vhost: str, user_name: str) -> None:
        path = API / "topic-permissions" / self._vhost(vhost) / self._name(user_name, "user_name")
        await self._delete(str(path))

    # =========================================================================
    # Policies and parameters
    # =========================================================================

    @operation
    async def get_policies(self) -> list[Policy]:
        return await self._get(str(API / "policies"), list[Policy])

    @operation
    async def create_policy(self, policy: Policy) -> None:
        """Create or replace a policy.

        Raises:
            ManagementValidationError: If name or vhost is empty, or the
                definition is missing
        """
        name = self._name(policy.name, "name")
        vhost = self._vhost(policy.vhost)
        if policy.definition is None:
            raise ManagementValidationError("Policy definition cannot be empty", field="definition")
        await self._put(str(API / "policies" / vhost / name), policy)

    @operation
    async def delete_policy(self, vhost: str, policy_name: str) -> None:
        path = API / "policies" / self._vhost(vhost) / self._name(policy_name, "policy_name")
        await self._delete(str(path))

    @operation
    async def get_parameters(self) -> list[Parameter]:
        return await self._get(str(API / "parameters"), list[Parameter])

    @operation
    async def create_parameter(self, component: str, vhost: str, name: str, value: Any) -> None:
        """Create or replace a parameter. value may be a payload model or plain JSON data."""
        path = (
            API / "parameters" / self._name(component, "component")
            / self._vhost(vhost) / self._name(name, "name")
        )
        try:
            parameter = Parameter(vhost=vhost, component=component, name=name, value=value)
        except ValidationError as exc:
            raise ManagementValidationError(
                f"Parameter value is not JSON data: {exc.errors()[0]['msg']}", field="value"
            ) from exc
        await self._put(str(path), parameter)

    @operation
    async def delete_parameter(self, component: str, vhost: str, name: str) -> None:
        path = (
            API / "parameters" / self._name(component, "component")
            / self._vhost(vhost) / self._name(name, "name")
        )
        await self._delete(str(path))

    # =========================================================================
    # Plugins
    # =========================================================================

    @operation
    async def get_federations(self) -> list[Federation]:
        """Federation links; requires the federation management plugin."""
        return await self._get(str(API / "federation-links"), list[Federation])

    @operation
    async def get_shovels(self) -> list[ShovelStatus]:
        """Shovel status; requires the shovel management plugin."""
        return await self._get(str(API / "shovels"), list[ShovelStatus])
