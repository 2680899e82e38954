"""Runtime parameters and the typed payloads of federation and shovels."""

from dataclasses import dataclass
from typing import Annotated, Any, TypeVar
from urllib.parse import quote, unquote, urlsplit

from pydantic import Field, PlainSerializer, PlainValidator

from rmq_management.models.base import ExtensibleModel, WireModel
from rmq_management.serialization import (
    DEFAULT_CONFIG,
    DynamicValue,
    JsonCodec,
    StringOrList,
    WireEnum,
)

M = TypeVar("M", bound=WireModel)


@dataclass(frozen=True)
class AmqpUri:
    """An AMQP URI, written to the wire as its string form."""

    host: str
    port: int | None = None
    username: str | None = None
    password: str | None = None
    vhost: str | None = None
    scheme: str = "amqp"

    def __str__(self) -> str:
        credentials = ""
        if self.username is not None:
            credentials = quote(self.username, safe="")
            if self.password is not None:
                credentials += ":" + quote(self.password, safe="")
            credentials += "@"
        port = f":{self.port}" if self.port is not None else ""
        vhost = "/" + quote(self.vhost, safe="") if self.vhost is not None else ""
        return f"{self.scheme}://{credentials}{self.host}{port}{vhost}"

    @classmethod
    def parse(cls, uri: str) -> "AmqpUri":
        parts = urlsplit(uri)
        if parts.scheme not in ("amqp", "amqps") or not parts.hostname:
            raise ValueError(f"'{uri}' is not an AMQP URI")
        vhost = unquote(parts.path[1:]) if parts.path else None
        return cls(
            host=parts.hostname,
            port=parts.port,
            username=unquote(parts.username) if parts.username is not None else None,
            password=unquote(parts.password) if parts.password is not None else None,
            vhost=vhost,
            scheme=parts.scheme,
        )


def _parse_amqp_uri(value: Any) -> AmqpUri:
    if isinstance(value, AmqpUri):
        return value
    if isinstance(value, str):
        return AmqpUri.parse(value)
    raise ValueError(f"expected an AMQP URI string, got {type(value).__name__}")


def _dump_amqp_uri(value: AmqpUri) -> str:
    return str(value)


AmqpUriValue = Annotated[AmqpUri, PlainValidator(_parse_amqp_uri), PlainSerializer(_dump_amqp_uri)]


class Parameter(WireModel):
    """A component-scoped parameter with an arbitrary JSON value."""

    vhost: str
    component: str
    name: str
    value: DynamicValue = None

    def value_as(self, model: type[M]) -> M:
        """Decode value into a typed payload model.

        Raises:
            DecodeError: If value does not match model
        """
        return JsonCodec(DEFAULT_CONFIG).decode_value(model, self.value)


class FederationUpstreamValue(ExtensibleModel):
    """Value of a federation-upstream parameter."""

    uri: AmqpUriValue
    expires: int | None = None
    message_ttl: int | None = Field(default=None, alias="message-ttl")
    max_hops: int | None = Field(default=None, alias="max-hops")
    prefetch_count: int | None = Field(default=None, alias="prefetch-count")
    reconnect_delay: int | None = Field(default=None, alias="reconnect-delay")
    ack_mode: str | None = Field(default=None, alias="ack-mode")
    trust_user_id: bool | None = Field(default=None, alias="trust-user-id")
    exchange: str | None = None
    queue: str | None = None


class ShovelAckMode(WireEnum):
    ON_CONFIRM = "on-confirm"
    ON_PUBLISH = "on-publish"
    NO_ACK = "no-ack"


class ShovelValue(ExtensibleModel):
    """Value of a shovel parameter.

    src-uri and dest-uri may be a list of URIs on the wire; they are read
    as one comma-joined string.
    """

    src_protocol: str | None = Field(default=None, alias="src-protocol")
    src_uri: StringOrList = Field(alias="src-uri")
    src_queue: str | None = Field(default=None, alias="src-queue")
    src_exchange: str | None = Field(default=None, alias="src-exchange")
    src_exchange_key: str | None = Field(default=None, alias="src-exchange-key")
    src_delete_after: DynamicValue = Field(default=None, alias="src-delete-after")
    dest_protocol: str | None = Field(default=None, alias="dest-protocol")
    dest_uri: StringOrList = Field(alias="dest-uri")
    dest_queue: str | None = Field(default=None, alias="dest-queue")
    dest_exchange: str | None = Field(default=None, alias="dest-exchange")
    dest_exchange_key: str | None = Field(default=None, alias="dest-exchange-key")
    ack_mode: ShovelAckMode | None = Field(default=None, alias="ack-mode")
    add_forward_headers: bool | None = Field(default=None, alias="add-forward-headers")
    reconnect_delay: int | None = Field(default=None, alias="reconnect-delay")
