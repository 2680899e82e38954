"""Policies and their definitions."""

from dataclasses import dataclass
from enum import IntEnum, auto
from typing import Annotated, Any

from pydantic import Field, PlainSerializer, PlainValidator

from rmq_management.errors import ManagementValidationError
from rmq_management.models.base import ExtensibleModel
from rmq_management.serialization import WireEnum


class ApplyMode(WireEnum):
    ALL = auto()
    EXCHANGES = auto()
    QUEUES = auto()


class HaMode(WireEnum):
    ALL = "all"
    EXACTLY = "exactly"
    NODES = "nodes"


class HaSyncMode(WireEnum):
    MANUAL = auto()
    AUTOMATIC = auto()


class HaPromote(WireEnum):
    WHEN_SYNCED = "when-synced"
    ALWAYS = "always"


class QueueLocator(WireEnum):
    CLIENT_LOCAL = "client-local"
    BALANCED = "balanced"
    MIN_MASTERS = "min-masters"
    RANDOM = "random"


class Overflow(WireEnum):
    DROP_HEAD = "drop-head"
    REJECT_PUBLISH = "reject-publish"
    REJECT_PUBLISH_DLX = "reject-publish-dlx"


class DeadLetterStrategy(WireEnum):
    AT_MOST_ONCE = "at-most-once"
    AT_LEAST_ONCE = "at-least-once"


class QueueVersion(IntEnum):
    V1 = 1
    V2 = 2


@dataclass(frozen=True)
class HaParams:
    """The ha-params value: a replica count or an explicit node list.

    mode records which shape was read so the value is written back the same
    way.
    """

    mode: HaMode
    exactly_count: int | None = None
    nodes: tuple[str, ...] | None = None

    def __post_init__(self):
        if self.mode is HaMode.EXACTLY and self.exactly_count is None:
            raise ManagementValidationError("ha-params in 'exactly' mode needs a count")
        if self.mode is HaMode.NODES and self.nodes is None:
            raise ManagementValidationError("ha-params in 'nodes' mode needs a node list")
        if self.mode is HaMode.ALL:
            raise ManagementValidationError("ha-params has no representation in 'all' mode")

    @classmethod
    def exactly(cls, count: int) -> "HaParams":
        return cls(mode=HaMode.EXACTLY, exactly_count=count)

    @classmethod
    def for_nodes(cls, *nodes: str) -> "HaParams":
        return cls(mode=HaMode.NODES, nodes=tuple(nodes))


def parse_ha_params(value: Any) -> HaParams:
    if isinstance(value, HaParams):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return HaParams.exactly(value)
    if isinstance(value, (list, tuple)) and all(isinstance(node, str) for node in value):
        return HaParams.for_nodes(*value)
    raise ValueError(f"ha-params must be a number or an array of node names, got {value!r}")


def dump_ha_params(value: HaParams) -> int | list[str]:
    if value.mode is HaMode.EXACTLY:
        return value.exactly_count
    return list(value.nodes)


HaParamsValue = Annotated[HaParams, PlainValidator(parse_ha_params), PlainSerializer(dump_ha_params)]


class PolicyDefinition(ExtensibleModel):
    """Broker tuning keys applied by a policy.

    Unset keys are left out on write, so a definition round-trips exactly.
    Keys this model does not know are kept as extension data.
    """

    max_length: int | None = Field(default=None, alias="max-length")
    max_length_bytes: int | None = Field(default=None, alias="max-length-bytes")
    overflow: Overflow | None = None
    expires: int | None = None
    dead_letter_exchange: str | None = Field(default=None, alias="dead-letter-exchange")
    dead_letter_routing_key: str | None = Field(default=None, alias="dead-letter-routing-key")
    message_ttl: int | None = Field(default=None, alias="message-ttl")
    consumer_timeout: int | None = Field(default=None, alias="consumer-timeout")
    ha_mode: HaMode | None = Field(default=None, alias="ha-mode")
    ha_params: HaParamsValue | None = Field(default=None, alias="ha-params")
    ha_sync_mode: HaSyncMode | None = Field(default=None, alias="ha-sync-mode")
    ha_sync_batch_size: int | None = Field(default=None, alias="ha-sync-batch-size")
    ha_promote_on_shutdown: HaPromote | None = Field(default=None, alias="ha-promote-on-shutdown")
    ha_promote_on_failure: HaPromote | None = Field(default=None, alias="ha-promote-on-failure")
    queue_version: QueueVersion | None = Field(default=None, alias="queue-version")
    queue_master_locator: QueueLocator | None = Field(default=None, alias="queue-master-locator")
    queue_leader_locator: QueueLocator | None = Field(default=None, alias="queue-leader-locator")
    delivery_limit: int | None = Field(default=None, alias="delivery-limit")
    dead_letter_strategy: DeadLetterStrategy | None = Field(
        default=None, alias="dead-letter-strategy"
    )
    max_age: str | None = Field(default=None, alias="max-age")
    stream_max_segment_size_bytes: int | None = Field(
        default=None, alias="stream-max-segment-size-bytes"
    )
    alternate_exchange: str | None = Field(default=None, alias="alternate-exchange")
    federation_upstream: str | None = Field(default=None, alias="federation-upstream")
    federation_upstream_set: str | None = Field(default=None, alias="federation-upstream-set")
    queue_mode: str | None = Field(default=None, alias="queue-mode")


class Policy(ExtensibleModel):
    """A pattern-matched set of definition keys scoped to a vhost."""

    vhost: str = ""
    name: str = ""
    pattern: str = ""
    apply_to: ApplyMode = Field(default=ApplyMode.ALL, alias="apply-to")
    definition: PolicyDefinition | None = None
    priority: int = 0
