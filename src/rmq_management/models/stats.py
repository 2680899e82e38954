"""Broker-reported counters and rate samples."""

from typing import Annotated

from rmq_management.models.base import ExtensibleModel, WireModel
from rmq_management.serialization import (
    DynamicList,
    EmptyArrayAsNone,
    NamedFloat,
    UnixMsDatetime,
)


class MessageRateSample(WireModel):
    sample: int = 0
    timestamp: UnixMsDatetime


class LengthsSample(WireModel):
    sample: int = 0
    timestamp: UnixMsDatetime


class MessageRateDetails(WireModel):
    """Rate of a counter, with optional averages and samples."""

    rate: NamedFloat = 0.0
    avg_rate: NamedFloat | None = None
    avg: NamedFloat | None = None
    samples: tuple[MessageRateSample, ...] | None = None


class LengthsDetails(WireModel):
    """Rate of a queue length, with optional averages and samples."""

    rate: NamedFloat = 0.0
    avg_rate: NamedFloat | None = None
    avg: NamedFloat | None = None
    samples: tuple[LengthsSample, ...] | None = None


RateDetails = Annotated[MessageRateDetails | None, EmptyArrayAsNone]


class MessageStats(ExtensibleModel):
    """Message counters; each may come with a *_details rate block."""

    ack: int = 0
    ack_details: RateDetails = None
    confirm: int = 0
    confirm_details: RateDetails = None
    deliver: int = 0
    deliver_details: RateDetails = None
    deliver_get: int = 0
    deliver_get_details: RateDetails = None
    deliver_no_ack: int = 0
    deliver_no_ack_details: RateDetails = None
    disk_reads: int = 0
    disk_reads_details: RateDetails = None
    disk_writes: int = 0
    disk_writes_details: RateDetails = None
    drop_unroutable: int = 0
    drop_unroutable_details: RateDetails = None
    get: int = 0
    get_details: RateDetails = None
    get_empty: int = 0
    get_empty_details: RateDetails = None
    get_no_ack: int = 0
    get_no_ack_details: RateDetails = None
    publish: int = 0
    publish_details: RateDetails = None
    publish_in: int = 0
    publish_in_details: RateDetails = None
    publish_out: int = 0
    publish_out_details: RateDetails = None
    redeliver: int = 0
    redeliver_details: RateDetails = None
    return_unroutable: int = 0
    return_unroutable_details: RateDetails = None


class BackingQueueStatus(ExtensibleModel):
    """Internal state of a classic queue's backing store."""

    mode: str | None = None
    q1: int = 0
    q2: int = 0
    q3: int = 0
    q4: int = 0
    delta: DynamicList | None = None
    len: int = 0
    target_ram_count: int | str | None = None
    next_seq_id: int = 0
    next_deliver_seq_id: int | None = None
    avg_ingress_rate: NamedFloat = 0.0
    avg_egress_rate: NamedFloat = 0.0
    avg_ack_ingress_rate: NamedFloat = 0.0
    avg_ack_egress_rate: NamedFloat = 0.0
    version: int | None = None


class QueueTotals(WireModel):
    messages: int = 0
    messages_details: Annotated[LengthsDetails | None, EmptyArrayAsNone] = None
    messages_ready: int = 0
    messages_ready_details: Annotated[LengthsDetails | None, EmptyArrayAsNone] = None
    messages_unacknowledged: int = 0
    messages_unacknowledged_details: Annotated[LengthsDetails | None, EmptyArrayAsNone] = None


class ObjectTotals(WireModel):
    consumers: int = 0
    queues: int = 0
    exchanges: int = 0
    connections: int = 0
    channels: int = 0
