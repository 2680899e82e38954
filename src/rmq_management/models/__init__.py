"""Domain model of the management API."""

from rmq_management.models.base import ExtensibleModel, WireModel
from rmq_management.models.bindings import Binding, BindingInfo, DestinationType
from rmq_management.models.cluster import (
    AlivenessResult,
    Application,
    AuthMechanism,
    Context,
    Definitions,
    ExchangeTypeSpec,
    Federation,
    FederationStatus,
    HealthCheckResult,
    Listener,
    Node,
    Overview,
    ShovelStatus,
    SocketOpts,
)
from rmq_management.models.connections import (
    Capabilities,
    Channel,
    ChannelDetail,
    ClientProperties,
    Connection,
    ConnectionDetails,
    Consumer,
    ConsumerDetail,
)
from rmq_management.models.criteria import (
    DeleteExchangeCriteria,
    DeleteQueueCriteria,
    LengthsCriteria,
    PageCriteria,
    PageResult,
    RatesCriteria,
)
from rmq_management.models.exchanges import EXCHANGE_TYPES, Exchange, ExchangeInfo
from rmq_management.models.messages import (
    PAYLOAD_ENCODINGS,
    AckMode,
    GetMessagesFromQueueInfo,
    Message,
    PublishInfo,
    PublishResult,
)
from rmq_management.models.parameters import (
    AmqpUri,
    FederationUpstreamValue,
    Parameter,
    ShovelAckMode,
    ShovelValue,
)
from rmq_management.models.policies import (
    ApplyMode,
    DeadLetterStrategy,
    HaMode,
    HaParams,
    HaPromote,
    HaSyncMode,
    Overflow,
    Policy,
    PolicyDefinition,
    QueueLocator,
    QueueVersion,
)
from rmq_management.models.queues import Queue, QueueInfo, QueueName, QueueType
from rmq_management.models.stats import (
    BackingQueueStatus,
    LengthsDetails,
    LengthsSample,
    MessageRateDetails,
    MessageRateSample,
    MessageStats,
    ObjectTotals,
    QueueTotals,
)
from rmq_management.models.users import (
    ALLOW_ALL,
    DENY_ALL,
    HashingAlgorithm,
    Limits,
    Permission,
    PermissionInfo,
    TopicPermission,
    TopicPermissionInfo,
    User,
    UserInfo,
    UserLimits,
    UserTag,
)
from rmq_management.models.vhosts import Vhost

__all__ = [
    "ALLOW_ALL",
    "DENY_ALL",
    "EXCHANGE_TYPES",
    "PAYLOAD_ENCODINGS",
    "AckMode",
    "AlivenessResult",
    "AmqpUri",
    "Application",
    "ApplyMode",
    "AuthMechanism",
    "BackingQueueStatus",
    "Binding",
    "BindingInfo",
    "Capabilities",
    "Channel",
    "ChannelDetail",
    "ClientProperties",
    "Connection",
    "ConnectionDetails",
    "Consumer",
    "ConsumerDetail",
    "Context",
    "DeadLetterStrategy",
    "Definitions",
    "DeleteExchangeCriteria",
    "DeleteQueueCriteria",
    "DestinationType",
    "Exchange",
    "ExchangeInfo",
    "ExchangeTypeSpec",
    "ExtensibleModel",
    "Federation",
    "FederationStatus",
    "FederationUpstreamValue",
    "GetMessagesFromQueueInfo",
    "HaMode",
    "HaParams",
    "HaPromote",
    "HaSyncMode",
    "HashingAlgorithm",
    "HealthCheckResult",
    "LengthsCriteria",
    "LengthsDetails",
    "LengthsSample",
    "Limits",
    "Listener",
    "Message",
    "MessageRateDetails",
    "MessageRateSample",
    "MessageStats",
    "Node",
    "ObjectTotals",
    "Overflow",
    "Overview",
    "PageCriteria",
    "PageResult",
    "Parameter",
    "Permission",
    "PermissionInfo",
    "Policy",
    "PolicyDefinition",
    "PublishInfo",
    "PublishResult",
    "Queue",
    "QueueInfo",
    "QueueLocator",
    "QueueName",
    "QueueTotals",
    "QueueType",
    "QueueVersion",
    "RatesCriteria",
    "ShovelAckMode",
    "ShovelStatus",
    "ShovelValue",
    "SocketOpts",
    "TopicPermission",
    "TopicPermissionInfo",
    "User",
    "UserInfo",
    "UserLimits",
    "UserTag",
    "Vhost",
    "WireModel",
]
