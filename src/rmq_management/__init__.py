"""Typed async client for the RabbitMQ HTTP management API."""

from rmq_management.client import ManagementClient
from rmq_management.config import Settings, get_settings
from rmq_management.errors import (
    DecodeError,
    ManagementClientError,
    ManagementConnectionError,
    ManagementValidationError,
    UnexpectedStatusCodeError,
)
from rmq_management.serialization import JsonCodec, SerializerConfig

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "JsonCodec",
    "ManagementClient",
    "ManagementClientError",
    "ManagementConnectionError",
    "ManagementValidationError",
    "SerializerConfig",
    "Settings",
    "UnexpectedStatusCodeError",
    "__version__",
    "get_settings",
]
