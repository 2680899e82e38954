"""Tolerant converters and the JSON codec.

The broker's JSON is loosely typed and has drifted between versions: objects
that turn into empty arrays when there is nothing to report, numbers that
arrive as strings, floats spelled "Infinity". Each converter below handles one
of those inconsistencies and is attached to model fields through Annotated
metadata. Converters are plain functions with no state.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Mapping, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    PlainSerializer,
    PlainValidator,
    TypeAdapter,
    ValidationError,
)

from rmq_management.errors import DecodeError
from rmq_management.naming import to_wire_name

T = TypeVar("T")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# Serializer configuration
# =============================================================================


@dataclass(frozen=True)
class SerializerConfig:
    """Immutable settings handed to every encode call.

    Attributes:
        omit_none: Drop declared fields whose value is None on write
        indent: Pretty-print indentation, None for compact output
    """

    omit_none: bool = True
    indent: int | None = None

    def context(self) -> dict[str, Any]:
        return {"omit_none": self.omit_none}


DEFAULT_CONFIG = SerializerConfig()


# =============================================================================
# Enum spellings
# =============================================================================


class WireEnum(str, Enum):
    """String enum whose auto() values follow the naming rule.

    Members with a broker spelling that is not a mechanical transform of the
    member name declare the spelling explicitly. Decoding an unknown spelling
    is an error.
    """

    @staticmethod
    def _generate_next_value_(name, start, count, last_values):
        return to_wire_name(name)

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Variant empty collections
# =============================================================================


def empty_array_as_none(value: Any) -> Any:
    """Treat [] as absent; reject any other array."""
    if isinstance(value, list):
        if value:
            raise ValueError(f"expected an object, null or [], got a non-empty array {value!r}")
        return None
    return value


EmptyArrayAsNone = BeforeValidator(empty_array_as_none)


# =============================================================================
# Dynamic JSON values
# =============================================================================


def to_dynamic(value: Any) -> Any:
    """Normalize arbitrary JSON into null/bool/int/float/str/list/dict.

    Integers outside the signed 64-bit range become floats. Pydantic models
    are dumped under their wire names so that typed payloads can be used
    wherever a dynamic value is expected. The dump happens here, on input, so
    it always uses DEFAULT_CONFIG: None fields of such a model are dropped
    whatever SerializerConfig later encodes the enclosing value.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return value
        return float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, Mapping):
        return {str(key): to_dynamic(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamic(item) for item in value]
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, context=DEFAULT_CONFIG.context())
    raise ValueError(f"{type(value).__name__} is not a JSON value")


def to_dynamic_map(value: Any) -> dict[str, Any]:
    """Decode a string-keyed map, accepting [] as the empty map."""
    if isinstance(value, list):
        if value:
            raise ValueError(f"expected an object or [], got a non-empty array {value!r}")
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"expected an object, got {type(value).__name__}")
    return to_dynamic(value)


def to_dynamic_list(value: Any) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"expected an array, got {type(value).__name__}")
    return to_dynamic(value)


DynamicValue = Annotated[Any, PlainValidator(to_dynamic), PlainSerializer(to_dynamic)]
DynamicMap = Annotated[
    dict[str, Any], PlainValidator(to_dynamic_map), PlainSerializer(to_dynamic)
]
DynamicList = Annotated[list[Any], PlainValidator(to_dynamic_list), PlainSerializer(to_dynamic)]


# =============================================================================
# Named floating point literals
# =============================================================================

_NAMED_FLOATS = {
    "infinity": math.inf,
    "-infinity": -math.inf,
    "nan": math.nan,
}


def parse_named_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return _NAMED_FLOATS[value.lower()]
        except KeyError:
            raise ValueError(f"'{value}' is not a number literal") from None
    raise ValueError(f"expected a number, got {type(value).__name__}")


def dump_named_float(value: float) -> float | str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value


NamedFloat = Annotated[float, PlainValidator(parse_named_float), PlainSerializer(dump_named_float)]


# =============================================================================
# Unix epoch milliseconds
# =============================================================================


def from_unix_ms(value: Any) -> datetime:
    """Decode epoch milliseconds. Datetimes are truncated to whole milliseconds."""
    if isinstance(value, datetime):
        value = value.replace(microsecond=value.microsecond // 1000 * 1000)
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected integer milliseconds, got {value!r}")
    return EPOCH + timedelta(milliseconds=value)


def to_unix_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)


UnixMsDatetime = Annotated[datetime, PlainValidator(from_unix_ms), PlainSerializer(to_unix_ms)]


# =============================================================================
# Tolerant scalars
# =============================================================================


def tolerant_int(value: Any) -> int:
    """Decode a number, or a numeric string; anything else is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def tolerant_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


TolerantInt = Annotated[int, PlainValidator(tolerant_int)]
TolerantStr = Annotated[str | None, PlainValidator(tolerant_str)]


def string_or_list(value: Any) -> str:
    """Accept a string or a list of strings, joining the latter with commas."""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return ",".join(value)
    raise ValueError(f"expected a string or an array of strings, got {value!r}")


StringOrList = Annotated[str, PlainValidator(string_or_list)]


def split_list(value: Any) -> tuple[str, ...]:
    """Accept a comma-separated string or a list of strings."""
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise ValueError(f"expected a string or an array of strings, got {value!r}")


def join_list(value: tuple[str, ...]) -> str:
    return ",".join(value)


def as_list(value: tuple[str, ...]) -> list[str]:
    return list(value)


# Older brokers send "a,b", newer ones send ["a", "b"].
CommaSeparatedList = Annotated[tuple[str, ...], PlainValidator(split_list), PlainSerializer(as_list)]
CommaSeparatedString = Annotated[
    tuple[str, ...], PlainValidator(split_list), PlainSerializer(join_list)
]


# =============================================================================
# Codec
# =============================================================================


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


@dataclass(frozen=True)
class JsonCodec:
    """Encode and decode wire payloads with an explicit SerializerConfig."""

    config: SerializerConfig = field(default=DEFAULT_CONFIG)

    def decode(self, target: type[T] | Any, payload: bytes | str) -> T:
        """Decode a JSON document into target.

        Raises:
            DecodeError: If the document does not match target
        """
        try:
            return _adapter(target).validate_json(payload)
        except ValidationError as exc:
            raise DecodeError.from_validation_error(target, exc) from exc

    def decode_value(self, target: type[T] | Any, value: Any) -> T:
        """Decode an already parsed JSON value into target."""
        try:
            return _adapter(target).validate_python(value)
        except ValidationError as exc:
            raise DecodeError.from_validation_error(target, exc) from exc

    def encode(self, value: Any, target: Any = None) -> bytes:
        """Encode value to JSON bytes using wire names."""
        return _adapter(target if target is not None else type(value)).dump_json(
            value,
            by_alias=True,
            indent=self.config.indent,
            context=self.config.context(),
        )

    def to_wire(self, value: Any, target: Any = None) -> Any:
        """Encode value to plain JSON-compatible Python objects."""
        return _adapter(target if target is not None else type(value)).dump_python(
            value,
            mode="json",
            by_alias=True,
            context=self.config.context(),
        )
