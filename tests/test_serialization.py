"""Unit tests for the tolerant converters and the JSON codec."""

import json
import math
from datetime import datetime, timezone

import pytest

from rmq_management.errors import DecodeError
from rmq_management.models import (
    BackingQueueStatus,
    ChannelDetail,
    ConsumerDetail,
    HaMode,
    HaParams,
    MessageRateDetails,
    MessageRateSample,
    Parameter,
    PolicyDefinition,
    QueueName,
    ShovelValue,
    User,
)
from rmq_management.serialization import (
    INT64_MAX,
    JsonCodec,
    SerializerConfig,
    dump_named_float,
    parse_named_float,
    to_dynamic,
    tolerant_int,
)

CONSUMER_DETAIL = {
    "queue": {"name": "Q", "vhost": "V"},
    "consumer_tag": "CT",
    "exclusive": False,
    "ack_required": True,
}


class TestEmptyArrayAsNone:
    """Fields that are an object, [] or null on the wire."""

    def test_empty_object_decodes_as_object(self, codec):
        """{} is a present, empty value."""
        detail = codec.decode(ConsumerDetail, json.dumps({**CONSUMER_DETAIL, "arguments": {}}))
        assert detail.arguments == {}

    def test_empty_array_is_absent(self, codec):
        """[] decodes to the all-default detail."""
        detail = codec.decode(ConsumerDetail, json.dumps({**CONSUMER_DETAIL, "arguments": []}))
        assert detail == ConsumerDetail(
            queue=QueueName(name="Q", vhost="V"),
            consumer_tag="CT",
            exclusive=False,
            ack_required=True,
        )
        assert detail.arguments is None

    def test_null_is_absent(self, codec):
        """null decodes to None."""
        detail = codec.decode(ConsumerDetail, json.dumps({**CONSUMER_DETAIL, "arguments": None}))
        assert detail.arguments is None

    def test_non_empty_array_raises(self, codec):
        """A populated array is not an accepted shape."""
        with pytest.raises(DecodeError) as exc:
            codec.decode(ConsumerDetail, json.dumps({**CONSUMER_DETAIL, "arguments": [1]}))
        assert exc.value.target == "ConsumerDetail"
        assert exc.value.errors[0][0].startswith("arguments")

    def test_nested_object_field(self, codec):
        """Object-typed fields accept [] the same way."""
        detail = codec.decode(ConsumerDetail, json.dumps({**CONSUMER_DETAIL, "channel_details": []}))
        assert detail.channel_details is None

    def test_string_raises(self, codec):
        """A string is not an object."""
        with pytest.raises(DecodeError):
            codec.decode(ConsumerDetail, json.dumps({**CONSUMER_DETAIL, "channel_details": "x"}))


class TestHaParams:
    """ha-params is a count or a node list."""

    def test_number_is_count(self, codec):
        """5 decodes to the exactly variant."""
        definition = codec.decode(PolicyDefinition, b'{"ha-mode": "exactly", "ha-params": 5}')
        assert definition.ha_params == HaParams(mode=HaMode.EXACTLY, exactly_count=5)

    def test_list_is_nodes_in_order(self, codec):
        """A string array decodes to the nodes variant, order kept."""
        definition = codec.decode(PolicyDefinition, b'{"ha-params": ["a", "b"]}')
        assert definition.ha_params.mode is HaMode.NODES
        assert definition.ha_params.nodes == ("a", "b")

    def test_round_trip(self, codec):
        """Each variant re-encodes to its original shape."""
        count = PolicyDefinition(ha_params=HaParams.exactly(5))
        nodes = PolicyDefinition(ha_params=HaParams.for_nodes("a", "b"))
        assert json.loads(codec.encode(count)) == {"ha-params": 5}
        assert json.loads(codec.encode(nodes)) == {"ha-params": ["a", "b"]}

    @pytest.mark.parametrize("payload", ['"two"', "true", '{"count": 1}', "[1, 2]", "1.5"])
    def test_other_shapes_raise(self, codec, payload):
        """Anything but an integer or a string array is rejected."""
        with pytest.raises(DecodeError):
            codec.decode(PolicyDefinition, f'{{"ha-params": {payload}}}')


class TestNamedFloats:
    """Infinity and NaN spelled as strings."""

    def test_decode_infinity(self):
        assert parse_named_float("Infinity") == math.inf
        assert parse_named_float("-infinity") == -math.inf

    @pytest.mark.parametrize("literal", ["NaN", "Nan", "nan", "NAN"])
    def test_decode_nan_any_case(self, literal):
        assert math.isnan(parse_named_float(literal))

    def test_numbers_pass_through(self):
        assert parse_named_float(3) == 3.0
        assert parse_named_float(0.25) == 0.25

    def test_encode(self):
        """Special values are written with their declared spelling."""
        assert dump_named_float(math.inf) == "Infinity"
        assert dump_named_float(-math.inf) == "-Infinity"
        assert dump_named_float(math.nan) == "NaN"
        assert dump_named_float(1.5) == 1.5

    def test_banana_raises(self, codec):
        """Any other string is a decode error."""
        with pytest.raises(DecodeError):
            codec.decode(MessageRateDetails, b'{"rate": "banana"}')

    def test_field_round_trip(self, codec):
        """The codec applies the converter on both sides."""
        details = codec.decode(MessageRateDetails, b'{"rate": "Infinity"}')
        assert details.rate == math.inf
        assert json.loads(codec.encode(details)) == {"rate": "Infinity"}

    def test_backing_queue_rates(self, codec):
        status = codec.decode(BackingQueueStatus, b'{"avg_egress_rate": "Infinity", "len": 2}')
        assert status.avg_egress_rate == math.inf
        assert status.len == 2


class TestUnixMilliseconds:
    """Timestamps as milliseconds since the epoch."""

    def test_decode(self, codec):
        sample = codec.decode(MessageRateSample, b'{"sample": 3, "timestamp": 1679308050142}')
        assert sample.timestamp == datetime(2023, 3, 20, 10, 27, 30, 142000, tzinfo=timezone.utc)

    def test_encode_is_exact(self, codec):
        sample = MessageRateSample(sample=1, timestamp=datetime(1970, 1, 1, 0, 0, 1, 5000, tzinfo=timezone.utc))
        assert json.loads(codec.encode(sample)) == {"sample": 1, "timestamp": 1005}

    def test_rejects_string(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(MessageRateSample, b'{"timestamp": "2023-03-20"}')

    def test_sub_millisecond_truncated(self, codec):
        """Timestamps carry whole milliseconds, so constructed values round-trip."""
        sample = MessageRateSample(sample=1, timestamp=datetime(2023, 3, 20, 10, 27, 30, 1500, tzinfo=timezone.utc))
        assert sample.timestamp.microsecond == 1000
        assert codec.decode(MessageRateSample, codec.encode(sample)) == sample


class TestTolerantScalars:
    """Fields the broker fills with placeholders."""

    @pytest.mark.parametrize(
        "value,expected",
        [(58350, 58350), ("58350", 58350), ("unknown", 0), (None, 0), (True, 0), ([], 0), (12.0, 12)],
    )
    def test_tolerant_int(self, value, expected):
        assert tolerant_int(value) == expected

    def test_channel_detail_placeholders(self, codec):
        """Non-numeric ports become 0 and non-string hosts become None."""
        detail = codec.decode(
            ChannelDetail,
            b'{"name": "c", "number": "3", "peer_port": "undefined", "peer_host": 17}',
        )
        assert detail.number == 3
        assert detail.peer_port == 0
        assert detail.peer_host is None


class TestDynamicValues:
    """Arbitrary JSON normalised to a closed set of types."""

    def test_int64_stays_integral(self):
        assert to_dynamic(INT64_MAX) == INT64_MAX
        assert isinstance(to_dynamic(INT64_MAX), int)

    def test_beyond_int64_becomes_float(self):
        value = to_dynamic(INT64_MAX + 1)
        assert isinstance(value, float)

    def test_nested(self):
        assert to_dynamic({"a": [1, 2.5, None, True, {"b": "c"}]}) == {"a": [1, 2.5, None, True, {"b": "c"}]}

    def test_tuple_becomes_list(self):
        assert to_dynamic((1, 2)) == [1, 2]

    def test_rejects_non_json(self):
        with pytest.raises(ValueError):
            to_dynamic(object())

    def test_parameter_value_preserved(self, codec):
        """A parameter value decodes as plain JSON data and re-encodes verbatim."""
        body = {
            "vhost": "/",
            "component": "shovel",
            "name": "move",
            "value": {"src-uri": "amqp://", "src-queue": "a", "dest-uri": ["amqp://x", "amqp://y"], "prefetch-count": 10},
        }
        parameter = codec.decode(Parameter, json.dumps(body))
        assert parameter.value["prefetch-count"] == 10
        assert json.loads(codec.encode(parameter)) == body

    def test_parameter_typed_view(self, codec):
        """value_as turns the dynamic value into a payload model."""
        parameter = Parameter(
            vhost="/",
            component="shovel",
            name="move",
            value={"src-uri": "amqp://", "src-queue": "a", "dest-uri": ["amqp://x", "amqp://y"]},
        )
        shovel = parameter.value_as(ShovelValue)
        assert shovel.src_queue == "a"
        assert shovel.dest_uri == "amqp://x,amqp://y"

    def test_model_value_dumped_with_default_config(self):
        """A payload model becomes plain JSON on construction, without its None fields."""
        parameter = Parameter(
            vhost="/",
            component="shovel",
            name="move",
            value=ShovelValue(src_uri="amqp://", dest_uri="amqp://b"),
        )
        body = json.loads(JsonCodec(SerializerConfig(omit_none=False)).encode(parameter))
        assert body["value"] == {"src-uri": "amqp://", "dest-uri": "amqp://b"}


class TestCommaSeparatedTags:
    """User tags arrive as a string on old brokers and an array on new ones."""

    def test_string(self, codec):
        user = codec.decode(User, b'{"name": "u", "tags": "administrator,management"}')
        assert user.tags == ("administrator", "management")

    def test_array(self, codec):
        user = codec.decode(User, b'{"name": "u", "tags": ["monitoring"]}')
        assert user.tags == ("monitoring",)

    def test_empty_string(self, codec):
        user = codec.decode(User, b'{"name": "u", "tags": ""}')
        assert user.tags == ()


class TestCodec:
    """Codec configuration and error wrapping."""

    def test_omit_none_by_default(self, codec):
        """Unset optional fields are left out."""
        assert json.loads(codec.encode(PolicyDefinition(max_length=10))) == {"max-length": 10}

    def test_keep_none_when_configured(self):
        """With omit_none off, unset fields are written as null."""
        codec = JsonCodec(SerializerConfig(omit_none=False))
        body = json.loads(codec.encode(PolicyDefinition(max_length=10)))
        assert body["max-length"] == 10
        assert body["ha-mode"] is None

    def test_indent(self):
        codec = JsonCodec(SerializerConfig(indent=2))
        assert b"\n" in codec.encode(PolicyDefinition(max_length=1))

    def test_malformed_json(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(PolicyDefinition, b"{not json")

    def test_unknown_enum_spelling_raises(self, codec):
        """Unknown enum strings are errors, never silently defaulted."""
        with pytest.raises(DecodeError) as exc:
            codec.decode(PolicyDefinition, b'{"overflow": "drop-tail"}')
        assert "overflow" in str(exc.value)

    def test_list_target(self, codec):
        details = codec.decode(list[MessageRateDetails], b'[{"rate": 1}, {"rate": 2}]')
        assert [d.rate for d in details] == [1.0, 2.0]
