"""Name sanitization and resource path construction.

Resource names become URL path segments. Each segment is escaped on its own,
so a name containing "/" never splits into two segments.
"""

from typing import Any, Mapping
from urllib.parse import quote, urlencode

from pydantic import BaseModel

from rmq_management.errors import ManagementValidationError
from rmq_management.naming import wire_keys

# Characters a path segment may carry verbatim (RFC 3986 pchar minus the ones
# escaped explicitly below).
_PCHAR_SAFE = "-._~!$&'()*,;=@"

_VHOST_ESCAPES = {"/": "%2f"}

_NAME_ESCAPES = {
    "/": "%2f",
    "+": "%2B",
    "#": "%23",
    ":": "%3A",
    "[": "%5B",
    "]": "%5D",
}


def _escape(name: str, escapes: Mapping[str, str]) -> str:
    return "".join(escapes.get(char) or quote(char, safe=_PCHAR_SAFE + "+:") for char in name)


def sanitise_vhost(name: str) -> str:
    """Escape a vhost name for use as a path segment."""
    return _escape(name, _VHOST_ESCAPES)


def sanitise_name(name: str) -> str:
    """Escape an exchange, queue, user or policy name for use as a path segment."""
    return _escape(name, _NAME_ESCAPES)


def escape_properties_key(properties_key: str) -> str:
    """Re-escape a binding properties key for the binding delete endpoint.

    The broker URL-decodes this segment twice, so an already escaped
    underscore (%5F) must travel as %255F. Only binding deletion needs this.
    """
    return properties_key.replace("%5F", "%255F")


class Segment(str):
    """A path segment that is already escaped and is used verbatim."""

    __slots__ = ()


def vhost_segment(name: str) -> Segment:
    return Segment(sanitise_vhost(name))


def properties_key_segment(properties_key: str) -> Segment:
    """Escape a properties key as a path segment, keeping its %XX sequences."""
    return Segment(escape_properties_key(quote(properties_key, safe=_PCHAR_SAFE + "%")))


class RelativePath:
    """An immutable sequence of escaped path segments.

    Example:
        >>> str(RelativePath("api", "queues") / vhost_segment("/") / "a+b")
        'api/queues/%2f/a%2Bb'
    """

    __slots__ = ("_segments",)

    def __init__(self, *segments: str):
        self._segments: tuple[str, ...] = tuple(_encode(segment) for segment in segments)

    def __truediv__(self, segment: str) -> "RelativePath":
        path = RelativePath()
        path._segments = self._segments + (_encode(segment),)
        return path

    def __str__(self) -> str:
        return "/".join(self._segments)

    def __repr__(self) -> str:
        return f"RelativePath({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RelativePath):
            return self._segments == other._segments
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._segments)

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    def with_query(self, *criteria: "BaseModel | Mapping[str, Any] | None") -> str:
        """Render the path followed by the query string built from criteria."""
        query = build_query(*criteria)
        return f"{self}?{query}" if query else str(self)


def _encode(segment: str) -> str:
    if isinstance(segment, Segment):
        return str(segment)
    if not segment:
        raise ManagementValidationError("Path segment cannot be empty")
    return sanitise_name(segment)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def query_parameters(criteria: "BaseModel | Mapping[str, Any] | None") -> dict[str, str]:
    """Flatten one criteria object into wire-named query parameters.

    Models contribute their non-None fields under their wire names; mappings
    have their keys passed through the naming rule.
    """
    if criteria is None:
        return {}
    if isinstance(criteria, BaseModel):
        raw = criteria.model_dump(by_alias=True, exclude_none=True)
    else:
        raw = wire_keys({key: value for key, value in criteria.items() if value is not None})
    return {key: _query_value(value) for key, value in raw.items()}


def build_query(*criteria: "BaseModel | Mapping[str, Any] | None") -> str:
    """Merge criteria into a query string. Absent criteria add nothing."""
    params: dict[str, str] = {}
    for item in criteria:
        params.update(query_parameters(item))
    return urlencode(params)

