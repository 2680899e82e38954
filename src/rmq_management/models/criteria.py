"""Query criteria and paged results.

Criteria render as query parameters under the same wire names used for JSON
bodies; fields left as None contribute nothing.
"""

from typing import Generic, TypeVar

from pydantic import Field

from rmq_management.models.base import WireModel

T = TypeVar("T")


class LengthsCriteria(WireModel):
    """Ask for queue length samples over the last `lengths_age` seconds."""

    lengths_age: int
    lengths_incr: int


class RatesCriteria(WireModel):
    """Ask for message rate samples over the last `msg_rates_age` seconds."""

    msg_rates_age: int
    msg_rates_incr: int


class PageCriteria(WireModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=100, ge=1)
    name: str | None = None
    use_regex: bool | None = None
    pagination: bool = True


class DeleteQueueCriteria(WireModel):
    if_unused: bool | None = Field(default=None, alias="if-unused")
    if_empty: bool | None = Field(default=None, alias="if-empty")


class DeleteExchangeCriteria(WireModel):
    if_unused: bool | None = Field(default=None, alias="if-unused")


class PageResult(WireModel, Generic[T]):
    filtered_count: int = 0
    item_count: int = 0
    items: tuple[T, ...] = ()
    page: int = 1
    page_count: int = 0
    page_size: int = 0
    total_count: int = 0
