"""Virtual host entities."""

from rmq_management.models.base import ExtensibleModel


class Vhost(ExtensibleModel):
    name: str
    tracing: bool = False
    description: str | None = None
