"""Error taxonomy for the management client.

Every error raised by this package derives from ManagementClientError so that
callers can catch the whole family with a single except clause.
"""

from http import HTTPStatus
from typing import Any

from pydantic import ValidationError


class ManagementClientError(Exception):
    """Base exception for management client errors."""

    pass


class ManagementValidationError(ManagementClientError):
    """Raised when a request payload or argument is invalid.

    Always raised before any I/O takes place.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class ManagementConnectionError(ManagementClientError):
    """Raised when the management endpoint cannot be reached."""

    pass


class DecodeError(ManagementClientError):
    """Raised when a response body does not match the expected shape.

    Attributes:
        target: Name of the type the body was decoded into
        errors: (location, message) pairs, location being the wire path
    """

    def __init__(self, target: str, errors: list[tuple[str, str]]):
        self.target = target
        self.errors = errors
        details = "; ".join(f"{loc or '<root>'}: {msg}" for loc, msg in errors)
        super().__init__(f"Failed to decode {target}: {details}")

    @classmethod
    def from_validation_error(cls, target: Any, exc: ValidationError) -> "DecodeError":
        """Build a DecodeError from a pydantic ValidationError."""
        errors = [
            (".".join(str(part) for part in error["loc"]), error["msg"])
            for error in exc.errors(include_url=False)
        ]
        return cls(getattr(target, "__name__", str(target)), errors)


class UnexpectedStatusCodeError(ManagementClientError):
    """Raised when the broker answers with a status outside the accepted set."""

    def __init__(self, status_code: int, method: str, path: str, body: str = ""):
        self.status_code = status_code
        self.method = method
        self.path = path
        self.body = body
        super().__init__(
            f"Unexpected status code {status_code} ({self.reason}) for {method} {path}"
        )

    @property
    def reason(self) -> str:
        """Standard reason phrase for the status code."""
        try:
            return HTTPStatus(self.status_code).phrase
        except ValueError:
            return "Unknown"
