"""Users, permissions and limits."""

from pydantic import Field, model_validator

from rmq_management.errors import ManagementValidationError
from rmq_management.models.base import WireModel
from rmq_management.serialization import CommaSeparatedList, CommaSeparatedString, WireEnum

ALLOW_ALL = ".*"
DENY_ALL = "^$"


class UserTag(WireEnum):
    ADMINISTRATOR = "administrator"
    MONITORING = "monitoring"
    MANAGEMENT = "management"
    POLICYMAKER = "policymaker"
    IMPERSONATOR = "impersonator"


class HashingAlgorithm(WireEnum):
    SHA256 = "rabbit_password_hashing_sha256"
    SHA512 = "rabbit_password_hashing_sha512"
    MD5 = "rabbit_password_hashing_md5"


class User(WireModel):
    name: str
    password_hash: str | None = None
    hashing_algorithm: HashingAlgorithm | None = None
    tags: CommaSeparatedList = ()


class UserInfo(WireModel):
    """Body of a user creation.

    Build it with by_password or by_password_hash. A plain password must be
    non-empty; a pre-hashed one may be empty, which disables password login.
    """

    name: str
    password: str | None = None
    password_hash: str | None = None
    hashing_algorithm: HashingAlgorithm | None = None
    tags: CommaSeparatedString = ()

    @model_validator(mode="after")
    def _check_credentials(self) -> "UserInfo":
        if not self.name:
            raise ManagementValidationError("User name cannot be empty", field="name")
        if self.password_hash is None and not self.password:
            raise ManagementValidationError(
                "Password cannot be empty unless a password hash is given",
                field="password",
            )
        for tag in self.tags:
            _check_tag(tag)
        if len(set(self.tags)) != len(self.tags):
            raise ManagementValidationError("User tags must be unique", field="tags")
        return self

    @classmethod
    def by_password(cls, name: str, password: str) -> "UserInfo":
        return cls(name=name, password=password)

    @classmethod
    def by_password_hash(
        cls,
        name: str,
        password_hash: str,
        hashing_algorithm: HashingAlgorithm | None = None,
    ) -> "UserInfo":
        return cls(name=name, password_hash=password_hash, hashing_algorithm=hashing_algorithm)

    def add_tag(self, tag: UserTag | str) -> "UserInfo":
        """Return a copy with tag appended.

        Raises:
            ManagementValidationError: If tag is unknown or already present
        """
        value = _check_tag(tag)
        if value in self.tags:
            raise ManagementValidationError(f"User tag '{value}' was already added", field="tags")
        return self.model_copy(update={"tags": self.tags + (value,)})


def _check_tag(tag: UserTag | str) -> str:
    try:
        return UserTag(tag).value
    except ValueError:
        raise ManagementValidationError(
            f"Unknown user tag '{tag}', expected one of {[t.value for t in UserTag]}",
            field="tags",
        ) from None


class Permission(WireModel):
    user: str
    vhost: str
    configure: str = ALLOW_ALL
    write: str = ALLOW_ALL
    read: str = ALLOW_ALL


class PermissionInfo(WireModel):
    """Body of a permission grant. Every pattern defaults to allow-all."""

    user: str
    configure: str = ALLOW_ALL
    write: str = ALLOW_ALL
    read: str = ALLOW_ALL

    def set_configure(self, pattern: str) -> "PermissionInfo":
        return self.model_copy(update={"configure": pattern})

    def set_write(self, pattern: str) -> "PermissionInfo":
        return self.model_copy(update={"write": pattern})

    def set_read(self, pattern: str) -> "PermissionInfo":
        return self.model_copy(update={"read": pattern})

    def deny_all_configure(self) -> "PermissionInfo":
        return self.set_configure(DENY_ALL)

    def deny_all_write(self) -> "PermissionInfo":
        return self.set_write(DENY_ALL)

    def deny_all_read(self) -> "PermissionInfo":
        return self.set_read(DENY_ALL)


class TopicPermission(WireModel):
    user: str
    vhost: str
    exchange: str
    write: str = ALLOW_ALL
    read: str = ALLOW_ALL


class TopicPermissionInfo(WireModel):
    """Body of a topic permission grant on one exchange."""

    user: str
    exchange: str
    write: str = ALLOW_ALL
    read: str = ALLOW_ALL

    def set_write(self, pattern: str) -> "TopicPermissionInfo":
        return self.model_copy(update={"write": pattern})

    def set_read(self, pattern: str) -> "TopicPermissionInfo":
        return self.model_copy(update={"read": pattern})

    def deny_all_write(self) -> "TopicPermissionInfo":
        return self.set_write(DENY_ALL)

    def deny_all_read(self) -> "TopicPermissionInfo":
        return self.set_read(DENY_ALL)


class Limits(WireModel):
    max_channels: int | None = Field(default=None, alias="max-channels")
    max_connections: int | None = Field(default=None, alias="max-connections")


class UserLimits(WireModel):
    user: str
    value: Limits = Field(default_factory=Limits)
