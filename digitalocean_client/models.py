"""
Pydantic models for DigitalOcean API responses used by digitalocean_client.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


def _to_mapping(payload: Any) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        return payload
    if hasattr(payload, "__dict__"):
        return _to_mapping(vars(payload))
    raise TypeError(f"Cannot convert payload of type {type(payload)!r} to mapping.")


def _coerce_id(value: Any) -> str:
    if isinstance(value, bool):
        raise TypeError("id must be a string or an integer.")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    raise TypeError("id must be serializable to str.")


# ============================================================================
# Create results
# ============================================================================


@dataclass(frozen=True, slots=True)
class Created(Generic[T]):
    """The server allocated a new resource."""

    resource: T

    @property
    def created(self) -> bool:
        return True

    @property
    def conflicted(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class ConflictedWith(Generic[T]):
    """A resource with the same name already existed and was returned instead."""

    resource: T

    @property
    def created(self) -> bool:
        return False

    @property
    def conflicted(self) -> bool:
        return True


CreateResult = Union[Created[T], ConflictedWith[T]]


# ============================================================================
# Errors and pagination
# ============================================================================


class ErrorBody(BaseModel):
    """The JSON body of an error response: ``{"id": <slug>, "message": <free text>}``."""

    id: str | None = None
    message: str = ""
    request_id: str | None = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Any) -> "ErrorBody":
        if not isinstance(payload, Mapping):
            return cls()
        return cls.model_validate(payload)

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, value: Any) -> str:
        return "" if value is None else str(value)


# ============================================================================
# Lifecycle states
# ============================================================================


class KubernetesState(str, Enum):
    RUNNING = "running"
    PROVISIONING = "provisioning"
    DEGRADED = "degraded"
    ERROR = "error"
    DELETED = "deleted"
    UPGRADING = "upgrading"
    DELETING = "deleting"
    INVALID = "invalid"


class DropletState(str, Enum):
    NEW = "new"
    ACTIVE = "active"
    OFF = "off"
    ARCHIVE = "archive"
    # Not reported by the server; a missing droplet is considered deleted.
    DELETED = "deleted"


class DatabaseState(str, Enum):
    CREATING = "creating"
    ONLINE = "online"
    RESIZING = "resizing"
    MIGRATING = "migrating"
    FORKING = "forking"
    # Not reported by the server; a missing database is considered deleted.
    DELETED = "deleted"


# ============================================================================
# Resources
# ============================================================================


class KubernetesStatus(BaseModel):
    state: KubernetesState
    message: str | None = None

    model_config = ConfigDict(extra="allow")


class KubernetesCluster(BaseModel):
    """Normalized representation of a Kubernetes cluster."""

    id: str
    name: str
    region: str | None = None
    version: str | None = None
    vpc_uuid: str | None = None
    status: KubernetesStatus
    tags: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Any) -> "KubernetesCluster":
        return cls.model_validate(_to_mapping(payload))

    @property
    def state(self) -> KubernetesState:
        return self.status.state


class NetworkAddress(BaseModel):
    ip_address: str
    type: str
    netmask: str | None = None
    gateway: str | None = None

    model_config = ConfigDict(extra="allow")


class DropletNetworks(BaseModel):
    v4: list[NetworkAddress] = Field(default_factory=list)
    v6: list[NetworkAddress] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class Droplet(BaseModel):
    """Normalized representation of a droplet."""

    id: str
    name: str
    status: DropletState
    size_slug: str | None = None
    region: str | None = None
    networks: DropletNetworks = Field(default_factory=DropletNetworks)
    tags: list[str] = Field(default_factory=list)
    vpc_uuid: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Any) -> "Droplet":
        return cls.model_validate(_to_mapping(payload))

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        return _coerce_id(value)

    @field_validator("region", mode="before")
    @classmethod
    def coerce_region(cls, value: Any) -> str | None:
        # The droplet endpoints embed the whole region object.
        if isinstance(value, Mapping):
            return value.get("slug")
        return value

    def public_ipv4(self) -> str | None:
        for address in self.networks.v4:
            if address.type == "public":
                return address.ip_address
        return None


class Database(BaseModel):
    """Normalized representation of a managed database cluster."""

    id: str
    name: str
    engine: str | None = None
    version: str | None = None
    status: DatabaseState
    region: str | None = None
    size: str | None = None
    num_nodes: int | None = None
    tags: list[str] | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Any) -> "Database":
        return cls.model_validate(_to_mapping(payload))


class Repository(BaseModel):
    """A container registry repository."""

    registry_name: str
    name: str
    tag_count: int | None = None
    manifest_count: int | None = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Any) -> "Repository":
        return cls.model_validate(_to_mapping(payload))


class Vpc(BaseModel):
    """A virtual private cloud."""

    id: str
    name: str
    region: str
    ip_range: str | None = None
    default: bool = False

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Any) -> "Vpc":
        return cls.model_validate(_to_mapping(payload))


class Manifest(BaseModel):
    """An image manifest stored in a container registry repository."""

    digest: str
    registry_name: str | None = None
    repository: str | None = None
    tags: list[str] = Field(default_factory=list)
    compressed_size_bytes: int | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_api(cls, payload: Any) -> "Manifest":
        return cls.model_validate(_to_mapping(payload))

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> list[str]:
        # Untagged manifests report null.
        return value or []
