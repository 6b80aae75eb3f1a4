"""Network map data model: dataclasses + JSON conversion (no I/O).

On disk the document uses the camelCase keys of the original
``network-map.json`` format:

    {
      "networkName": "home", "networkCidr": "10.0.0.0/24", "gateway": "10.0.0.1",
      "resources": [{"id": "res_...", "hostname": "nas", "ip": "10.0.0.5", ...}],
      "metadata": {"created": "...", "lastModified": "...", "version": "1.0.0"}
    }

Absent optional fields are omitted rather than written as null.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

DEFAULT_VERSION = "1.0.0"


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string, e.g. 2026-10-19T08:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ── Shape checks (decoded JSON -> typed values) ───────────────


def _opt_str(data: dict[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{where} field '{key}' must be a string")
    return value


def _opt_str_list(data: dict[str, Any], key: str, where: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{where} field '{key}' must be a list of strings")
    return list(value)


def _opt_int(data: dict[str, Any], key: str, where: str) -> int | None:
    value = data.get(key)
    # bool is an int subclass
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValueError(f"{where} field '{key}' must be an integer")
    return value


def _opt_str_map(data: dict[str, Any], key: str, where: str) -> dict[str, str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise ValueError(f"{where} field '{key}' must be an object of string values")
    return dict(value)


# ── Resources ─────────────────────────────────────────────────


@dataclass
class NetworkResource:
    """One tracked host/device on the network."""

    id: str
    hostname: str
    ip: str
    description: str | None = None
    aliases: list[str] | None = None
    os: str | None = None
    services: list[str] | None = None
    ssh_user: str | None = None
    ssh_port: int | None = None
    metadata: dict[str, str] | None = None
    last_updated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "hostname": self.hostname, "ip": self.ip}
        optional = {
            "description": self.description,
            "aliases": self.aliases,
            "os": self.os,
            "services": self.services,
            "sshUser": self.ssh_user,
            "sshPort": self.ssh_port,
            "metadata": self.metadata,
            "lastUpdated": self.last_updated,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NetworkResource:
        """Build from a decoded JSON object. Raises ValueError on a bad shape."""
        if not isinstance(data, dict):
            raise ValueError(f"resource must be an object, got {type(data).__name__}")
        for key in ("id", "hostname", "ip"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"resource field '{key}' must be a string")
        return cls(
            id=data["id"],
            hostname=data["hostname"],
            ip=data["ip"],
            description=_opt_str(data, "description", "resource"),
            aliases=_opt_str_list(data, "aliases", "resource"),
            os=_opt_str(data, "os", "resource"),
            services=_opt_str_list(data, "services", "resource"),
            ssh_user=_opt_str(data, "sshUser", "resource"),
            ssh_port=_opt_int(data, "sshPort", "resource"),
            metadata=_opt_str_map(data, "metadata", "resource"),
            last_updated=_opt_str(data, "lastUpdated", "resource"),
        )


# ── Document ──────────────────────────────────────────────────


@dataclass
class MapMetadata:
    created: str | None = None
    last_modified: str | None = None
    version: str | None = None

    def to_dict(self) -> dict[str, str]:
        optional = {
            "created": self.created,
            "lastModified": self.last_modified,
            "version": self.version,
        }
        return {k: v for k, v in optional.items() if v is not None}


@dataclass
class NetworkMap:
    """The whole persisted document."""

    resources: list[NetworkResource] = field(default_factory=list)
    network_name: str | None = None
    network_cidr: str | None = None
    gateway: str | None = None
    metadata: MapMetadata = field(default_factory=MapMetadata)

    @classmethod
    def empty(cls) -> NetworkMap:
        """A fresh document: no resources, `created` stamped now."""
        return cls(metadata=MapMetadata(created=utc_now(), version=DEFAULT_VERSION))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key, value in (
            ("networkName", self.network_name),
            ("networkCidr", self.network_cidr),
            ("gateway", self.gateway),
        ):
            if value is not None:
                data[key] = value
        data["resources"] = [r.to_dict() for r in self.resources]
        data["metadata"] = self.metadata.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NetworkMap:
        """Build from a decoded JSON document. Raises ValueError on a bad shape."""
        if not isinstance(data, dict):
            raise ValueError(f"document must be an object, got {type(data).__name__}")
        resources = data.get("resources")
        if not isinstance(resources, list):
            raise ValueError("document field 'resources' must be a list")
        meta = data.get("metadata") or {}
        if not isinstance(meta, dict):
            raise ValueError("document field 'metadata' must be an object")
        return cls(
            resources=[NetworkResource.from_dict(r) for r in resources],
            network_name=_opt_str(data, "networkName", "document"),
            network_cidr=_opt_str(data, "networkCidr", "document"),
            gateway=_opt_str(data, "gateway", "document"),
            metadata=MapMetadata(
                created=_opt_str(meta, "created", "metadata"),
                last_modified=_opt_str(meta, "lastModified", "metadata"),
                version=_opt_str(meta, "version", "metadata") or DEFAULT_VERSION,
            ),
        )


# ── Request payloads (None = field omitted) ───────────────────


@dataclass(frozen=True)
class ResourceFields:
    """Fields supplied for a create or update.

    ``None`` means the caller did not supply the field. Any other value,
    including ``""``, ``[]``, ``{}`` and ``0``, is an explicit value.
    """

    hostname: str | None = None
    ip: str | None = None
    description: str | None = None
    aliases: list[str] | None = None
    os: str | None = None
    services: list[str] | None = None
    ssh_user: str | None = None
    ssh_port: int | None = None
    metadata: dict[str, str] | None = None


@dataclass(frozen=True)
class NetworkInfoFields:
    network_name: str | None = None
    network_cidr: str | None = None
    gateway: str | None = None


# ── Derived views ─────────────────────────────────────────────


@dataclass
class SshConfig:
    """SSH settings declared by one resource."""

    hostname: str
    user: str | None = None
    port: int | None = None


@dataclass
class ServiceSummary:
    """Aggregate view over all resources (read-only)."""

    services: list[str] = field(default_factory=list)
    operating_systems: list[str] = field(default_factory=list)
    ssh_configs: list[SshConfig] = field(default_factory=list)
