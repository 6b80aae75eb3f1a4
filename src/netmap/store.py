"""Record store / query engine: operations over an in-memory NetworkMap.

Every function works on the document passed in and never touches disk;
the caller saves after a mutating operation succeeds. Mutations validate
before changing anything, so a failed call leaves the document untouched.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import fields

from netmap.errors import InvalidArgumentError, ResourceNotFoundError
from netmap.models import (
    NetworkInfoFields,
    NetworkMap,
    NetworkResource,
    ResourceFields,
    ServiceSummary,
    SshConfig,
    utc_now,
)

logger = logging.getLogger(__name__)


# ── Ids ───────────────────────────────────────────────────────


def generate_id(existing: set[str]) -> str:
    """Return ``res_<epoch-ms>_<random>`` not present in ``existing``."""
    while True:
        candidate = f"res_{int(time.time() * 1000)}_{secrets.token_hex(6)}"
        if candidate not in existing:
            return candidate


# ── Queries ───────────────────────────────────────────────────


def list_all(network_map: NetworkMap) -> list[NetworkResource]:
    return network_map.resources


def get_resource(network_map: NetworkMap, resource_id: str) -> NetworkResource:
    for resource in network_map.resources:
        if resource.id == resource_id:
            return resource
    raise ResourceNotFoundError(resource_id)


def _matches(resource: NetworkResource, q: str) -> bool:
    """Case-insensitive substring match on any searchable field."""
    candidates = [resource.hostname, resource.ip, resource.description, resource.os]
    candidates.extend(resource.aliases or [])
    candidates.extend(resource.services or [])
    return any(q in value.lower() for value in candidates if value)


def search(network_map: NetworkMap, query: str | None) -> list[NetworkResource]:
    """Resources matching ``query`` in hostname/ip/description/aliases/services/os."""
    if not query:
        raise InvalidArgumentError("Query parameter is required")
    q = query.lower()
    return [r for r in network_map.resources if _matches(r, q)]


def summarize_services(network_map: NetworkMap) -> ServiceSummary:
    """Distinct services and OS names (sorted) plus per-host SSH settings."""
    services: set[str] = set()
    operating_systems: set[str] = set()
    ssh_configs: list[SshConfig] = []

    for resource in network_map.resources:
        services.update(resource.services or [])
        if resource.os:
            operating_systems.add(resource.os)
        if resource.ssh_user is not None or resource.ssh_port is not None:
            ssh_configs.append(
                SshConfig(hostname=resource.hostname, user=resource.ssh_user, port=resource.ssh_port)
            )

    return ServiceSummary(
        services=sorted(services),
        operating_systems=sorted(operating_systems),
        ssh_configs=ssh_configs,
    )


# ── Mutations ─────────────────────────────────────────────────


def _require_non_empty(name: str, value: str | None) -> None:
    if not value:
        raise InvalidArgumentError(f"Field '{name}' is required and must not be empty")


def add_resource(network_map: NetworkMap, new: ResourceFields) -> NetworkResource:
    """Create a resource with a generated id and append it."""
    _require_non_empty("hostname", new.hostname)
    _require_non_empty("ip", new.ip)

    resource = NetworkResource(
        id=generate_id({r.id for r in network_map.resources}),
        hostname=new.hostname,
        ip=new.ip,
        description=new.description,
        aliases=list(new.aliases) if new.aliases is not None else None,
        os=new.os,
        services=list(new.services) if new.services is not None else None,
        ssh_user=new.ssh_user,
        ssh_port=new.ssh_port,
        metadata=dict(new.metadata) if new.metadata is not None else None,
        last_updated=utc_now(),
    )
    network_map.resources.append(resource)
    logger.info("Added resource %s: %s (%s)", resource.id, resource.hostname, resource.ip)
    return resource


def update_resource(
    network_map: NetworkMap, resource_id: str, changes: ResourceFields
) -> NetworkResource:
    """Overwrite only the supplied fields of an existing resource."""
    resource = get_resource(network_map, resource_id)
    if changes.hostname is not None:
        _require_non_empty("hostname", changes.hostname)
    if changes.ip is not None:
        _require_non_empty("ip", changes.ip)

    for f in fields(ResourceFields):
        value = getattr(changes, f.name)
        if value is None:
            continue
        if isinstance(value, (list, dict)):
            value = type(value)(value)
        setattr(resource, f.name, value)
    resource.last_updated = utc_now()

    logger.info("Updated resource %s: %s (%s)", resource.id, resource.hostname, resource.ip)
    return resource


def delete_resource(network_map: NetworkMap, resource_id: str) -> NetworkResource:
    """Remove exactly one resource, keeping the order of the rest."""
    for index, candidate in enumerate(network_map.resources):
        if candidate.id == resource_id:
            break
    else:
        raise ResourceNotFoundError(resource_id)
    resource = network_map.resources.pop(index)
    logger.info("Deleted resource %s: %s (%s)", resource.id, resource.hostname, resource.ip)
    return resource


def set_network_info(network_map: NetworkMap, info: NetworkInfoFields) -> None:
    """Overwrite only the supplied network-level fields."""
    for f in fields(NetworkInfoFields):
        value = getattr(info, f.name)
        if value is not None:
            setattr(network_map, f.name, value)
