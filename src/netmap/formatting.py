"""Render command results as Markdown text for display."""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING

from netmap.commands import (
    AddResource,
    DeleteResource,
    ListAll,
    Search,
    SetNetworkInfo,
    SummarizeServices,
    UpdateResource,
)
from netmap.models import NetworkMap, NetworkResource, ServiceSummary

if TYPE_CHECKING:
    from netmap.service import CommandResult

EMPTY_MAP_TEXT = "No resources in network map."


def _format_timestamp(value: str) -> str:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_resource(r: NetworkResource) -> str:
    lines = [f"## {r.hostname}", f"- **IP:** {r.ip}", f"- **ID:** {r.id}"]
    if r.description:
        lines.append(f"- **Description:** {r.description}")
    if r.aliases:
        lines.append(f"- **Aliases:** {', '.join(r.aliases)}")
    if r.os:
        lines.append(f"- **OS:** {r.os}")
    if r.services:
        lines.append(f"- **Services:** {', '.join(r.services)}")
    if r.ssh_user:
        lines.append(f"- **SSH User:** {r.ssh_user}")
    if r.ssh_port is not None:
        lines.append(f"- **SSH Port:** {r.ssh_port}")
    if r.metadata:
        lines.append(f"- **Metadata:** {json.dumps(r.metadata, ensure_ascii=False)}")
    if r.last_updated:
        lines.append(f"- **Last Updated:** {_format_timestamp(r.last_updated)}")
    return "\n".join(lines) + "\n"


def format_resources(resources: list[NetworkResource]) -> str:
    if not resources:
        return EMPTY_MAP_TEXT
    return "\n".join(format_resource(r) for r in resources)


def format_network_map(network_map: NetworkMap) -> str:
    output = "# Network Map\n\n"
    if network_map.network_name:
        output += f"**Network:** {network_map.network_name}\n"
    if network_map.network_cidr:
        output += f"**CIDR:** {network_map.network_cidr}\n"
    if network_map.gateway:
        output += f"**Gateway:** {network_map.gateway}\n"
    output += f"\n**Resources:** {len(network_map.resources)}\n\n"
    output += format_resources(network_map.resources)
    return output


def _lines(lines: list[str], empty: str) -> str:
    if not lines:
        return f"{empty}\n"
    return "\n".join(lines) + "\n"


def format_summary(summary: ServiceSummary, resource_count: int) -> str:
    if resource_count == 0:
        return EMPTY_MAP_TEXT

    output = "# Network Services Overview\n\n"
    output += f"## Unique Services ({len(summary.services)})\n"
    output += _lines([f"- {s}" for s in summary.services], "No services defined")
    output += f"\n## Operating Systems ({len(summary.operating_systems)})\n"
    output += _lines([f"- {os}" for os in summary.operating_systems], "No operating systems defined")
    output += f"\n## SSH Configurations ({len(summary.ssh_configs)})\n"

    lines = []
    for cfg in summary.ssh_configs:
        line = f"- **{cfg.hostname}**"
        if cfg.user:
            line += f" - User: {cfg.user}"
        if cfg.port is not None:
            line += f" - Port: {cfg.port}"
        lines.append(line)
    output += _lines(lines, "No SSH configurations defined")
    return output


def format_result(result: CommandResult) -> str:
    """Text reply for a successfully executed command."""
    command, value = result.command, result.value

    if isinstance(command, ListAll):
        return format_network_map(result.network_map)
    if isinstance(command, Search):
        if not value:
            return f'No resources found matching "{command.query}"'
        return format_resources(value)
    if isinstance(command, AddResource):
        return f"Added resource: {value.hostname} ({value.ip})\nID: {value.id}"
    if isinstance(command, UpdateResource):
        return f"Updated resource: {value.hostname} ({value.ip})"
    if isinstance(command, DeleteResource):
        return f"Deleted resource: {value.hostname} ({value.ip})"
    if isinstance(command, SetNetworkInfo):
        return "Network information updated"
    if isinstance(command, SummarizeServices):
        return format_summary(value, len(result.network_map.resources))
    return str(value)
