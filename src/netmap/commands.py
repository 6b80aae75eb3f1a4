"""Command types + boundary validation of raw tool arguments (no I/O).

Each tool call is turned into one typed command:
- Parse: tool name + raw JSON arguments -> command dataclass
- Validate: field types are checked once here; the store trusts them
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from netmap.errors import InvalidArgumentError, UnknownCommandError
from netmap.models import NetworkInfoFields, ResourceFields


# ── Command types ─────────────────────────────────────────────


@dataclass(frozen=True)
class ListAll:
    pass


@dataclass(frozen=True)
class Search:
    query: str


@dataclass(frozen=True)
class AddResource:
    fields: ResourceFields


@dataclass(frozen=True)
class UpdateResource:
    id: str
    fields: ResourceFields = field(default_factory=ResourceFields)


@dataclass(frozen=True)
class DeleteResource:
    id: str


@dataclass(frozen=True)
class SetNetworkInfo:
    fields: NetworkInfoFields = field(default_factory=NetworkInfoFields)


@dataclass(frozen=True)
class SummarizeServices:
    pass


Command = (
    ListAll
    | Search
    | AddResource
    | UpdateResource
    | DeleteResource
    | SetNetworkInfo
    | SummarizeServices
)

# Commands whose result must be saved
MUTATING = (AddResource, UpdateResource, DeleteResource, SetNetworkInfo)


# ── Field validation ──────────────────────────────────────────


def _opt_str(args: dict[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(f"'{key}' must be a string")
    return value


def _opt_str_list(args: dict[str, Any], key: str) -> list[str] | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidArgumentError(f"'{key}' must be a list of strings")
    return list(value)


def _opt_int(args: dict[str, Any], key: str) -> int | None:
    value = args.get(key)
    if value is None:
        return None
    # bool is an int subclass; JSON numbers may arrive as 22.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"'{key}' must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgumentError(f"'{key}' must be an integer")
        value = int(value)
    return value


def _opt_str_map(args: dict[str, Any], key: str) -> dict[str, str] | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise InvalidArgumentError(f"'{key}' must be an object of string values")
    return dict(value)


def _required_str(args: dict[str, Any], key: str, message: str) -> str:
    value = _opt_str(args, key)
    if not value:
        raise InvalidArgumentError(message)
    return value


def _resource_fields(args: dict[str, Any]) -> ResourceFields:
    return ResourceFields(
        hostname=_opt_str(args, "hostname"),
        ip=_opt_str(args, "ip"),
        description=_opt_str(args, "description"),
        aliases=_opt_str_list(args, "aliases"),
        os=_opt_str(args, "os"),
        services=_opt_str_list(args, "services"),
        ssh_user=_opt_str(args, "sshUser"),
        ssh_port=_opt_int(args, "sshPort"),
        metadata=_opt_str_map(args, "metadata"),
    )


# ── Parsing (tool call -> command) ────────────────────────────


def parse_command(name: str, arguments: dict[str, Any] | None) -> Command:
    """Validate raw tool arguments and build the matching command.

    Raises InvalidArgumentError for missing/ill-typed fields and
    UnknownCommandError for an unrecognized tool name.
    """
    args = arguments or {}
    if not isinstance(args, dict):
        raise InvalidArgumentError("Tool arguments must be an object")

    if name == "show_network_map":
        return ListAll()

    if name == "query_resource":
        return Search(query=_required_str(args, "query", "Query parameter is required"))

    if name == "add_resource":
        fields_ = _resource_fields(args)
        if not fields_.hostname:
            raise InvalidArgumentError("Hostname is required")
        if not fields_.ip:
            raise InvalidArgumentError("IP address is required")
        return AddResource(fields=fields_)

    if name == "update_resource":
        return UpdateResource(
            id=_required_str(args, "id", "Resource ID is required"),
            fields=_resource_fields(args),
        )

    if name == "delete_resource":
        return DeleteResource(id=_required_str(args, "id", "Resource ID is required"))

    if name == "set_network_info":
        return SetNetworkInfo(
            fields=NetworkInfoFields(
                network_name=_opt_str(args, "networkName"),
                network_cidr=_opt_str(args, "networkCidr"),
                gateway=_opt_str(args, "gateway"),
            )
        )

    if name == "list_services":
        return SummarizeServices()

    raise UnknownCommandError(f"Unknown tool: {name}")
