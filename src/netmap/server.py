"""MCP server: my-network-mcp, network map tools over stdio.

Exposes the network map to an MCP client (e.g. an AI agent) as seven
tools plus one readable resource, ``network://map``.

Protocol: JSON-RPC 2.0 over stdio (NDJSON). stdout carries protocol
frames only; logs go to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any

from netmap.commands import parse_command
from netmap.errors import NetmapError
from netmap.formatting import format_result

if TYPE_CHECKING:
    from netmap.service import NetworkMapService

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────

SERVER_NAME = "my-network-mcp"
SERVER_VERSION = "1.1.0"
PROTOCOL_VERSION = "2024-11-05"
MAP_URI = "network://map"

# ── Tool definitions ─────────────────────────────────────────

_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_STRING_MAP = {
    "type": "object",
    "description": "Additional metadata as key-value pairs",
    "additionalProperties": {"type": "string"},
}

TOOLS = [
    {
        "name": "show_network_map",
        "description": "Display all network resources in the network map",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "query_resource",
        "description": "Search for network resources by hostname, IP, alias, or service",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query (hostname, IP, alias, or service)",
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": "add_resource",
        "description": "Add a new network resource to the map",
        "inputSchema": {
            "type": "object",
            "properties": {
                "hostname": {**_STRING, "description": "Primary hostname or identifier"},
                "ip": {**_STRING, "description": "IP address"},
                "description": {**_STRING, "description": "Human-readable description"},
                "aliases": {**_STRING_LIST, "description": "Alternative names or aliases"},
                "os": {**_STRING, "description": "Operating system"},
                "services": {**_STRING_LIST, "description": "Installed services or roles"},
                "sshUser": {**_STRING, "description": "SSH username"},
                "sshPort": {"type": "number", "description": "SSH port (default: 22)"},
                "metadata": _STRING_MAP,
            },
            "required": ["hostname", "ip"],
        },
    },
    {
        "name": "update_resource",
        "description": "Update an existing network resource",
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {**_STRING, "description": "Resource ID to update"},
                "hostname": _STRING,
                "ip": _STRING,
                "description": _STRING,
                "aliases": _STRING_LIST,
                "os": _STRING,
                "services": _STRING_LIST,
                "sshUser": _STRING,
                "sshPort": {"type": "number"},
                "metadata": _STRING_MAP,
            },
            "required": ["id"],
        },
    },
    {
        "name": "delete_resource",
        "description": "Remove a resource from the network map",
        "inputSchema": {
            "type": "object",
            "properties": {"id": {**_STRING, "description": "Resource ID to delete"}},
            "required": ["id"],
        },
    },
    {
        "name": "set_network_info",
        "description": "Set network-level information (name, CIDR, gateway)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "networkName": {**_STRING, "description": "Network name"},
                "networkCidr": {**_STRING, "description": 'Network CIDR (e.g., "10.0.0.0/24")'},
                "gateway": {**_STRING, "description": "Gateway/router IP"},
            },
        },
    },
    {
        "name": "list_services",
        "description": (
            "List all unique services, operating systems, "
            "and SSH configurations across the network"
        ),
        "inputSchema": {"type": "object", "properties": {}},
    },
]

RESOURCES = [
    {
        "uri": MAP_URI,
        "name": "Network Map",
        "description": "Complete network resource map",
        "mimeType": "application/json",
    }
]

# ── JSON-RPC 2.0 helpers ─────────────────────────────────────


def jsonrpc_result(req_id, result):
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def jsonrpc_error(req_id, code, message):
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


def _text_content(text: str, is_error: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


# ── Tool calls ───────────────────────────────────────────────


def call_tool(service: NetworkMapService, name: str, arguments: dict | None) -> dict[str, Any]:
    """Run one tool and wrap the outcome as MCP tool-result content."""
    try:
        command = parse_command(name, arguments)
        result = service.execute(command)
    except NetmapError as e:
        logger.info("Tool %s failed: %s", name, e)
        return _text_content(f"Error: {e}", is_error=True)
    except Exception as e:
        logger.exception("Tool %s raised an unexpected error", name)
        return _text_content(f"Error: internal error: {e}", is_error=True)
    return _text_content(format_result(result))


# ── Request handler ──────────────────────────────────────────


async def handle_request(req: dict, service: NetworkMapService) -> dict | None:
    if not isinstance(req, dict):
        return jsonrpc_error(None, -32600, "Invalid Request: expected a JSON object")

    req_id = req.get("id")
    method = req.get("method", "")
    params = req.get("params") or {}
    logger.debug("<- %s", method)

    # Notifications (no id) get no response
    if req_id is None:
        if method == "notifications/initialized":
            logger.info("Client initialized")
        return None

    if method == "initialize":
        return jsonrpc_result(req_id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "resources": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        })

    if method == "ping":
        return jsonrpc_result(req_id, {})

    if method == "tools/list":
        return jsonrpc_result(req_id, {"tools": TOOLS})

    if method in ("tools/call", "resources/read") and not isinstance(params, dict):
        return jsonrpc_error(req_id, -32602, "Invalid params: expected a JSON object")

    if method == "tools/call":
        result = call_tool(service, params.get("name", ""), params.get("arguments"))
        return jsonrpc_result(req_id, result)

    if method == "resources/list":
        return jsonrpc_result(req_id, {"resources": RESOURCES})

    if method == "resources/read":
        uri = params.get("uri", "")
        if uri != MAP_URI:
            return jsonrpc_error(req_id, -32602, f"Unknown resource: {uri}")
        try:
            network_map = service.read_map()
        except NetmapError as e:
            return jsonrpc_error(req_id, -32603, str(e))
        return jsonrpc_result(req_id, {
            "contents": [{
                "uri": uri,
                "mimeType": "application/json",
                "text": json.dumps(network_map.to_dict(), indent=2, ensure_ascii=False),
            }],
        })

    return jsonrpc_error(req_id, -32601, f"Method not found: {method}")


# ── Stdio transport (NDJSON) ─────────────────────────────────


async def serve(service: NetworkMapService) -> None:
    """Read requests from stdin until EOF, writing responses to stdout."""
    logger.info("My Network MCP server running on stdio")
    logger.info("Network map location: %s", service.storage.path)

    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)

    while True:
        line = await reader.readline()
        if not line:
            break
        line = line.decode("utf-8", errors="replace").strip()
        if not line:
            continue

        try:
            req = json.loads(line)
            response = await handle_request(req, service)
            if response:
                sys.stdout.write(json.dumps(response) + "\n")
                sys.stdout.flush()
        except json.JSONDecodeError as e:
            logger.warning("Parse error: %s", e)
        except Exception:
            logger.exception("Handler error")
