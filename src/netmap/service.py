"""Command dispatcher: one load → apply → save round trip per command.

Assumes a single writer: there is no locking, so two processes issuing
commands against the same file can lose an update.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from netmap import store
from netmap.commands import (
    MUTATING,
    AddResource,
    DeleteResource,
    ListAll,
    Search,
    SetNetworkInfo,
    SummarizeServices,
    UpdateResource,
)
from netmap.errors import UnknownCommandError
from netmap.models import NetworkMap

if TYPE_CHECKING:
    from netmap.commands import Command
    from netmap.storage import NetworkMapStorage

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one command: the (possibly updated) document and the value."""

    command: Command
    network_map: NetworkMap
    value: Any = None


class NetworkMapService:
    """Runs commands against the persisted network map."""

    def __init__(self, storage: NetworkMapStorage) -> None:
        self.storage = storage

    def read_map(self) -> NetworkMap:
        return self.storage.load()

    def execute(self, command: Command) -> CommandResult:
        """Apply ``command`` and return the document plus its plain result.

        Values: ListAll/Search -> list[NetworkResource]; Add/Update/Delete ->
        NetworkResource; SetNetworkInfo -> None; SummarizeServices ->
        ServiceSummary. NetmapError subclasses propagate unchanged, and
        nothing is saved when the command fails.
        """
        network_map = self.storage.load()
        value = self._apply(network_map, command)
        if isinstance(command, MUTATING):
            self.storage.save(network_map)
        return CommandResult(command=command, network_map=network_map, value=value)

    def _apply(self, network_map: NetworkMap, command: Command) -> Any:
        if isinstance(command, ListAll):
            return store.list_all(network_map)
        if isinstance(command, Search):
            return store.search(network_map, command.query)
        if isinstance(command, AddResource):
            return store.add_resource(network_map, command.fields)
        if isinstance(command, UpdateResource):
            return store.update_resource(network_map, command.id, command.fields)
        if isinstance(command, DeleteResource):
            return store.delete_resource(network_map, command.id)
        if isinstance(command, SetNetworkInfo):
            store.set_network_info(network_map, command.fields)
            logger.info("Network information updated")
            return None
        if isinstance(command, SummarizeServices):
            return store.summarize_services(network_map)
        raise UnknownCommandError(f"Unsupported command: {type(command).__name__}")
