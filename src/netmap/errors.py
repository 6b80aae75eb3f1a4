"""Error kinds surfaced to the command dispatcher."""

from __future__ import annotations


class NetmapError(Exception):
    """Base class for all errors reported back to the caller."""


class InvalidArgumentError(NetmapError):
    """A required field is missing/empty or has the wrong type."""


class ResourceNotFoundError(NetmapError):
    """The referenced resource id does not exist."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Resource with ID {resource_id} not found")
        self.resource_id = resource_id


class StorageError(NetmapError):
    """The network map file could not be written."""


class UnknownCommandError(NetmapError):
    """The requested tool/command does not exist."""
