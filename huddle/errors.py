"""Error types shared across the backend."""

from __future__ import annotations


class HuddleError(Exception):
    """Base class for errors raised by the backend."""


class ConfigError(HuddleError):
    """Raised when a required connection parameter cannot be resolved."""


class DatabaseConnectionError(HuddleError):
    """Raised when the relational store does not answer a ping."""


class ProvisionError(HuddleError):
    """Raised when a single table cannot be created."""

    def __init__(self, table: str, reason: str) -> None:
        super().__init__(f"Could not create table {table!r}: {reason}")
        self.table = table
        self.reason = reason


class DecodeError(HuddleError):
    """Raised when an inbound payload does not match the expected shape."""


class WriteError(HuddleError):
    """Raised when the store rejects an insert."""
