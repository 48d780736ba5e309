"""Exceptions raised by the NextBus client."""


class NextBusError(Exception):
    """Base class for all client failures.

    Args:
        command: Feed command that was being issued (e.g. "routeList").
        message: Human-readable description.
    """

    def __init__(self, command: str, message: str):
        super().__init__(message)
        self.command = command


class TransportError(NextBusError):
    """The HTTP request itself failed (connection, DNS, timeout)."""


class ReadError(NextBusError):
    """The response body could not be read in full."""


class DecodeError(NextBusError):
    """The response body is not a valid envelope for the command."""
