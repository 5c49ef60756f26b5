"""Exception types raised by the SDK."""

from __future__ import annotations


class SDKError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MessageParseError(SDKError):
    """A message from the CLI could not be turned into a typed message."""

    def __init__(self, message: str, message_type: str | None = None) -> None:
        super().__init__(message)
        self.message_type = message_type


class CLIJSONDecodeError(SDKError):
    """A line from the CLI was not valid JSON for the expected shape."""

    def __init__(self, message: str, line: str = "") -> None:
        super().__init__(message)
        self.line = line


class CLIConnectionError(SDKError):
    """The connection to the CLI is missing or failed."""


class ControlProtocolError(SDKError):
    """The control protocol was used incorrectly or failed."""