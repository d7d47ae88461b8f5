"""
Protocol Command and Response Definitions

This module defines the data structures for protocol commands and responses.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class CommandType(Enum):
    """Enumeration of supported command types."""
    SET = auto()
    GET = auto()
    UNKNOWN = auto()


class ResponseStatus(Enum):
    """Enumeration of response statuses."""
    OK = "OK"
    VALUE = "VALUE"
    NIL = "NIL"
    ERROR = "ERR"


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command (SET, GET, UNKNOWN)
        key: The key for the operation (may be empty)
        value: The value for SET operations (may be empty)
        raw: The line the command was parsed from, terminator removed
    """
    type: CommandType
    key: str = ""
    value: str = ""
    raw: str = ""


@dataclass
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK, VALUE, NIL or ERROR
        message: Error description for ERROR responses
        value: The value returned (for GET operations)
    """
    status: ResponseStatus
    message: str = ""
    value: Optional[str] = None

    @classmethod
    def ok(cls) -> "Response":
        """Create a successful response for SET operations."""
        return cls(status=ResponseStatus.OK)

    @classmethod
    def error(cls, message: str) -> "Response":
        """Create an error response."""
        return cls(status=ResponseStatus.ERROR, message=message)

    @classmethod
    def nil(cls) -> "Response":
        """Create the response for a GET on a missing key."""
        return cls(status=ResponseStatus.NIL)

    @classmethod
    def value_response(cls, value: str) -> "Response":
        """Create a GET response with a value."""
        return cls(status=ResponseStatus.VALUE, value=value)

    @classmethod
    def unknown_command(cls) -> "Response":
        return cls.error("unknown command")

    @classmethod
    def set_failed(cls) -> "Response":
        return cls.error("setting value")
