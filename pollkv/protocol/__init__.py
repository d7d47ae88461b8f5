"""Protocol module for pollkv."""

from .commands import Command, CommandType, Response, ResponseStatus
from .parser import ProtocolParser
from .processor import CommandProcessor

__all__ = [
    "Command",
    "CommandType",
    "CommandProcessor",
    "Response",
    "ResponseStatus",
    "ProtocolParser",
]
