"""
Command Processor Module

Turns one line of client input into one response line by parsing it,
executing it against the store and formatting the result.
"""

import logging

from ..errors import StoreError
from .commands import Command, CommandType, Response
from .parser import ProtocolParser

logger = logging.getLogger(__name__)


class CommandProcessor:
    """
    Executes parsed commands against a store.

    The store is passed in explicitly and is shared by every connection
    of the server that owns this processor.

    Usage:
        processor = CommandProcessor(KVStore())
        processor.process("SET foo bar\\n")  # -> "OK\\n"
        processor.process("GET foo\\n")      # -> "bar\\n"
    """

    def __init__(self, store, parser: ProtocolParser = None):
        self.store = store
        self.parser = parser if parser is not None else ProtocolParser()

    def process(self, raw_line: str) -> str:
        """Parse, execute and format a single command line."""
        command = self.parser.parse_request(raw_line)
        response = self.execute(command)
        return self.parser.format_response(response)

    def execute(self, command: Command) -> Response:
        """
        Execute a parsed command on the store.

        Only SET mutates the store; GET and UNKNOWN have no side effects.
        """
        if command.type == CommandType.SET:
            try:
                self.store.set(command.key, command.value)
            except StoreError as exc:
                logger.warning(f"SET {command.key!r} failed: {exc}")
                return Response.set_failed()
            return Response.ok()

        if command.type == CommandType.GET:
            value = self.store.get(command.key)
            return Response.value_response(value) if value is not None else Response.nil()

        return Response.unknown_command()
