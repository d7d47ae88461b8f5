"""
Protocol Parser Module

This module handles parsing of raw protocol lines and formatting of responses.
"""

import re
from typing import List

from .commands import Command, CommandType, Response, ResponseStatus

# Tokens are separated by ASCII whitespace only; other Unicode spaces
# and control characters are part of a key.
ASCII_WHITESPACE = " \t\n\r\f\v"
_SEPARATOR = re.compile(r"[ \t\n\r\f\v]+")


def split_first(text: str) -> List[str]:
    """Split off the first ASCII-whitespace delimited token. Leading whitespace is skipped."""
    text = text.lstrip(ASCII_WHITESPACE)
    if not text:
        return []
    return _SEPARATOR.split(text, maxsplit=1)


class ProtocolParser:
    """
    Parser for the pollkv text protocol.

    Protocol Format:
        Request:  <VERB> [ARGS...]\\n
        Response: <DATA>\\n

    Commands:
        SET <key> <value...>  -> OK | ERR setting value
        GET <key>             -> <value> | (nil)
        anything else         -> ERR unknown command

    Verbs are case-sensitive. The value of a SET is everything after the
    key with leading whitespace trimmed, so it may contain spaces. Missing
    arguments are not rejected: they parse as empty strings.
    """

    NIL = "(nil)"

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request line into a Command object.

        Args:
            data: Raw request line (may include a trailing newline)

        Returns:
            Command object representing the parsed request.
            Returns Command with type=UNKNOWN for empty lines and unknown verbs.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request("SET greeting hello world\\n")
            >>> cmd.type == CommandType.SET
            True
            >>> cmd.key
            'greeting'
            >>> cmd.value
            'hello world'
        """
        raw = data.rstrip("\r\n")
        parts = split_first(raw)
        if not parts:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        verb = parts[0]
        rest = parts[1] if len(parts) > 1 else ""

        if verb == "SET":
            return self._parse_set(rest, raw)
        if verb == "GET":
            return self._parse_get(rest, raw)

        return Command(type=CommandType.UNKNOWN, raw=raw)

    def _parse_set(self, rest: str, raw: str) -> Command:
        """
        Parse the arguments of a SET command.

        Format: SET <key> <value...>
        """
        args = split_first(rest)
        key = args[0] if args else ""
        value = args[1] if len(args) > 1 else ""
        return Command(type=CommandType.SET, key=key, value=value, raw=raw)

    def _parse_get(self, rest: str, raw: str) -> Command:
        """
        Parse the arguments of a GET command.

        Format: GET <key>
        """
        args = split_first(rest)
        key = args[0] if args else ""
        return Command(type=CommandType.GET, key=key, raw=raw)

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol string.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.ok())
            'OK\\n'
            >>> parser.format_response(Response.value_response("bar"))
            'bar\\n'
            >>> parser.format_response(Response.nil())
            '(nil)\\n'
            >>> parser.format_response(Response.unknown_command())
            'ERR unknown command\\n'
        """
        if response.status == ResponseStatus.VALUE:
            return f"{response.value}\n"
        if response.status == ResponseStatus.NIL:
            return f"{self.NIL}\n"
        if response.status == ResponseStatus.ERROR:
            return f"{ResponseStatus.ERROR.value} {response.message}\n"
        return f"{ResponseStatus.OK.value}\n"
