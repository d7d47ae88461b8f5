#!/usr/bin/env python3
"""
pollkv console client

Reads commands from stdin one line at a time, sends each to the server
and prints the reply.

Usage:
    pollkv-cli                           # localhost:1234
    pollkv-cli --host 10.0.0.5 --port 9000
    printf 'SET a 1\\nGET a\\n' | pollkv-cli
"""

import argparse
import socket
import sys
from typing import TextIO

from .config.settings import settings


class PollKVClient:
    """Blocking connection that sends one command and reads one reply line."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.sock = socket.create_connection((host, port), timeout=timeout)
        self._pending = b""

    def request(self, line: str) -> str:
        """
        Send a command and return the reply without its newline.

        Raises:
            ConnectionError: If the server closes the connection first.
        """
        self.sock.sendall(line.rstrip("\r\n").encode("utf-8", errors="surrogateescape") + b"\n")
        while b"\n" not in self._pending:
            chunk = self.sock.recv(4096)
            if not chunk:
                raise ConnectionError("server closed the connection")
            self._pending += chunk
        reply, self._pending = self._pending.split(b"\n", 1)
        return reply.decode("utf-8", errors="replace")

    def close(self) -> None:
        self.sock.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def run(client: PollKVClient, stdin: TextIO, stdout: TextIO) -> int:
    """Feed every non-blank input line to the server. Returns the number sent."""
    sent = 0
    for line in stdin:
        if not line.strip():
            continue
        print(client.request(line), file=stdout)
        sent += 1
    return sent


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="pollkv console client")
    parser.add_argument("--host", default="127.0.0.1", help="Server host")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Server port")
    parser.add_argument("--timeout", type=float, default=5.0, help="Socket timeout in seconds")
    args = parser.parse_args(argv)

    try:
        client = PollKVClient(args.host, args.port, args.timeout)
    except OSError as e:
        print(f"Connection error: {e}", file=sys.stderr)
        sys.exit(1)

    with client:
        try:
            run(client, sys.stdin, sys.stdout)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main()
