"""
Listener and Acceptor Module

Creates the listening socket and drains pending connections from it
without ever blocking the event loop.
"""

import logging
import socket
from typing import List, Tuple

from ..errors import SetupError

logger = logging.getLogger(__name__)


def create_listener(host: str, port: int, backlog: int) -> socket.socket:
    """
    Create a bound, listening, non-blocking TCP socket.

    Raises:
        SetupError: If any step of the setup fails. The server cannot run
            without its listener, so callers treat this as fatal.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        raise SetupError(f"socket(): {exc}") from exc

    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    except OSError as exc:
        sock.close()
        raise SetupError(f"setsockopt(): {exc}") from exc

    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise SetupError(f"bind({host}:{port}): {exc}") from exc

    try:
        sock.listen(backlog)
        sock.setblocking(False)
    except OSError as exc:
        sock.close()
        raise SetupError(f"listen(): {exc}") from exc

    return sock


class Acceptor:
    """Accepts every connection pending on a non-blocking listener."""

    def __init__(self, listener: socket.socket):
        self.listener = listener

    def drain(self) -> List[Tuple[socket.socket, Tuple]]:
        """
        Accept until the listener would block.

        Returns:
            (socket, address) for each accepted connection, every socket
            already in non-blocking mode. A hard accept error stops the
            drain and returns what was accepted so far.
        """
        accepted = []
        while True:
            try:
                conn, addr = self.listener.accept()
            except BlockingIOError:
                break
            except OSError as exc:
                logger.error(f"accept() failed: {exc}")
                break

            try:
                conn.setblocking(False)
            except OSError as exc:
                logger.error(f"Could not make {addr} non-blocking: {exc}")
                conn.close()
                continue
            accepted.append((conn, addr))
        return accepted
