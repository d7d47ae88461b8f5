"""
Poll-based TCP Server Module

This module implements the event loop of the pollkv server.

One thread runs the loop. Each iteration issues a single poll() over
every socket in the connection table, then walks the table once:

- the listener, when readable, drains all pending connections
- a client reporting an error or hangup is closed and removed
- a readable client gets one bounded recv(); the bytes received are
  processed as exactly one command and the response is sent back

All sockets are non-blocking, so poll() is the only place the loop waits.
"""

import logging
import select
from typing import Optional

from ..config.settings import settings
from ..errors import FatalServerError
from ..protocol.processor import CommandProcessor
from ..store.memory import KVStore
from .acceptor import Acceptor, create_listener
from .connection_table import Connection, ConnectionTable, Role

logger = logging.getLogger(__name__)

ERROR_EVENTS = select.POLLERR | select.POLLHUP | select.POLLNVAL


class KVServer:
    """
    Single-threaded, poll()-multiplexed TCP server for pollkv.

    Every connection shares one store, passed in by the caller. Connections
    are kept until the peer closes, errors, or hangs up; there is no idle
    timeout.

    Usage:
        server = KVServer(host='0.0.0.0', port=1234, store=KVStore())
        server.serve_forever()  # Runs until stop() or process exit

    Attributes:
        host: Server bind address
        port: Server port number (updated to the real port after bind)
        store: The store shared by all connections
        processor: The CommandProcessor executing commands on the store
        table: The ConnectionTable of every watched socket
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store=None,
            backlog: int = None,
            read_buffer_size: int = None,
            poll_timeout_ms: int = None,
    ):
        """
        Initialize the server. No socket is created until bind().

        Args:
            host: Bind address (default from settings)
            port: Port number, 0 for an ephemeral port (default from settings)
            store: Store instance (creates a new KVStore if not provided)
            backlog: listen() backlog (default from settings)
            read_buffer_size: Maximum bytes read per recv() (default from settings)
            poll_timeout_ms: Wait timeout used by serve_forever(), negative
                to block indefinitely (default from settings)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.backlog = backlog if backlog is not None else settings.BACKLOG
        self.read_buffer_size = (
            read_buffer_size if read_buffer_size is not None else settings.READ_BUFFER_SIZE
        )
        self.poll_timeout_ms = (
            poll_timeout_ms if poll_timeout_ms is not None else settings.POLL_TIMEOUT_MS
        )
        self.store = store if store is not None else KVStore()
        self.processor = CommandProcessor(self.store)
        self.table = ConnectionTable()

        self._acceptor: Optional[Acceptor] = None
        self._poll_factory = select.poll

        # Server state
        self._running = False
        self._connection_count = 0
        self._total_requests = 0

    def bind(self) -> None:
        """
        Create the listening socket and register it in the table.

        Raises:
            SetupError: If the listener cannot be set up.
        """
        if self._acceptor is not None:
            return

        listener = create_listener(self.host, self.port, self.backlog)
        self._acceptor = Acceptor(listener)
        address = listener.getsockname()
        self.port = address[1]
        self.table.add(listener, Role.LISTENER, address=address)
        logger.info(f"Serving on {self.host}:{self.port}")

    def _wait(self, timeout_ms: Optional[int]) -> list:
        """Wait for readiness on every table entry, retrying on EINTR."""
        poller = self._poll_factory()
        for fd, interest in self.table.snapshot_for_wait():
            poller.register(fd, interest)

        while True:
            try:
                return poller.poll(timeout_ms)
            except InterruptedError:
                # poll() retries EINTR itself; this only fires when a signal handler raises it
                logger.debug("poll() interrupted, retrying")
            except OSError as exc:
                logger.critical(f"poll() failed: {exc}")
                raise FatalServerError(f"poll(): {exc}") from exc

    def run_once(self, timeout_ms: Optional[int] = None) -> int:
        """
        Run a single iteration of the event loop.

        Entries accepted during this iteration are appended past the
        count captured before dispatch, so they are first served after
        the next wait. A removed entry is replaced at its index by its
        former neighbour, so the index does not advance after a removal.

        Args:
            timeout_ms: poll() timeout in milliseconds, None to block

        Returns:
            Number of sockets the wait reported as ready

        Raises:
            FatalServerError: If poll() fails with anything but EINTR.
        """
        self.bind()
        ready = self._wait(timeout_ms)
        self.table.set_revents(ready)

        index = 0
        remaining = len(self.table)
        while index < remaining:
            if self._dispatch(self.table[index]):
                index += 1
            else:
                self._drop(index)
                remaining -= 1

        return len(ready)

    def _dispatch(self, conn: Connection) -> bool:
        """Handle one entry's readiness. Returns False if it must be dropped."""
        if not conn.revents:
            return True

        if conn.role == Role.LISTENER:
            if conn.revents & select.POLLIN:
                self._accept_pending()
            elif conn.revents & ERROR_EVENTS:
                logger.warning(f"Listener reported events {conn.revents:#x}")
            return True

        if conn.revents & ERROR_EVENTS:
            logger.debug(f"Client {conn.address} reported events {conn.revents:#x}")
            return False

        if conn.revents & select.POLLIN:
            return self._handle_readable(conn)

        return True

    def _accept_pending(self) -> None:
        for handle, address in self._acceptor.drain():
            self.table.add(handle, Role.CLIENT, interest=select.POLLIN, address=address)
            self._connection_count += 1
            logger.debug(f"Client connected: {address}")

    def _handle_readable(self, conn: Connection) -> bool:
        """
        Read one buffer from a client and answer it.

        The whole buffer is one command: a command split across two reads,
        or two commands arriving in one read, are not reassembled.
        """
        try:
            data = conn.handle.recv(self.read_buffer_size)
        except BlockingIOError:
            return True
        except OSError as exc:
            logger.debug(f"recv() from {conn.address} failed: {exc}")
            return False

        if not data:
            logger.debug(f"Client disconnected: {conn.address}")
            return False

        self._total_requests += 1
        line = data.decode("utf-8", errors="surrogateescape")
        response = self.processor.process(line)

        try:
            conn.handle.sendall(response.encode("utf-8", errors="surrogateescape"))
        except OSError as exc:
            logger.debug(f"send() to {conn.address} failed: {exc}")
            return False

        return True

    def _drop(self, index: int) -> None:
        conn = self.table.remove(index)
        conn.close()

    def serve_forever(self) -> None:
        """
        Run the event loop until stop() is called.

        Raises:
            SetupError: If the listener cannot be set up.
            FatalServerError: If the readiness wait fails.
        """
        if self._running:
            return

        self.bind()
        self._running = True
        try:
            while self._running:
                self.run_once(self.poll_timeout_ms)
        finally:
            self._running = False

    def stop(self) -> None:
        """Ask serve_forever() to return after the current iteration."""
        self._running = False

    def close(self) -> None:
        """Close the listener and every client socket."""
        self.table.close_all()
        self._acceptor = None

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with server stats including connection counts,
            request counts, and store statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "open_connections": len(self.table.clients()),
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "store_stats": self.store.get_stats(),
        }
