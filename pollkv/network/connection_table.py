"""
Connection Table Module

The live registry of every socket the event loop watches, together with
the role of each socket and the readiness the last wait reported for it.
"""

import logging
import select
import socket
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Role(Enum):
    """What a watched socket is used for."""
    LISTENER = auto()
    CLIENT = auto()


@dataclass
class Connection:
    """
    One watched socket.

    Attributes:
        handle: The socket itself
        role: LISTENER or CLIENT
        interest: poll() event mask the loop waits for
        revents: poll() event mask reported by the most recent wait
        address: Peer address for clients, bound address for the listener
    """
    handle: socket.socket
    role: Role
    interest: int = select.POLLIN
    revents: int = 0
    address: Optional[Tuple] = None

    @property
    def fd(self) -> int:
        return self.handle.fileno()

    def close(self) -> None:
        """Close the socket, ignoring a socket that is already closed."""
        try:
            self.handle.close()
        except OSError as exc:
            logger.debug(f"Error closing {self.address}: {exc}")


class ConnectionTable:
    """
    Ordered, growable collection of Connection entries.

    Entries are addressed by index. Removing an entry shifts every later
    entry down by one, so a caller walking the table by index must not
    advance after a removal.
    """

    def __init__(self):
        self._entries: List[Connection] = []

    def add(
            self,
            handle: socket.socket,
            role: Role,
            interest: int = select.POLLIN,
            address: Optional[Tuple] = None,
    ) -> Connection:
        """Register a socket and return its entry."""
        conn = Connection(handle=handle, role=role, interest=interest, address=address)
        self._entries.append(conn)
        return conn

    def remove(self, index: int) -> Connection:
        """Remove and return the entry at index. The socket is not closed."""
        return self._entries.pop(index)

    def snapshot_for_wait(self) -> List[Tuple[int, int]]:
        """Return (fd, interest) for every entry, in table order."""
        return [(conn.fd, conn.interest) for conn in self._entries]

    def set_revents(self, ready: Iterable[Tuple[int, int]]) -> None:
        """Store the (fd, revents) pairs a wait reported; other entries get 0."""
        by_fd: Dict[int, int] = {}
        for fd, revents in ready:
            by_fd[fd] = by_fd.get(fd, 0) | revents
        for conn in self._entries:
            conn.revents = by_fd.get(conn.fd, 0)

    def fds(self) -> List[int]:
        return [conn.fd for conn in self._entries]

    def clients(self) -> List[Connection]:
        return [conn for conn in self._entries if conn.role == Role.CLIENT]

    def close_all(self) -> None:
        """Close every socket and empty the table."""
        while self._entries:
            self._entries.pop().close()

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Connection:
        return self._entries[index]

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._entries))
