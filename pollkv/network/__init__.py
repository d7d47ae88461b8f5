"""Network module for pollkv."""

from .acceptor import Acceptor, create_listener
from .connection_table import Connection, ConnectionTable, Role
from .tcp_server import KVServer

__all__ = [
    "Acceptor",
    "Connection",
    "ConnectionTable",
    "KVServer",
    "Role",
    "create_listener",
]
