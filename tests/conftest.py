"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import threading
import time
import pytest
from contextlib import closing
from typing import Generator

from pollkv.network.tcp_server import KVServer
from pollkv.protocol.parser import ProtocolParser
from pollkv.protocol.processor import CommandProcessor
from pollkv.store.hashtable import ChainedHashTable
from pollkv.store.memory import KVStore


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def store() -> KVStore:
    """Create a fresh dict-backed store."""
    return KVStore()


@pytest.fixture
def hashtable() -> ChainedHashTable:
    """Create a chained hashtable with a handful of buckets."""
    return ChainedHashTable.create(16)


@pytest.fixture
def tiny_hashtable() -> ChainedHashTable:
    """Create a single-bucket hashtable so every key collides."""
    return ChainedHashTable.create(1)


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


@pytest.fixture
def processor(store: KVStore) -> CommandProcessor:
    """Create a CommandProcessor over a fresh store."""
    return CommandProcessor(store)


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest.fixture
def loop_server() -> Generator[KVServer, None, None]:
    """
    A bound server that is NOT running.

    Tests drive it one iteration at a time with run_once(), which keeps
    the loop in the test's own thread.
    """
    srv = KVServer(host='127.0.0.1', port=0)
    srv.bind()

    yield srv

    srv.close()


@pytest.fixture
def server(server_port: int) -> Generator[KVServer, None, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a KVServer on a random free port
    2. Runs serve_forever() in a background thread
    3. Yields the server for testing
    4. Stops the loop and closes every socket after the test
    """
    srv = KVServer(host='127.0.0.1', port=server_port, poll_timeout_ms=50)
    srv.bind()

    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()

    # Wait for the loop to be running
    deadline = time.monotonic() + 5
    while not srv.is_running() and time.monotonic() < deadline:
        time.sleep(0.01)

    yield srv

    # Cleanup
    srv.stop()
    thread.join(timeout=5)
    srv.close()


# ============================================================================
# Client Fixtures
# ============================================================================

def connect(srv: KVServer, timeout: float = 2.0) -> socket.socket:
    """Open a blocking client socket to a bound server."""
    return socket.create_connection(('127.0.0.1', srv.port), timeout=timeout)


def roundtrip(srv: KVServer, sock: socket.socket, payload: bytes) -> bytes:
    """Send one command, run one loop iteration, return the reply."""
    sock.sendall(payload)
    srv.run_once(1000)
    return sock.recv(1024)


class AsyncClient:
    """
    Helper class for testing server interactions.

    Provides a simple async context manager interface for
    sending commands and receiving responses.

    Usage:
        async with AsyncClient('127.0.0.1', 1234) as client:
            response = await client.send_command("SET key value")
            assert response == "OK"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except ConnectionError:
                pass

    async def send_command(self, command: str) -> str:
        """
        Send a command and receive the response.

        Args:
            command: Command string (newline will be added if missing)

        Returns:
            Response string (stripped of trailing newline)
        """
        if not command.endswith('\n'):
            command += '\n'

        self.writer.write(command.encode())
        await self.writer.drain()

        response = await asyncio.wait_for(self.reader.readline(), timeout=5)
        return response.decode().rstrip('\n')

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server: KVServer, server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(client_factory):
            async with client_factory() as client:
                response = await client.send_command("GET key")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

