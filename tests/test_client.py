"""
Tests for the console client

Run with: python -m pytest tests/test_client.py -v
"""

import io
import pytest
from pollkv.client import PollKVClient, main, run
from tests.conftest import find_free_port


class TestPollKVClient:
    """Test request/reply against a running server."""

    def test_request(self, server, server_port):
        with PollKVClient('127.0.0.1', server_port) as client:
            assert client.request("SET foo bar") == "OK"
            assert client.request("GET foo\n") == "bar"
            assert client.request("GET missing") == "(nil)"
            assert client.request("HELLO") == "ERR unknown command"

    def test_run_reads_lines(self, server, server_port):
        stdin = io.StringIO("SET a 1\n\n   \nGET a\nGET b\n")
        stdout = io.StringIO()

        with PollKVClient('127.0.0.1', server_port) as client:
            sent = run(client, stdin, stdout)

        assert sent == 3
        assert stdout.getvalue() == "OK\n1\n(nil)\n"


class TestMain:
    """Test the command line wrapper."""

    def test_connection_refused_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--host", "127.0.0.1", "--port", str(find_free_port())])

        assert exc_info.value.code == 1
        assert "Connection error" in capsys.readouterr().err
