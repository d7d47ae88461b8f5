"""
Tests for the server entry point

Run with: python -m pytest tests/test_main.py -v
"""

import pytest
from pollkv.network.acceptor import create_listener
from pollkv.server import main, parse_args


class TestParseArgs:
    """Test command line parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.port == 1234
        assert args.host == "0.0.0.0"
        assert args.backend == "dict"

    def test_overrides(self):
        args = parse_args([
            "--host", "127.0.0.1",
            "--port", "9000",
            "--backend", "hashtable",
            "--buckets", "64",
            "--poll-timeout", "-1",
            "--debug",
        ])
        assert args.host == "127.0.0.1"
        assert args.port == 9000
        assert args.backend == "hashtable"
        assert args.buckets == 64
        assert args.poll_timeout == -1
        assert args.debug is True

    def test_unknown_backend_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--backend", "redis"])


class TestMain:
    """Test fatal startup paths exit the process."""

    def test_port_in_use_exits(self):
        occupied = create_listener("127.0.0.1", 0, 1)
        try:
            port = occupied.getsockname()[1]
            with pytest.raises(SystemExit) as exc_info:
                main(["--host", "127.0.0.1", "--port", str(port)])
            assert exc_info.value.code == 1
        finally:
            occupied.close()

    def test_bad_bucket_count_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--host", "127.0.0.1", "--port", "0", "--backend", "hashtable", "--buckets", "0"])
        assert exc_info.value.code == 2
