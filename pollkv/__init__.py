"""
pollkv: In-Memory Key-Value Server

A single-threaded key-value server that multiplexes every client
connection through one poll() call, communicating over raw TCP sockets.
"""

__version__ = "1.0.0"
