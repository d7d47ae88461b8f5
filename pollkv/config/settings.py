"""
pollkv Configuration Settings

This module contains all configuration constants for the pollkv server.
Every value can be overridden through a POLLKV_* environment variable.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("POLLKV_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("POLLKV_PORT", "1234"))
    BACKLOG: int = int(os.environ.get("POLLKV_BACKLOG", "10"))

    # Connection settings
    READ_BUFFER_SIZE: int = 1024
    POLL_TIMEOUT_MS: int = int(os.environ.get("POLLKV_POLL_TIMEOUT_MS", "1000"))

    # Store settings
    STORE_BACKEND: str = os.environ.get("POLLKV_STORE_BACKEND", "dict")
    HASHTABLE_BUCKETS: int = int(os.environ.get("POLLKV_HASHTABLE_BUCKETS", "1024"))

    # Logging settings
    DEBUG: bool = os.environ.get("POLLKV_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("POLLKV_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
