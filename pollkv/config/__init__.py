"""Configuration module for pollkv."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
