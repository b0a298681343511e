"""Integrations with the host system."""

from .system_backend import LocalSystemBackend, MockSystemBackend, SystemBackend

__all__ = ["LocalSystemBackend", "MockSystemBackend", "SystemBackend"]
