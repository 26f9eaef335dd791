"""
Container driver abstraction layer for Lighthouse.

This module provides a pluggable driver architecture for container engines,
allowing Lighthouse to talk to Docker or to Podman's Docker-compatible API.
"""

from lighthouse.drivers.core import (
    ContainerDriver,
    ContainerRef,
    ExecResult,
    create_driver,
    initialize_driver,
    close_driver,
)

__all__ = [
    "ContainerDriver",
    "ContainerRef",
    "ExecResult",
    "create_driver",
    "initialize_driver",
    "close_driver",
]
