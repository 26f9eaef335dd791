"""Core driver abstractions and factory utilities."""

from lighthouse.drivers.core.base import ContainerDriver, ContainerRef, ExecResult
from lighthouse.drivers.core.factory import (
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
