"""
Lighthouse

A thin async façade over the Docker Engine API with two periodic sweeps over
running containers: one executes a command in each container, the other
prints each container's inspection payload.

Quick Start:
    import asyncio, sys
    from lighthouse import ContainerMonitor, create_driver

    driver = create_driver("docker")
    monitor = ContainerMonitor(driver, sweep_interval=60)
    cancel = asyncio.Event()
    await monitor.exec_in_active_containers(sys.stdout, cancel, ["uptime"])
"""

from .drivers import (
    ContainerDriver,
    ContainerRef,
    ExecResult,
    create_driver,
    initialize_driver,
    close_driver,
)
from .models import ExecOptions
from .services.monitor import ContainerMonitor, SweepService

__version__ = "1.0.0"

__all__ = [
    "ContainerDriver",
    "ContainerRef",
    "ExecResult",
    "ExecOptions",
    "ContainerMonitor",
    "SweepService",
    "create_driver",
    "initialize_driver",
    "close_driver",
]
