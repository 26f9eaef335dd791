"""Docker driver implementation."""

from lighthouse.drivers.docker.driver import DockerDriver

__all__ = [
    "DockerDriver",
]
