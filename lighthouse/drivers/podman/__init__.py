"""Podman driver implementation."""

from lighthouse.drivers.podman.driver import PodmanDriver, get_podman_socket

__all__ = [
    "PodmanDriver",
    "get_podman_socket",
]
