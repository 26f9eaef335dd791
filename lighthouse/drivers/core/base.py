"""
Abstract base class for container drivers.

This module defines the interface that all container drivers must implement.
A driver is handed by reference to every task that needs the engine, so both
sweeps and the single-shot operations share one client handle.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class ContainerRef:
    """Snapshot of a running container as returned by the engine's list call."""

    id: str
    command: str


@dataclass(frozen=True)
class ExecResult:
    """Outcome of one command executed inside a container."""

    exit_code: int
    output: bytes


class ContainerDriver(ABC):
    """
    Abstract base class for container runtime drivers.

    Implementations forward every call to the engine almost unchanged. None
    of them retry, enforce timeouts or recover from partial failures: engine
    errors propagate to the caller as raised by the client library.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the container runtime client.

        Raises:
            Exception: If the engine cannot be reached
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the container runtime client and release its connections."""
        pass

    @abstractmethod
    async def list_containers(self) -> List[ContainerRef]:
        """
        List active containers.

        Returns:
            Running containers in the order the engine returned them
        """
        pass

    @abstractmethod
    async def create_container(
        self, config: Dict[str, Any], host_config: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Create (but do not start) a container.

        Args:
            config: Container configuration in Engine API form (Image, Cmd, Env, ...)
            host_config: Host configuration (Binds, PortBindings, resource limits, ...)

        Returns:
            The new container's ID
        """
        pass

    @abstractmethod
    async def start_container(self, container_id: str) -> None:
        pass

    @abstractmethod
    async def stop_container(
        self, container_id: str, timeout: Optional[float] = None
    ) -> None:
        """
        Stop a container.

        Args:
            container_id: The ID of the container
            timeout: Seconds the engine waits before killing the container;
                the engine default applies when None
        """
        pass

    @abstractmethod
    async def remove_container(self, container_id: str) -> None:
        pass

    async def stop_and_remove_container(
        self, container_id: str, timeout: Optional[float] = None
    ) -> None:
        """Stop a container, then remove it. Nothing is removed if the stop fails."""
        await self.stop_container(container_id, timeout)
        await self.remove_container(container_id)

    @abstractmethod
    async def wait_container(self, container_id: str) -> int:
        """Block until the container exits and return its exit code."""
        pass

    @abstractmethod
    async def get_logs(self, container_id: str) -> bytes:
        """Return the container's combined stdout and stderr."""
        pass

    @abstractmethod
    async def exec_in_container(
        self, container_id: str, cmd: Sequence[str]
    ) -> ExecResult:
        """
        Run a command inside a running container.

        The output stream is read until the engine closes it, then the exec
        session is inspected for its exit code.

        Args:
            container_id: The ID of the container
            cmd: Command and arguments

        Returns:
            ExecResult with the exit code and captured output
        """
        pass

    @abstractmethod
    async def inspect_container(self, container_id: str) -> str:
        """
        Return the container's IP address.

        Returns:
            The IP address, empty string if the container has none
        """
        pass

    @abstractmethod
    async def inspect_container_raw(self, container_id: str) -> bytes:
        """Return the engine's inspection payload as raw JSON bytes."""
        pass

    @abstractmethod
    async def remove_image(self, name: str) -> None:
        pass

    @abstractmethod
    async def create_volume(self) -> str:
        """Create an anonymous volume and return its generated name."""
        pass

    @abstractmethod
    async def remove_volume(self, name: str) -> None:
        pass
