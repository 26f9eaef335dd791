"""
Docker container driver implementation.

This module implements the ContainerDriver interface using the Docker Engine
API (via aiodocker). Every method is a direct passthrough: engine errors are
raised as aiodocker's DockerError and are not interpreted here.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import aiodocker
from aiodocker.containers import DockerContainer
from aiodocker.exceptions import DockerError
from aiodocker.volumes import DockerVolume

from lighthouse.config import settings
from lighthouse.drivers.core.base import ContainerDriver, ContainerRef, ExecResult
from lighthouse.models import ExecOptions

logger = logging.getLogger(__name__)


class DockerDriver(ContainerDriver):
    """
    Docker implementation of the ContainerDriver interface.

    Uses aiodocker for async Docker operations. Without an explicit URL the
    client resolves the engine the way the Docker CLI does: DOCKER_HOST if
    set, otherwise the local socket.

    Configuration:
        - Set LIGHTHOUSE_CONTAINER_DRIVER=docker
        - Optionally set LIGHTHOUSE_DOCKER_URL
    """

    def __init__(
        self,
        url: Optional[str] = None,
        exec_options: Optional[ExecOptions] = None,
        network: Optional[str] = None,
    ) -> None:
        self.url = url or settings.docker_url
        self.exec_options = exec_options or ExecOptions.from_settings()
        self.network = network or settings.docker_network
        self.client: Optional[aiodocker.Docker] = None

    async def initialize(self) -> None:
        """Initialize Docker client."""
        if self.client:
            return

        client = aiodocker.Docker(url=self.url)
        try:
            # Test connection
            await client.version()
        except DockerError as e:
            logger.error("Failed to initialize %s: %s", self.__class__.__name__, e)
            await client.close()
            raise
        self.client = client
        logger.info(
            "%s initialized successfully (%s)",
            self.__class__.__name__,
            self.client.docker_host,
        )

    async def close(self) -> None:
        """Close Docker client."""
        if self.client:
            await self.client.close()
            self.client = None

    async def _get_client(self) -> aiodocker.Docker:
        if not self.client:
            await self.initialize()

        assert self.client is not None  # For type checker
        return self.client

    async def _container(self, container_id: str) -> DockerContainer:
        # A handle only; no request is made until a method is awaited on it
        client = await self._get_client()
        return client.containers.container(container_id)

    async def list_containers(self) -> List[ContainerRef]:
        """List running containers."""
        client = await self._get_client()
        containers = await client.containers.list()
        return [
            ContainerRef(id=container.id, command=container["Command"])
            for container in containers
        ]

    async def create_container(
        self, config: Dict[str, Any], host_config: Optional[Dict[str, Any]] = None
    ) -> str:
        """Create a container from a config and host config pair."""
        client = await self._get_client()
        payload = dict(config)
        if host_config is not None:
            payload["HostConfig"] = host_config
        container = await client.containers.create(config=payload)
        logger.debug("Created container %s from image %s", container.id, config.get("Image"))
        return container.id

    async def start_container(self, container_id: str) -> None:
        container = await self._container(container_id)
        await container.start()

    async def stop_container(
        self, container_id: str, timeout: Optional[float] = None
    ) -> None:
        container = await self._container(container_id)
        if timeout is None:
            await container.stop()
        else:
            await container.stop(t=int(timeout))

    async def remove_container(self, container_id: str) -> None:
        container = await self._container(container_id)
        await container.delete()

    async def wait_container(self, container_id: str) -> int:
        container = await self._container(container_id)
        result = await container.wait()
        return int(result["StatusCode"])

    async def get_logs(self, container_id: str) -> bytes:
        """Get combined stdout and stderr logs."""
        container = await self._container(container_id)
        lines = await container.log(stdout=True, stderr=True)
        return "".join(lines).encode("utf-8")

    async def exec_in_container(
        self, container_id: str, cmd: Sequence[str]
    ) -> ExecResult:
        """Execute a command and collect its output and exit code."""
        container = await self._container(container_id)
        options = self.exec_options

        execution = await container.exec(
            list(cmd),
            stdout=options.attach_stdout,
            stderr=options.attach_stderr,
            tty=options.tty,
            privileged=options.privileged,
            user=options.user,
        )

        chunks: List[bytes] = []
        async with execution.start(detach=False) as stream:
            while True:
                message = await stream.read_out()
                if message is None:
                    break
                chunks.append(message.data)

        info = await execution.inspect()
        # ExitCode is null while the engine has not reaped the process yet
        exit_code = info.get("ExitCode") or 0
        logger.debug(
            "Exec %s in container %s finished with rc %s", execution.id, container_id, exit_code
        )
        return ExecResult(exit_code=int(exit_code), output=b"".join(chunks))

    async def inspect_container(self, container_id: str) -> str:
        """Return the container's IP address."""
        container = await self._container(container_id)
        container_info = await container.show()
        return self._get_ip_address(container_info)

    async def inspect_container_raw(self, container_id: str) -> bytes:
        """Return the container's inspection payload (including sizes) unparsed."""
        client = await self._get_client()
        async with client._query(
            f"containers/{container_id}/json", params={"size": "1"}
        ) as response:
            return await response.read()

    async def remove_image(self, name: str) -> None:
        client = await self._get_client()
        await client.images.delete(name)

    async def create_volume(self) -> str:
        client = await self._get_client()
        volume = await client.volumes.create({})
        logger.debug("Created volume %s", volume.name)
        return volume.name

    async def remove_volume(self, name: str) -> None:
        client = await self._get_client()
        await DockerVolume(client, name).delete()

    def _get_ip_address(self, container_info: Dict[str, Any]) -> str:
        """
        Extract the IP address from container inspection data.

        Uses the configured network's address when the container is attached
        to it, otherwise the default bridge address.
        """
        network_settings = container_info.get("NetworkSettings") or {}
        networks = network_settings.get("Networks") or {}

        if self.network and self.network in networks:
            return networks[self.network].get("IPAddress") or ""
        return network_settings.get("IPAddress") or ""
