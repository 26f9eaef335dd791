"""
Podman container driver implementation.

Podman serves a Docker-compatible Engine API on its service socket, so this
driver reuses DockerDriver and only changes where the client connects.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from lighthouse.config import settings
from lighthouse.drivers.docker.driver import DockerDriver
from lighthouse.models import ExecOptions

logger = logging.getLogger(__name__)


def get_podman_socket() -> str:
    """
    Return the URL of the Podman socket.

    For rootless Podman, the socket is typically in XDG_RUNTIME_DIR.
    """
    xdg = os.environ.get("XDG_RUNTIME_DIR", f"/run/user/{os.getuid()}")
    return f"unix://{xdg}/podman/podman.sock"


class PodmanDriver(DockerDriver):
    """
    Podman implementation of the ContainerDriver interface.

    Requires the Podman API service (``podman system service``) to be
    listening, which is what the podman.socket systemd unit provides.

    Configuration:
        - Set LIGHTHOUSE_CONTAINER_DRIVER=podman
        - Optionally set LIGHTHOUSE_DOCKER_URL to a non-default socket
    """

    def __init__(
        self,
        url: Optional[str] = None,
        exec_options: Optional[ExecOptions] = None,
        network: Optional[str] = None,
    ) -> None:
        super().__init__(
            url=url or settings.docker_url or get_podman_socket(),
            exec_options=exec_options,
            network=network,
        )
        logger.debug("Using Podman socket %s", self.url)
