from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    # Container driver settings
    # Supported drivers:
    # - docker: Docker Engine API (DOCKER_HOST or the default socket unless docker_url is set)
    # - podman: Podman's Docker-compatible API on the rootless socket
    container_driver: Literal["docker", "podman"] = Field(
        default="docker", description="Container runtime driver to use"
    )
    docker_url: Optional[str] = Field(
        default=None,
        description="Engine API URL, e.g. unix:///var/run/docker.sock (optional)",
    )
    docker_network: Optional[str] = Field(
        default=None,
        description="Network whose IP is reported by inspect_container (optional)",
    )

    # Sweep settings
    sweep_interval: float = Field(
        default=60.0, gt=0, description="Seconds to sleep before every sweep"
    )
    shutdown_timeout: float = Field(
        default=10.0,
        ge=0,
        description="Seconds to wait for sweeps to stop before cancelling them",
    )

    # Exec settings
    exec_attach_stdout: bool = Field(
        default=True, description="Attach to stdout of exec sessions"
    )
    exec_attach_stderr: bool = Field(
        default=False, description="Attach to stderr of exec sessions"
    )
    exec_tty: bool = Field(default=False, description="Allocate a TTY for exec sessions")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    class Config:
        env_prefix = "LIGHTHOUSE_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
