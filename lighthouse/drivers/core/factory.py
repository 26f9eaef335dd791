"""
Driver factory for creating container runtime drivers.

This module provides factory functions to instantiate the appropriate
container driver based on configuration.
"""

from typing import Callable, Dict, Optional
import logging

from lighthouse.drivers.core.base import ContainerDriver

logger = logging.getLogger(__name__)

# Driver registry mapping driver type to driver class factory
_DRIVER_REGISTRY: Dict[str, Callable[..., ContainerDriver]] = {}


def _get_driver_registry() -> Dict[str, Callable[..., ContainerDriver]]:
    """
    Lazily populate and return the driver registry.

    Uses lazy imports to avoid circular dependencies and improve startup time.
    """
    if not _DRIVER_REGISTRY:
        from lighthouse.drivers.docker.driver import DockerDriver
        from lighthouse.drivers.podman.driver import PodmanDriver

        _DRIVER_REGISTRY.update(
            {
                "docker": DockerDriver,
                "podman": PodmanDriver,
            }
        )
    return _DRIVER_REGISTRY


# Global driver instance
_driver: Optional[ContainerDriver] = None


def create_driver(driver_type: str, url: Optional[str] = None) -> ContainerDriver:
    """
    Create a container driver instance based on the specified type.

    Args:
        driver_type: One of:
            - "docker": Docker Engine API
            - "podman": Podman's Docker-compatible API
        url: Engine API URL overriding the driver's default endpoint

    Returns:
        A ContainerDriver instance

    Raises:
        ValueError: If the driver type is not supported.
    """
    registry = _get_driver_registry()

    if driver_type not in registry:
        raise ValueError(
            f"Unknown driver type: {driver_type}. "
            "Supported types: " + ", ".join(sorted(registry))
        )

    return registry[driver_type](url=url)


async def initialize_driver(
    driver_type: str, url: Optional[str] = None
) -> ContainerDriver:
    """
    Create, initialize and register the process-wide container driver.

    Args:
        driver_type: The type of driver to create
        url: Optional engine API URL

    Returns:
        The initialized ContainerDriver instance

    Raises:
        RuntimeError: If a driver is already registered
    """
    global _driver
    if _driver is not None:
        raise RuntimeError("Container driver already initialized")

    driver = create_driver(driver_type, url=url)
    await driver.initialize()
    _driver = driver
    logger.info("Container driver initialized: %s", driver_type)
    return driver


async def close_driver() -> None:
    """Close the process-wide container driver, if any."""
    global _driver
    if _driver is not None:
        driver, _driver = _driver, None
        await driver.close()
        logger.info("Container driver closed")
