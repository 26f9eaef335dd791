"""
Lighthouse test configuration

Shared pytest fixtures: an in-memory container driver and a text sink.
"""

import asyncio
import io
from typing import Dict, List, Optional, Sequence, Union

import pytest

from lighthouse.drivers.core.base import ContainerDriver, ContainerRef, ExecResult


# ============================================================================
# pytest marker registration
# ============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: unit tests, no container engine required"
    )


# ============================================================================
# Fake driver
# ============================================================================

class FakeDriver(ContainerDriver):
    """
    In-memory driver.

    Sets ``cancel`` when the ``stop_after``-th listing happens so a sweep
    returns after finishing that iteration.
    """

    def __init__(
        self,
        containers: Sequence[ContainerRef] = (),
        cancel: Optional[asyncio.Event] = None,
        stop_after: Optional[int] = None,
    ):
        self.containers = list(containers)
        self.cancel = cancel
        self.stop_after = stop_after
        self.list_errors: List[Exception] = []
        self.exec_results: Dict[str, Union[ExecResult, Exception]] = {}
        self.inspect_payloads: Dict[str, Union[bytes, Exception]] = {}
        self.list_calls = 0
        self.exec_calls: List[tuple] = []
        self.inspect_calls: List[str] = []
        self.removed: List[str] = []
        self.stopped: List[str] = []
        self.created = 0
        self.initialized = False
        self.closed = False

    async def initialize(self) -> None:
        self.initialized = True

    async def close(self) -> None:
        self.closed = True

    async def list_containers(self) -> List[ContainerRef]:
        self.list_calls += 1
        if self.cancel is not None and self.stop_after is not None:
            if self.list_calls >= self.stop_after:
                self.cancel.set()
        if self.list_errors:
            raise self.list_errors.pop(0)
        return list(self.containers)

    async def create_container(self, config, host_config=None) -> str:
        self.created += 1
        container_id = f"new{self.created}"
        self.containers.append(ContainerRef(id=container_id, command=" ".join(config.get("Cmd", []))))
        return container_id

    async def start_container(self, container_id: str) -> None:
        pass

    async def stop_container(self, container_id: str, timeout=None) -> None:
        if container_id not in [c.id for c in self.containers]:
            raise LookupError(f"No such container: {container_id}")
        self.stopped.append(container_id)

    async def remove_container(self, container_id: str) -> None:
        if container_id not in [c.id for c in self.containers]:
            raise LookupError(f"No such container: {container_id}")
        self.containers = [c for c in self.containers if c.id != container_id]
        self.removed.append(container_id)

    async def wait_container(self, container_id: str) -> int:
        return 0

    async def get_logs(self, container_id: str) -> bytes:
        return b""

    async def exec_in_container(self, container_id: str, cmd: Sequence[str]) -> ExecResult:
        self.exec_calls.append((container_id, list(cmd)))
        result = self.exec_results.get(container_id, ExecResult(exit_code=0, output=b""))
        if isinstance(result, Exception):
            raise result
        return result

    async def inspect_container(self, container_id: str) -> str:
        return "172.17.0.2"

    async def inspect_container_raw(self, container_id: str) -> bytes:
        self.inspect_calls.append(container_id)
        payload = self.inspect_payloads.get(container_id, b"{}")
        if isinstance(payload, Exception):
            raise payload
        return payload

    async def remove_image(self, name: str) -> None:
        pass

    async def create_volume(self) -> str:
        return "volume-1"

    async def remove_volume(self, name: str) -> None:
        pass


# ============================================================================
# Common fixtures
# ============================================================================

@pytest.fixture
def sink() -> io.StringIO:
    """Text sink collecting sweep output"""
    return io.StringIO()


@pytest.fixture
def make_driver():
    """Factory for FakeDriver instances"""
    return FakeDriver


@pytest.fixture(autouse=True)
def reset_global_driver(monkeypatch):
    """Start every test without a process-wide driver"""
    from lighthouse.drivers.core import factory

    monkeypatch.setattr(factory, "_driver", None)
