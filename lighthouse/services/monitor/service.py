import asyncio
import logging
from typing import List, Optional, Sequence, TextIO

from lighthouse.config import settings
from lighthouse.services.monitor.monitor import ContainerMonitor

logger = logging.getLogger(__name__)


class SweepService:
    """Background worker running container sweeps as asyncio tasks"""

    def __init__(self, monitor: ContainerMonitor, sink: TextIO):
        """
        Initialize sweep service

        Args:
            monitor: Monitor whose sweeps are run
            sink: Text stream receiving the sweep output
        """
        self.monitor = monitor
        self.sink = sink
        self.cancel = asyncio.Event()
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start_exec_sweep(self, cmd: Sequence[str]) -> asyncio.Task:
        """Start the exec sweep in the background"""
        return self._start(
            self.monitor.exec_in_active_containers(self.sink, self.cancel, cmd),
            "exec-sweep",
        )

    def start_inspect_sweep(self) -> asyncio.Task:
        """Start the inspect sweep in the background"""
        return self._start(
            self.monitor.inspect_active_containers(self.sink, self.cancel),
            "inspect-sweep",
        )

    def _start(self, coro, name: str) -> asyncio.Task:
        if self.cancel.is_set():
            coro.close()
            raise RuntimeError("Sweep service is stopped; no new sweeps can be started")

        task = asyncio.create_task(coro, name=name)
        self._tasks.append(task)
        logger.info(f"Started {name}")
        return task

    async def wait(self) -> None:
        """Wait until every sweep has returned"""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    async def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop all sweeps

        Sweeps observe the cancellation after their current sleep, which can
        take up to one interval. Sweeps still running after ``timeout``
        seconds are cancelled.

        Args:
            timeout: Seconds to wait (default: settings.shutdown_timeout)
        """
        if not self._tasks:
            return

        self.cancel.set()
        timeout = settings.shutdown_timeout if timeout is None else timeout

        done, pending = await asyncio.wait(self._tasks, timeout=timeout)
        for task in pending:
            logger.warning(f"{task.get_name()} did not stop within {timeout}s, cancelling")
            task.cancel()
        for task in pending:
            try:
                await task
            except asyncio.CancelledError:
                pass
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.error(
                    f"{task.get_name()} failed: {task.exception()}",
                    exc_info=task.exception(),
                )
        self._tasks.clear()
        logger.info("Sweep service stopped")
