"""
Periodic sweeps over active containers.

A sweep lists the running containers and performs one action on each of
them, writing human readable progress to a text sink. Two sweeps exist:

- exec sweep: run a fixed command inside every container
- inspect sweep: print every container's inspection payload

Both loops sleep first and then look at the cancellation event, so a
cancellation is observed at most one interval later and never interrupts a
sweep that already started.
"""

import asyncio
import json
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TextIO

from lighthouse.config import settings
from lighthouse.drivers.core.base import ContainerDriver, ContainerRef

logger = logging.getLogger(__name__)

ContainerAction = Callable[[TextIO, ContainerRef], Awaitable[None]]


def _emit(sink: TextIO, line: str) -> None:
    sink.write(line + "\n")
    sink.flush()


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def format_inspect_json(body: bytes) -> str:
    """
    Re-indent an inspection payload with tabs.

    Only whitespace between tokens changes: strings, numbers and key order
    are kept exactly as the engine sent them.

    Raises:
        ValueError: If the payload is not valid UTF-8 JSON
    """
    text = body.decode("utf-8")
    json.loads(text, parse_constant=_reject_constant)
    return _reindent(text, "\t")


def _reindent(text: str, indent: str) -> str:
    out: List[str] = []
    depth = 0
    in_string = False
    escaped = False
    # Newline after an opening bracket is deferred so empty {} and [] stay compact
    opened = False

    for char in text:
        if in_string:
            out.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char in " \t\r\n":
            continue

        if opened:
            opened = False
            if char in "}]":
                depth -= 1
                out.append(char)
                continue
            out.append("\n" + indent * depth)

        if char in "{[":
            depth += 1
            opened = True
            out.append(char)
        elif char in "}]":
            depth -= 1
            out.append("\n" + indent * depth + char)
        elif char == ",":
            out.append(",\n" + indent * depth)
        elif char == ":":
            out.append(": ")
        else:
            if char == '"':
                in_string = True
            out.append(char)

    return "".join(out)


class ContainerMonitor:
    """Runs exec and inspect sweeps against one shared container driver."""

    def __init__(
        self, driver: ContainerDriver, sweep_interval: Optional[float] = None
    ):
        """
        Initialize the monitor

        Args:
            driver: Container driver shared by every sweep
            sweep_interval: Seconds to sleep before each sweep (default: settings.sweep_interval)
        """
        self.driver = driver
        self.sweep_interval = (
            settings.sweep_interval if sweep_interval is None else sweep_interval
        )

    async def exec_in_active_containers(
        self, sink: TextIO, cancel: asyncio.Event, cmd: Sequence[str]
    ) -> None:
        """Run ``cmd`` in every running container, once per interval, until cancelled."""
        command = list(cmd)

        async def run_exec(sink: TextIO, container: ContainerRef) -> None:
            try:
                result = await self.driver.exec_in_container(container.id, command)
            except Exception as e:
                logger.error(f"Exec in container {container.id} failed: {e}")
                _emit(sink, f"container exec error: {e!r}")
                return

            text = result.output.decode("utf-8", errors="replace")
            _emit(
                sink,
                f"exec of command {command!r} into {container.id} "
                f"had rc {result.exit_code} and text {text}",
            )

        await self._run(sink, cancel, run_exec, "exec")

    async def inspect_active_containers(
        self, sink: TextIO, cancel: asyncio.Event
    ) -> None:
        """Print every running container's inspection JSON, once per interval, until cancelled."""

        async def run_inspect(sink: TextIO, container: ContainerRef) -> None:
            try:
                body = await self.driver.inspect_container_raw(container.id)
            except Exception as e:
                logger.error(f"Inspect of container {container.id} failed: {e}")
                _emit(sink, f"container inspect error: {e!r}")
                return

            raw = body.decode("utf-8", errors="replace")
            try:
                formatted = format_inspect_json(body)
            except ValueError:
                logger.debug(f"Inspect payload of {container.id} is not valid JSON")
                _emit(sink, f"inspect of {container.id} returned raw json {raw}")
                return

            _emit(
                sink, f"inspect of {container.id} returned formatted json:\n{formatted}"
            )

        await self._run(sink, cancel, run_inspect, "inspect")

    async def _run(
        self,
        sink: TextIO,
        cancel: asyncio.Event,
        action: ContainerAction,
        name: str,
    ) -> None:
        """Main sweep loop"""
        logger.info(f"{name} sweep started with interval of {self.sweep_interval} seconds")
        while True:
            await asyncio.sleep(self.sweep_interval)
            if cancel.is_set():
                logger.info(f"{name} sweep stopped")
                return

            containers = await self._list_containers(sink)
            if containers is None:
                continue

            for container in containers:
                _emit(
                    sink,
                    f"found container {container.id} running command {container.command}",
                )
                await action(sink, container)

    async def _list_containers(self, sink: TextIO) -> Optional[List[ContainerRef]]:
        """List running containers, reporting a failure to the sink instead of raising."""
        try:
            containers = await self.driver.list_containers()
        except Exception as e:
            logger.error(f"Failed to list containers: {e}", exc_info=True)
            _emit(sink, f"container list error: {e!r}")
            return None

        logger.debug(f"Found {len(containers)} running containers")
        _emit(sink, f"found {len(containers)} containers")
        return containers
