"""
Command line entrypoint for running container sweeps.

Usage:
    lighthouse exec [--inspect] -- CMD [ARGS...]
    lighthouse inspect
    python -m lighthouse ...

Environment Variables:
    LIGHTHOUSE_CONTAINER_DRIVER: docker or podman (default: docker)
    LIGHTHOUSE_DOCKER_URL: Engine API URL (default: DOCKER_HOST or local socket)
    LIGHTHOUSE_SWEEP_INTERVAL: Seconds between sweeps (default: 60)
    LIGHTHOUSE_SHUTDOWN_TIMEOUT: Seconds to wait for sweeps on shutdown (default: 10)
    LIGHTHOUSE_LOG_LEVEL: Logging level (default: INFO)
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional, TextIO

from lighthouse.config import settings
from lighthouse.drivers import close_driver, initialize_driver
from lighthouse.services.monitor import ContainerMonitor, SweepService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lighthouse",
        description="Periodically exec into or inspect every running container",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run `uptime` in every running container once a minute
  lighthouse exec -- uptime

  # Also print each container's inspection JSON
  lighthouse exec --inspect -- sh -c 'df -h /'

  # Inspect Podman containers every 10 seconds
  lighthouse --driver podman --interval 10 inspect

Note: Command-line arguments override environment variables.
        """,
    )

    parser.add_argument(
        "--driver",
        choices=["docker", "podman"],
        default=None,
        help="Container driver (default: LIGHTHOUSE_CONTAINER_DRIVER env or docker)",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Engine API URL (default: LIGHTHOUSE_DOCKER_URL env or the driver's socket)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between sweeps (default: LIGHTHOUSE_SWEEP_INTERVAL env or 60)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: LIGHTHOUSE_LOG_LEVEL env or INFO)",
    )

    subparsers = parser.add_subparsers(dest="mode", required=True)

    exec_parser = subparsers.add_parser(
        "exec", help="Run a command in every running container"
    )
    exec_parser.add_argument(
        "--inspect",
        action="store_true",
        help="Run the inspect sweep alongside the exec sweep",
    )
    exec_parser.add_argument("command", nargs="+", help="Command and arguments")

    subparsers.add_parser("inspect", help="Print every running container's inspection JSON")

    return parser


def get_sweep_interval(args: argparse.Namespace) -> float:
    """Get the sweep interval from CLI args or settings."""
    if args.interval is not None:
        if args.interval <= 0:
            logger.warning(
                "Invalid interval=%s, using %s", args.interval, settings.sweep_interval
            )
            return settings.sweep_interval
        return args.interval
    return settings.sweep_interval


async def run_sweeps(args: argparse.Namespace, sink: Optional[TextIO] = None) -> None:
    """
    Connect to the engine and run the requested sweeps until SIGINT or SIGTERM.

    Args:
        args: Parsed command-line arguments
        sink: Stream receiving sweep output (default: stdout)

    Raises:
        Exception: Whatever made a sweep stop before shutdown was requested
    """
    driver_type = args.driver or settings.container_driver
    interval = get_sweep_interval(args)

    logger.info("Starting Lighthouse")
    logger.info("  Driver: %s", driver_type)
    logger.info("  Sweep interval: %ss", interval)

    driver = await initialize_driver(driver_type, url=args.url)

    service = SweepService(
        ContainerMonitor(driver, sweep_interval=interval), sink or sys.stdout
    )

    # Set up signal handlers for graceful shutdown
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown_event.set)

    try:
        if args.mode == "exec":
            tasks = [service.start_exec_sweep(args.command)]
            if args.inspect:
                tasks.append(service.start_inspect_sweep())
        else:
            tasks = [service.start_inspect_sweep()]

        shutdown = asyncio.create_task(shutdown_event.wait())
        # Sweeps only return once cancelled; finishing early means one crashed
        await asyncio.wait([shutdown, *tasks], return_when=asyncio.FIRST_COMPLETED)
        shutdown.cancel()
        requested = shutdown_event.is_set()
        if requested:
            logger.info("Shutdown requested, waiting for sweeps to finish...")
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await service.stop()
        await close_driver()
        logger.info("Lighthouse stopped")

    if not requested:
        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
        raise RuntimeError("Sweeps stopped without a shutdown request")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entrypoint.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level or settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        asyncio.run(run_sweeps(args))
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
