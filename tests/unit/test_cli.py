"""
Unit tests: command line entrypoint
"""

import asyncio
import io
import os
import signal
from unittest.mock import patch

import pytest
from aiodocker.exceptions import DockerError

from lighthouse.drivers.core.base import ContainerRef, ExecResult


@pytest.mark.unit
class TestArgumentParsing:
    """Argument parsing tests"""

    def test_exec_command_after_separator(self):
        from lighthouse.cli import build_parser

        args = build_parser().parse_args(["exec", "--", "sh", "-c", "echo hi"])

        assert args.mode == "exec"
        assert args.command == ["sh", "-c", "echo hi"]
        assert args.inspect is False

    def test_global_options(self):
        from lighthouse.cli import build_parser

        args = build_parser().parse_args(
            ["--driver", "podman", "--interval", "5", "--log-level", "DEBUG", "inspect"]
        )

        assert args.mode == "inspect"
        assert args.driver == "podman"
        assert args.interval == 5.0
        assert args.log_level == "DEBUG"

    def test_mode_is_required(self):
        from lighthouse.cli import build_parser

        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_invalid_interval_falls_back_to_settings(self, monkeypatch):
        from lighthouse.cli import build_parser, get_sweep_interval
        from lighthouse.config import settings

        monkeypatch.setattr(settings, "sweep_interval", 30.0)

        assert get_sweep_interval(build_parser().parse_args(["--interval", "-1", "inspect"])) == 30.0
        assert get_sweep_interval(build_parser().parse_args(["inspect"])) == 30.0
        assert get_sweep_interval(build_parser().parse_args(["--interval", "2", "inspect"])) == 2.0


@pytest.mark.unit
class TestRunSweeps:
    """run_sweeps tests"""

    @pytest.mark.asyncio
    async def test_runs_until_signal(self, make_driver):
        from lighthouse.cli import build_parser, run_sweeps

        driver = make_driver([ContainerRef(id="c1", command="sh")])
        driver.exec_results["c1"] = ExecResult(exit_code=0, output=b"ok")
        sink = io.StringIO()
        args = build_parser().parse_args(["--interval", "0.01", "exec", "--inspect", "--", "true"])

        with patch("lighthouse.drivers.core.factory.create_driver", return_value=driver) as create:
            task = asyncio.create_task(run_sweeps(args, sink))
            while not (driver.exec_calls and driver.inspect_calls):
                await asyncio.sleep(0.01)
            os.kill(os.getpid(), signal.SIGTERM)
            await asyncio.wait_for(task, timeout=5)

        create.assert_called_once_with("docker", url=None)
        assert driver.initialized
        assert driver.closed
        assert "exec of command ['true'] into c1 had rc 0 and text ok" in sink.getvalue()
        assert "inspect of c1 returned formatted json:" in sink.getvalue()

    def test_main_returns_error_when_engine_unreachable(self, make_driver):
        from lighthouse.cli import main

        driver = make_driver()

        async def fail():
            raise DockerError(900, {"message": "Cannot connect to Docker Engine"})

        driver.initialize = fail

        with patch("lighthouse.drivers.core.factory.create_driver", return_value=driver):
            assert main(["inspect"]) == 1

    @pytest.mark.asyncio
    async def test_crashed_sweep_is_raised(self, make_driver):
        from lighthouse.cli import build_parser, run_sweeps
        from lighthouse.drivers.core import factory

        class BrokenSink(io.StringIO):
            def write(self, text):
                raise BrokenPipeError(32, "Broken pipe")

        driver = make_driver([ContainerRef(id="c1", command="sh")])
        args = build_parser().parse_args(["--interval", "0.01", "inspect"])

        with patch("lighthouse.drivers.core.factory.create_driver", return_value=driver):
            with pytest.raises(BrokenPipeError):
                await asyncio.wait_for(run_sweeps(args, BrokenSink()), timeout=5)

        assert driver.closed
        assert factory._driver is None

    def test_main_returns_error_when_sweep_crashes(self):
        from lighthouse.cli import main

        with patch("lighthouse.cli.run_sweeps", side_effect=BrokenPipeError(32, "Broken pipe")):
            assert main(["inspect"]) == 1
