#!/usr/bin/env python3
"""
Headless tests for the Textual dashboard app and the CLI.

Run with:
    python -m pytest tests/test_dashboard_ui.py -v
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path for standalone execution
sys.path.insert(0, str(Path(__file__).parent.parent))

# ruff: noqa: E402
import pytest

import candledash.ui.cli as cli_module
import candledash.ui.dashboard as dashboard_module
from candledash.core.config import DashboardConfig
from candledash.core.errors import RenderError
from candledash.core.loop import LoopState
from candledash.core.selection import Page
from candledash.ui.cli import build_config, create_parser, run_cli
from candledash.ui.components import CandlestickChart, PriceHeadline
from candledash.ui.dashboard import CandleDashboard


def fast_config() -> DashboardConfig:
    """Seeded config with a short tick interval so data shows up quickly."""
    return DashboardConfig(tick_interval_seconds=0.05, frame_period_seconds=0.05, seed=3)


class TestDashboardApp:
    """Tests driving the app through Textual's headless pilot."""

    def test_keys_drive_selection_and_quit(self):
        """Test down, tab and q reach the loop and end the app cleanly."""
        app = CandleDashboard(config=fast_config())

        async def scenario():
            async with app.run_test(size=(120, 40)) as pilot:
                await pilot.pause(0.3)
                await pilot.press("down")
                await pilot.pause(0.2)
                assert app.market_selection.selected == 1

                await pilot.press("tab")
                await pilot.pause(0.2)
                assert app.market_selection.page is Page.CONVERTED

                await pilot.press("q")
                await asyncio.sleep(0.3)
                assert app.dashboard_loop.state is LoopState.SHUTDOWN

        asyncio.run(scenario())

        assert app.dashboard_loop.state is LoopState.SHUTDOWN
        assert app.bridge.shutdown_requested
        assert not app.generator.is_running
        assert not app.return_code

    def test_frames_reach_widgets(self):
        """Test ticks flow from the producer into the chart and headline."""
        app = CandleDashboard(config=fast_config())

        async def scenario():
            async with app.run_test(size=(120, 40)) as pilot:
                await pilot.pause(0.5)
                assert app.dashboard_loop.ticks_ingested > 0
                assert app.dashboard_loop.frames_rendered > 0
                assert app.query_one(CandlestickChart).border_title.startswith("USD/BTC")
                assert app.query_one(PriceHeadline) is not None

        asyncio.run(scenario())

    def test_unmount_stops_producer(self):
        """Test closing the app without the quit key still cancels the producer."""
        app = CandleDashboard(config=fast_config())

        async def scenario():
            async with app.run_test(size=(120, 40)) as pilot:
                await pilot.pause(0.1)
                assert app.generator.is_running

        asyncio.run(scenario())

        assert app.dashboard_loop.state is LoopState.SHUTDOWN
        assert not app.generator.is_running

    def test_render_error_exits_with_code_1(self):
        """Test an unrecoverable paint failure ends the app with return code 1."""

        class BrokenDashboard(CandleDashboard):
            def paint_frame(self, frame):
                raise RenderError("terminal went away")

        app = BrokenDashboard(config=fast_config())

        async def scenario():
            async with app.run_test(size=(120, 40)):
                await asyncio.sleep(0.3)

        asyncio.run(scenario())

        assert app.return_code == 1
        assert app.dashboard_loop.state is LoopState.SHUTDOWN
        assert app.dashboard_loop.frames_rendered == 0
        assert not app.generator.is_running


class TestCli:
    """Tests for argument parsing and config overrides."""

    def test_defaults(self):
        """Test defaults match the built-in configuration."""
        args = create_parser().parse_args([])
        config = build_config(args)
        assert config.seed is None
        assert config.log_file == "candledash.log"
        assert args.log_level == "INFO"

    def test_overrides(self):
        """Test seed, log file and log level flags."""
        args = create_parser().parse_args(
            ["--seed", "42", "--log-file", "/tmp/dash.log", "--log-level", "debug"]
        )
        config = build_config(args)
        assert config.seed == 42
        assert config.log_file == "/tmp/dash.log"
        assert args.log_level == "DEBUG"

    def test_bad_log_level_rejected(self):
        """Test an unknown log level is a usage error."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--log-level", "chatty"])


class StubLoop:
    def __init__(self):
        self.shutdowns = 0

    def shutdown(self):
        self.shutdowns += 1


class StubDashboard:
    """Stand-in app recording how the CLI drives it."""

    instances: list["StubDashboard"] = []
    exit_code: int | None = None

    def __init__(self, config):
        self.config = config
        self.dashboard_loop = StubLoop()
        self.return_code = None
        self.ran = False
        StubDashboard.instances.append(self)

    def run(self):
        self.ran = True
        self.return_code = self.exit_code


@pytest.fixture
def stub_app(monkeypatch):
    """Swap the Textual app for a stub and restore root logging afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level

    StubDashboard.instances = []
    StubDashboard.exit_code = None
    monkeypatch.setattr(dashboard_module, "CandleDashboard", StubDashboard)
    yield StubDashboard

    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestRunCli:
    """Tests for the CLI entry point and its exit codes."""

    def test_clean_quit_returns_zero(self, stub_app, tmp_path):
        """Test a clean run returns 0 and logs to the chosen file."""
        log_file = tmp_path / "dash.log"

        code = run_cli(["--seed", "7", "--log-file", str(log_file)])

        assert code == 0
        (app,) = stub_app.instances
        assert app.ran
        assert app.config.seed == 7
        assert app.dashboard_loop.shutdowns == 1

        assert log_file.exists()
        text = log_file.read_text()
        assert "Starting dashboard (seed=7)" in text
        assert "Dashboard exited with code 0" in text

    def test_app_return_code_is_passed_through(self, stub_app, tmp_path):
        """Test a render failure exit code reaches the caller."""
        stub_app.exit_code = 1
        code = run_cli(["--log-file", str(tmp_path / "dash.log")])
        assert code == 1

    def test_log_level_applied(self, stub_app, tmp_path):
        """Test the log level flag configures the root logger."""
        run_cli(["--log-file", str(tmp_path / "dash.log"), "--log-level", "debug"])
        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_config_returns_two(self, stub_app, monkeypatch, tmp_path, capsys):
        """Test an invalid configuration exits 2 without starting the app."""
        monkeypatch.setattr(cli_module, "DEFAULT_CONFIG", DashboardConfig(window_size=0))
        log_file = tmp_path / "dash.log"

        code = run_cli(["--log-file", str(log_file)])

        assert code == 2
        assert stub_app.instances == []
        assert not log_file.exists()
        assert "Invalid configuration" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
