"""
Terminal Candlestick Dashboard.

A dark-themed UI showing, for a set of synthetic instruments:
- Markets list with the last tick direction and change
- Candlestick chart of the rolling window for the selected instrument
- Volume bars under it
- Latest price, right-aligned

Keys: Up/Down cycle instruments, Tab toggles the currency page, q quits.

Textual owns the terminal (raw mode, alternate screen, painting). The
dashboard core runs inside it: a timer drives DashboardLoop.step() at the
frame period, key bindings feed a QueuedInput, and paint_frame() is the
render surface.

Run with:
    python run_dashboard.py
"""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.timer import Timer
from textual.widgets import Footer

from candledash.core.channel import ChannelBridge
from candledash.core.config import DEFAULT_CONFIG, DashboardConfig
from candledash.core.errors import RenderError
from candledash.core.instruments import InstrumentRegistry
from candledash.core.loop import DashboardLoop, Key, LoopState, QueuedInput
from candledash.core.projector import DashboardFrame
from candledash.core.selection import SelectionState
from candledash.core.tick_generator import TickGenerator
from candledash.ui.components import CandlestickChart, MarketsPanel, PriceHeadline, VolumeChart

logger = logging.getLogger(__name__)


class TextualSurface:
    """RenderSurface adapter painting frames into the dashboard widgets."""

    def __init__(self, app: "CandleDashboard"):
        self.app = app

    def render(self, frame: DashboardFrame) -> None:
        self.app.paint_frame(frame)


# ============================================================
# Main Dashboard App
# ============================================================
class CandleDashboard(App):
    """Live candlestick dashboard."""

    TITLE = "CANDLE DASHBOARD"
    CSS = """
    Screen {
        background: #000000;
    }

    .main-content {
        height: 1fr;
        margin: 1;
    }

    .charts {
        width: 1fr;
        height: 100%;
    }
    """
    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("up", "previous_market", "Prev", priority=True),
        Binding("down", "next_market", "Next", priority=True),
        Binding("tab", "toggle_page", "Page", priority=True),
    ]

    def __init__(
        self,
        config: DashboardConfig | None = None,
        registry: InstrumentRegistry | None = None,
        generator: TickGenerator | None = None,
    ):
        super().__init__()
        self.config = (config or DEFAULT_CONFIG).validate()
        self.registry = registry or InstrumentRegistry(self.config.instruments)

        self.bridge = ChannelBridge()
        self.generator = generator or TickGenerator(self.registry, self.config)
        self.key_queue = QueuedInput()
        self.dashboard_loop = DashboardLoop(
            registry=self.registry,
            bridge=self.bridge,
            surface=TextualSurface(self),
            input_source=self.key_queue,
            config=self.config,
            generator=self.generator,
        )
        self._frame_timer: Timer | None = None

    @property
    def market_selection(self) -> SelectionState:
        return self.dashboard_loop.selection

    def compose(self) -> ComposeResult:
        """Create the dashboard layout."""
        with Horizontal(classes="main-content"):
            yield MarketsPanel(id="markets-panel")
            with Vertical(classes="charts"):
                yield CandlestickChart(id="candle-chart")
                yield VolumeChart(id="volume-chart")
                yield PriceHeadline(id="price-headline")
        yield Footer()

    def on_mount(self) -> None:
        """Start the producer and the frame timer."""
        logger.info(f"Dashboard starting with markets: {', '.join(self.registry.symbols())}")
        self.generator.start(self.bridge)
        self._frame_timer = self.set_interval(self.config.frame_period_seconds, self.on_frame)

    def on_frame(self) -> None:
        """One DashboardLoop iteration; Textual's timer provides the pacing."""
        try:
            state = self.dashboard_loop.step(poll_timeout=0)
        except RenderError as e:
            self._stop_timer()
            self.exit(return_code=1, message=f"Render error: {e}")
            return

        if state is LoopState.SHUTDOWN:
            self._stop_timer()
            self.exit()

    def paint_frame(self, frame: DashboardFrame) -> None:
        """
        Render surface: push a projected frame into the widgets.

        Raises:
            RenderError: If the layout is missing a widget
        """
        try:
            with self.batch_update():
                self.query_one(MarketsPanel).update_display(frame.markets, frame.page)
                self.query_one(CandlestickChart).update_series(
                    frame.candles,
                    title=f"{frame.selected_symbol} ({frame.display_currency.value})",
                )
                self.query_one(VolumeChart).update_series(frame.volume)
                self.query_one(PriceHeadline).update_headline(frame.headline)
        except NoMatches as e:
            raise RenderError(f"Dashboard widget missing: {e}") from e

    def _stop_timer(self) -> None:
        if self._frame_timer is not None:
            self._frame_timer.stop()
            self._frame_timer = None

    # ============================================================
    # Key actions (queued for the loop's next input poll)
    # ============================================================

    def action_next_market(self) -> None:
        self.key_queue.push(Key.DOWN)

    def action_previous_market(self) -> None:
        self.key_queue.push(Key.UP)

    def action_toggle_page(self) -> None:
        self.key_queue.push(Key.TAB)

    def action_quit(self) -> None:
        """Request shutdown; the loop exits the app on its next step."""
        self.key_queue.push(Key.QUIT)

    def on_unmount(self) -> None:
        """Make sure the producer is cancelled whichever way the app exits."""
        self.dashboard_loop.shutdown()
        logger.info("Dashboard shutdown complete")
