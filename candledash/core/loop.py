"""
Dashboard Loop - single-threaded consumer and frame driver.

Each step drains at most one message from the channel, polls input, and
renders a projected frame. The loop owns the window store and the selection
state; the only thing it shares with the producer is the ChannelBridge.

The loop does not know about the terminal: it talks to an InputSource and a
RenderSurface. The Textual app provides both (see candledash.ui.dashboard),
and tests use in-memory fakes.
"""

import logging
import queue
import time
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from candledash.core.channel import ChannelBridge
from candledash.core.config import DEFAULT_CONFIG, DashboardConfig
from candledash.core.errors import RenderError
from candledash.core.instruments import InstrumentRegistry
from candledash.core.models import Shutdown, Tick
from candledash.core.projector import DashboardFrame, build_frame
from candledash.core.selection import SelectionState
from candledash.core.tick_generator import TickGenerator
from candledash.core.window_store import RollingWindowStore

logger = logging.getLogger(__name__)


class Key(Enum):
    """The closed set of keys the dashboard reacts to."""
    UP = "up"
    DOWN = "down"
    TAB = "tab"
    QUIT = "quit"


class LoopState(Enum):
    RUNNING = "running"
    SHUTDOWN = "shutdown"


class InputSource(Protocol):
    def poll(self, timeout: float) -> Key | None:
        """Return the next key, waiting at most timeout seconds."""
        ...


class RenderSurface(Protocol):
    def render(self, frame: DashboardFrame) -> None:
        """Paint one frame. Raise RenderError on unrecoverable failure."""
        ...


class QueuedInput:
    """
    Thread-safe key queue implementing InputSource.

    Key handlers (or tests) push keys; the loop polls them.
    """

    def __init__(self) -> None:
        self._keys: queue.Queue[Key] = queue.Queue()

    def push(self, key: Key) -> None:
        self._keys.put(key)

    def poll(self, timeout: float) -> Key | None:
        try:
            if timeout <= 0:
                return self._keys.get_nowait()
            return self._keys.get(timeout=timeout)
        except queue.Empty:
            return None


class DashboardLoop:
    """
    Running -> Shutdown state machine driving the dashboard.

    Usage:
        loop = DashboardLoop(registry, bridge, surface, input_source, generator=gen)
        loop.run()              # blocking, paced at the frame period
    or, under an external scheduler:
        state = loop.step()     # one iteration
    """

    def __init__(
        self,
        registry: InstrumentRegistry,
        bridge: ChannelBridge,
        surface: RenderSurface,
        input_source: InputSource,
        config: DashboardConfig | None = None,
        generator: TickGenerator | None = None,
        store: RollingWindowStore | None = None,
        selection: SelectionState | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the loop.

        Args:
            registry: Registered instruments
            bridge: Channel fed by the tick generator
            surface: Where frames are rendered
            input_source: Where keys come from
            config: Frame period, poll timeout, projection parameters
            generator: Producer to join on shutdown (optional)
            store: Window store (created from the registry if omitted)
            selection: Selection state (created from the registry if omitted)
            clock: Monotonic clock for frame pacing
            sleep: Sleep function for frame pacing

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.registry = registry
        self.bridge = bridge
        self.surface = surface
        self.input_source = input_source
        self.config = (config or DEFAULT_CONFIG).validate()
        self.generator = generator
        self.store = store or RollingWindowStore(registry, self.config.window_size)
        self.selection = selection or SelectionState(count=len(registry))
        self._clock = clock
        self._sleep = sleep

        self.state = LoopState.RUNNING
        self.frames_rendered = 0
        self.ticks_ingested = 0

    @property
    def running(self) -> bool:
        return self.state is LoopState.RUNNING

    def drain_one(self) -> None:
        """Apply at most one pending message from the channel."""
        message = self.bridge.try_receive()
        if message is None:
            return
        if isinstance(message, Tick):
            self.store.ingest(message.instrument_id, message.candle)
            self.ticks_ingested += 1
        elif isinstance(message, Shutdown):
            logger.info("Shutdown message received from channel")
            self.shutdown()

    def handle_key(self, key: Key | None) -> None:
        """Apply one input event to the selection state."""
        if key is Key.DOWN:
            self.selection.next()
        elif key is Key.UP:
            self.selection.previous()
        elif key is Key.TAB:
            page = self.selection.toggle_page()
            logger.debug(f"Page switched to {page.value}")
        elif key is Key.QUIT:
            logger.info("Quit key pressed")
            self.shutdown()

    def frame(self) -> DashboardFrame:
        """Project the current state for rendering."""
        return build_frame(self.registry, self.store, self.selection, self.config)

    def step(self, poll_timeout: float | None = None) -> LoopState:
        """
        Run one loop iteration.

        Args:
            poll_timeout: Input wait override (defaults to the configured timeout;
                pass 0 when an event loop already provides the pacing)

        Returns:
            Loop state after the iteration
        """
        if not self.running:
            return self.state

        self.drain_one()
        if not self.running:
            return self.state

        timeout = self.config.input_poll_timeout_seconds if poll_timeout is None else poll_timeout
        self.handle_key(self.input_source.poll(timeout))
        if not self.running:
            return self.state

        try:
            self.surface.render(self.frame())
        except RenderError:
            logger.exception("Unrecoverable render error, shutting down")
            self.shutdown()
            raise
        self.frames_rendered += 1

        return self.state

    def run(self) -> None:
        """Step until shutdown, holding an approximately fixed frame period."""
        period = self.config.frame_period_seconds
        logger.info("Dashboard loop started")

        while self.running:
            started = self._clock()
            self.step()
            elapsed = self._clock() - started
            if self.running and elapsed < period:
                self._sleep(period - elapsed)

        logger.info(
            f"Dashboard loop stopped: {self.frames_rendered} frames, "
            f"{self.ticks_ingested} ticks ingested"
        )

    def shutdown(self) -> None:
        """
        Transition to SHUTDOWN and hand cancellation to the producer.

        Idempotent. Messages still queued are never ingested.
        """
        if self.state is LoopState.SHUTDOWN:
            return
        self.state = LoopState.SHUTDOWN

        self.bridge.request_shutdown()
        self.bridge.close()

        if self.generator is not None:
            self.generator.join(self.config.shutdown_join_timeout_seconds)

        logger.info(f"Dashboard shut down ({self.bridge.pending()} messages discarded)")
