"""
Core streaming pipeline and chart engine for the dashboard.

Modules:
- models: Candle, channel messages, currencies
- instruments: Fixed id-indexed instrument registry
- config: Dashboard configuration and defaults
- channel: Producer/consumer message handoff
- tick_generator: Synthetic candle producer thread
- window_store: Bounded per-instrument candle history
- selection: Selected instrument and page
- formatting: USD/IDR price and time formatting
- projector: Windows -> chart series and dashboard frames
- loop: Consumer loop state machine
"""

from candledash.core.channel import ChannelBridge
from candledash.core.config import DEFAULT_CONFIG, DashboardConfig
from candledash.core.errors import (
    ChannelClosed,
    ConfigurationError,
    DashboardError,
    RenderError,
    UnknownInstrumentError,
)
from candledash.core.instruments import (
    DEFAULT_INSTRUMENTS,
    Instrument,
    InstrumentRegistry,
    InstrumentSpec,
)
from candledash.core.loop import DashboardLoop, Key, LoopState, QueuedInput
from candledash.core.models import SHUTDOWN, Candle, Currency, Shutdown, Tick
from candledash.core.projector import DashboardFrame, build_frame
from candledash.core.selection import Page, SelectionState
from candledash.core.tick_generator import TickGenerator
from candledash.core.window_store import CandleWindow, RollingWindowStore

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_INSTRUMENTS",
    "SHUTDOWN",
    "Candle",
    "CandleWindow",
    "ChannelBridge",
    "ChannelClosed",
    "ConfigurationError",
    "Currency",
    "DashboardConfig",
    "DashboardError",
    "DashboardFrame",
    "DashboardLoop",
    "Instrument",
    "InstrumentRegistry",
    "InstrumentSpec",
    "Key",
    "LoopState",
    "Page",
    "QueuedInput",
    "RenderError",
    "RollingWindowStore",
    "SelectionState",
    "Shutdown",
    "Tick",
    "TickGenerator",
    "UnknownInstrumentError",
    "build_frame",
]
