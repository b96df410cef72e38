"""
Exception types for the dashboard core.

Formatting never raises (it falls back to literal placeholders), so the
taxonomy here only covers channel lifecycle, startup invariants and the
render surface.
"""


class DashboardError(Exception):
    """Base class for dashboard errors."""


class ChannelClosed(DashboardError):
    """Raised on send after the consumer side closed the channel."""


class UnknownInstrumentError(DashboardError, LookupError):
    """An instrument id that was never registered reached the store."""

    def __init__(self, instrument_id: int):
        super().__init__(f"Unknown instrument id: {instrument_id}")
        self.instrument_id = instrument_id


class ConfigurationError(DashboardError, ValueError):
    """Invalid startup configuration (bad sizes, empty registry, ...)."""


class RenderError(DashboardError):
    """The render surface failed in a way the loop cannot recover from."""
