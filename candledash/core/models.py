"""
Core data models for the dashboard.

Contains dataclasses for:
- Candles (OHLCV samples)
- Channel messages (ticks and the shutdown marker)
- Display currencies
"""

from dataclasses import dataclass, replace
from enum import Enum


class Currency(Enum):
    """Display currency of an instrument."""
    USD = "USD"
    IDR = "IDR"

    @property
    def other(self) -> "Currency":
        """The currency shown on the converted page."""
        return Currency.IDR if self is Currency.USD else Currency.USD


@dataclass(frozen=True)
class Candle:
    """A single OHLCV candlestick for one simulated minute."""

    time: int  # Epoch seconds (logical clock)
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def is_bullish(self) -> bool:
        """Returns True if close >= open (green candle)."""
        return self.close >= self.open

    @property
    def body_bottom(self) -> float:
        return min(self.open, self.close)

    @property
    def body_top(self) -> float:
        return max(self.open, self.close)

    def scaled(self, factor: float) -> "Candle":
        """
        Return a copy with every price multiplied by factor.

        Volume is a base-asset quantity and is left unchanged.
        """
        if factor == 1.0:
            return self
        return replace(
            self,
            open=self.open * factor,
            high=self.high * factor,
            low=self.low * factor,
            close=self.close * factor,
        )


@dataclass(frozen=True)
class Tick:
    """A freshly generated candle for one instrument."""

    instrument_id: int
    candle: Candle


@dataclass(frozen=True)
class Shutdown:
    """Marker message asking the consumer loop to stop."""


SHUTDOWN = Shutdown()

Message = Tick | Shutdown
