"""
Dashboard configuration.

Centralizes all magic numbers and adjustable parameters. There are no config
files: defaults live here and the CLI overrides a few of them.
"""

from dataclasses import dataclass

from candledash.core.errors import ConfigurationError
from candledash.core.instruments import DEFAULT_INSTRUMENTS, InstrumentSpec


@dataclass
class DashboardConfig:
    """Configuration for the generator, the window store and the render loop."""

    # =========================================================
    # History
    # =========================================================

    # Candles retained per instrument (oldest evicted first)
    window_size: int = 30

    # =========================================================
    # Tick Generator
    # =========================================================

    # Wall-clock seconds between generation rounds
    tick_interval_seconds: float = 1.0

    # Logical clock advance per round (one simulated minute)
    logical_step_seconds: int = 60

    # High/low wick spread as a fraction of the instrument volatility
    wick_spread_ratio: float = 0.2

    # Base volume draw, multiplied by the instrument volume scale
    volume_min: float = 100.0
    volume_max: float = 1000.0

    # Optional seed for a reproducible random stream
    seed: int | None = None

    # =========================================================
    # Render Loop
    # =========================================================

    # Target frame period (also the input poll timeout)
    frame_period_seconds: float = 0.1
    input_poll_timeout_seconds: float = 0.1

    # Bounded wait for the producer thread at shutdown
    shutdown_join_timeout_seconds: float = 1.5

    # =========================================================
    # Chart Projection
    # =========================================================

    # Price axis padding as a fraction of the low..high range
    price_padding_ratio: float = 0.1

    # Volume axis headroom multiplier over the max volume
    volume_headroom: float = 1.1

    # Above this many candles only first/last time labels are shown
    max_time_labels: int = 5

    # Fixed rate for the converted currency page (IDR per USD)
    usd_idr_rate: float = 16654.0

    # =========================================================
    # Instruments & Logging
    # =========================================================

    instruments: tuple[InstrumentSpec, ...] = DEFAULT_INSTRUMENTS

    log_file: str = "candledash.log"

    def validate(self) -> "DashboardConfig":
        """
        Check invariants the rest of the system relies on.

        Raises:
            ConfigurationError: On a non-positive size, interval, rate or ratio
        """
        if self.window_size < 1:
            raise ConfigurationError(f"window_size must be >= 1, got {self.window_size}")
        if self.tick_interval_seconds <= 0:
            raise ConfigurationError("tick_interval_seconds must be positive")
        if self.logical_step_seconds <= 0:
            raise ConfigurationError("logical_step_seconds must be positive")
        if self.wick_spread_ratio < 0:
            raise ConfigurationError("wick_spread_ratio must not be negative")
        if self.shutdown_join_timeout_seconds < 0:
            raise ConfigurationError("shutdown_join_timeout_seconds must not be negative")
        if self.price_padding_ratio < 0:
            raise ConfigurationError("price_padding_ratio must not be negative")
        if self.volume_headroom <= 0:
            raise ConfigurationError("volume_headroom must be positive")
        if self.max_time_labels < 1:
            raise ConfigurationError(f"max_time_labels must be >= 1, got {self.max_time_labels}")
        if self.frame_period_seconds <= 0:
            raise ConfigurationError("frame_period_seconds must be positive")
        if self.input_poll_timeout_seconds < 0:
            raise ConfigurationError("input_poll_timeout_seconds must not be negative")
        if self.usd_idr_rate <= 0:
            raise ConfigurationError("usd_idr_rate must be positive")
        if not 0 <= self.volume_min <= self.volume_max:
            raise ConfigurationError("volume range must satisfy 0 <= volume_min <= volume_max")
        if not self.instruments:
            raise ConfigurationError("At least one instrument is required")
        return self


# Default configuration instance
DEFAULT_CONFIG = DashboardConfig()
