"""
Instrument registry.

Instruments are declared once at startup and addressed by a small integer id
(their index in the registry). Symbols are only used for display.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from candledash.core.errors import ConfigurationError, UnknownInstrumentError
from candledash.core.models import Currency


@dataclass(frozen=True)
class InstrumentSpec:
    """Declaration of an instrument before it is assigned an id."""

    symbol: str
    currency: Currency
    seed_price: float
    volatility: float
    volume_scale: float


@dataclass(frozen=True)
class Instrument:
    """A registered instrument with its generator parameters."""

    id: int
    symbol: str
    currency: Currency
    seed_price: float
    volatility: float  # Max absolute price move per tick
    volume_scale: float  # Multiplier on the 100-1000 base volume draw


# Seed prices and scales for the default markets
DEFAULT_INSTRUMENTS: tuple[InstrumentSpec, ...] = (
    InstrumentSpec("USD/BTC", Currency.USD, 103879.0, 100.0, 5.0),
    InstrumentSpec("USD/ETH", Currency.USD, 2548.64, 10.0, 20.0),
    InstrumentSpec("IDR/BTC", Currency.IDR, 1729998000.0, 1000000.0, 5.0),
    InstrumentSpec("IDR/ETH", Currency.IDR, 42679530.0, 100000.0, 20.0),
)


class InstrumentRegistry:
    """Fixed-size, id-indexed collection of instruments."""

    def __init__(self, specs: Iterable[InstrumentSpec]):
        """
        Build the registry, assigning ids in declaration order.

        Args:
            specs: Instrument declarations

        Raises:
            ConfigurationError: If no instruments are given or a symbol repeats
        """
        instruments: list[Instrument] = []
        seen: set[str] = set()
        for index, spec in enumerate(specs):
            if spec.symbol in seen:
                raise ConfigurationError(f"Duplicate instrument symbol: {spec.symbol}")
            if spec.volatility < 0 or spec.volume_scale < 0:
                raise ConfigurationError(f"Negative scale for instrument {spec.symbol}")
            seen.add(spec.symbol)
            instruments.append(
                Instrument(
                    id=index,
                    symbol=spec.symbol,
                    currency=spec.currency,
                    seed_price=spec.seed_price,
                    volatility=spec.volatility,
                    volume_scale=spec.volume_scale,
                )
            )

        if not instruments:
            raise ConfigurationError("At least one instrument is required")

        self._instruments: tuple[Instrument, ...] = tuple(instruments)

    def __len__(self) -> int:
        return len(self._instruments)

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._instruments)

    def __getitem__(self, instrument_id: int) -> Instrument:
        if not 0 <= instrument_id < len(self._instruments):
            raise UnknownInstrumentError(instrument_id)
        return self._instruments[instrument_id]

    def symbols(self) -> list[str]:
        return [i.symbol for i in self._instruments]

    def find(self, symbol: str) -> Instrument | None:
        """Look up an instrument by display symbol."""
        for instrument in self._instruments:
            if instrument.symbol == symbol:
                return instrument
        return None
