"""
Chart Projector - turn candle windows into renderable chart series.

Everything here is a pure function of its inputs: windows are read, never
modified, and currency conversion works on scaled copies.

The output is abstract geometry in data coordinates (x = candle slot,
y = price or volume) plus the labels and colors a render surface needs.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from candledash.core.config import DEFAULT_CONFIG, DashboardConfig
from candledash.core.formatting import format_change, format_price, format_time, format_volume
from candledash.core.instruments import Instrument, InstrumentRegistry
from candledash.core.models import Candle, Currency
from candledash.core.selection import Page, SelectionState
from candledash.core.window_store import RollingWindowStore

# Theme colors (Rich markup hex codes)
COLOR_UP = "#44ffaa"
COLOR_DOWN = "#ff7777"
COLOR_WICK = "white"
COLOR_VOLUME = "#5599ff"
COLOR_SELECTED = "yellow"
COLOR_FLAT = "grey62"
COLOR_HEADLINE = "cyan"

# Candle body width in x units (each candle occupies one unit slot)
BODY_WIDTH = 0.6

ICON_UP = "▲"
ICON_DOWN = "▼"


@dataclass(frozen=True)
class CandleGlyph:
    """Draw instruction for one candle: a wick line and a body rectangle."""

    x: float  # Slot center
    body_bottom: float
    body_top: float
    wick_low: float
    wick_high: float
    color: str
    width: float = BODY_WIDTH


@dataclass(frozen=True)
class VolumeBar:
    """Draw instruction for one volume bar."""

    x: float
    height: float


@dataclass(frozen=True)
class CandlestickSeries:
    """Candlestick chart for one instrument window."""

    glyphs: tuple[CandleGlyph, ...] = ()
    x_bounds: tuple[float, float] = (0.0, 0.0)
    y_bounds: tuple[float, float] = (0.0, 0.0)
    x_labels: tuple[str, ...] = ()
    y_labels: tuple[str, ...] = ()
    title: str = "Candlestick Chart"

    @property
    def is_empty(self) -> bool:
        return not self.glyphs

    @classmethod
    def empty(cls) -> "CandlestickSeries":
        """Placeholder for a window with no data yet."""
        return cls()


@dataclass(frozen=True)
class VolumeSeries:
    """Volume bar chart for one instrument window."""

    bars: tuple[VolumeBar, ...] = ()
    x_bounds: tuple[float, float] = (0.0, 0.0)
    y_bounds: tuple[float, float] = (0.0, 0.0)
    x_labels: tuple[str, ...] = ()
    y_labels: tuple[str, ...] = ()
    color: str = COLOR_VOLUME
    title: str = "Volume"

    @property
    def is_empty(self) -> bool:
        return not self.bars

    @classmethod
    def empty(cls) -> "VolumeSeries":
        return cls()


@dataclass(frozen=True)
class Headline:
    """Right-aligned price text under the charts."""

    text: str
    color: str = COLOR_HEADLINE
    align: str = "right"
    bold: bool = True


@dataclass(frozen=True)
class MarketRow:
    """One line of the markets sidebar."""

    symbol: str
    icon: str
    change_text: str
    color: str
    selected: bool

    @property
    def label(self) -> str:
        return f"{self.icon} {self.symbol} {self.change_text}".rstrip()


@dataclass(frozen=True)
class DashboardFrame:
    """Everything the render surface needs for one frame."""

    markets: tuple[MarketRow, ...]
    selected_symbol: str
    page: Page
    display_currency: Currency
    candles: CandlestickSeries = field(default_factory=CandlestickSeries.empty)
    volume: VolumeSeries = field(default_factory=VolumeSeries.empty)
    headline: Headline | None = None


# ============================================================
# Currency view
# ============================================================


def display_currency(instrument: Instrument, page: Page) -> Currency:
    """Currency the instrument is shown in on the given page."""
    if page is Page.CONVERTED:
        return instrument.currency.other
    return instrument.currency


def conversion_factor(source: Currency, target: Currency, usd_idr_rate: float) -> float:
    """Multiplier converting an amount in source into target."""
    if source is target:
        return 1.0
    if source is Currency.USD:
        return usd_idr_rate
    return 1.0 / usd_idr_rate


# ============================================================
# Series projection
# ============================================================


def time_labels(candles: Sequence[Candle], max_labels: int = 5) -> tuple[str, ...]:
    """X-axis labels: one per candle, or just first and last past max_labels."""
    if not candles:
        return ()
    if len(candles) > max_labels:
        return (format_time(candles[0].time), format_time(candles[-1].time))
    return tuple(format_time(c.time) for c in candles)


def project_candlesticks(
    candles: Sequence[Candle],
    currency: Currency = Currency.USD,
    factor: float = 1.0,
    config: DashboardConfig = DEFAULT_CONFIG,
) -> CandlestickSeries:
    """
    Build the candlestick series for a window.

    Args:
        candles: Window contents, oldest first
        currency: Currency used for the price axis labels
        factor: Price multiplier for the converted page
        config: Padding ratio and label threshold

    Returns:
        CandlestickSeries (empty placeholder when there are no candles)
    """
    if not candles:
        return CandlestickSeries.empty()

    view = [c.scaled(factor) for c in candles]

    glyphs = tuple(
        CandleGlyph(
            x=i + 0.5,
            body_bottom=c.body_bottom,
            body_top=c.body_top,
            wick_low=c.low,
            wick_high=c.high,
            color=COLOR_UP if c.is_bullish else COLOR_DOWN,
        )
        for i, c in enumerate(view)
    )

    min_price = min(c.low for c in view)
    max_price = max(c.high for c in view)
    padding = (max_price - min_price) * config.price_padding_ratio
    y_min = min_price - padding
    y_max = max_price + padding
    y_mid = (y_min + y_max) / 2

    return CandlestickSeries(
        glyphs=glyphs,
        x_bounds=(0.0, float(len(view))),
        y_bounds=(y_min, y_max),
        x_labels=time_labels(view, config.max_time_labels),
        y_labels=(
            format_price(y_min, currency),
            format_price(y_mid, currency),
            format_price(y_max, currency),
        ),
    )


def project_volume(
    candles: Sequence[Candle],
    config: DashboardConfig = DEFAULT_CONFIG,
) -> VolumeSeries:
    """
    Build the volume bar series for a window.

    Args:
        candles: Window contents, oldest first
        config: Headroom multiplier and label threshold

    Returns:
        VolumeSeries (empty placeholder when there are no candles)
    """
    if not candles:
        return VolumeSeries.empty()

    max_volume = max(0.0, max(c.volume for c in candles)) * config.volume_headroom

    return VolumeSeries(
        bars=tuple(VolumeBar(x=float(i), height=c.volume) for i, c in enumerate(candles)),
        x_bounds=(0.0, float(len(candles) - 1)),
        y_bounds=(0.0, max_volume),
        x_labels=time_labels(candles, config.max_time_labels),
        y_labels=("0", format_volume(max_volume / 2), format_volume(max_volume)),
    )


def headline_text(price: float, currency: Currency) -> str:
    """Currency-prefixed, right-aligned latest price."""
    if currency is Currency.IDR:
        return f"Rp{format_price(price, currency):>16}"
    return f"USD{format_price(price, currency):>15}"


def market_row(
    instrument: Instrument,
    delta: float,
    currency: Currency,
    selected: bool,
) -> MarketRow:
    """Sidebar entry: direction marker, symbol and formatted change."""
    if delta > 0:
        icon, color = ICON_UP, COLOR_UP
    elif delta < 0:
        icon, color = ICON_DOWN, COLOR_DOWN
    else:
        icon, color = " ", COLOR_FLAT

    return MarketRow(
        symbol=instrument.symbol,
        icon=icon,
        change_text=format_change(delta, currency),
        color=COLOR_SELECTED if selected else color,
        selected=selected,
    )


# ============================================================
# Frame assembly
# ============================================================


def build_frame(
    registry: InstrumentRegistry,
    store: RollingWindowStore,
    selection: SelectionState,
    config: DashboardConfig = DEFAULT_CONFIG,
) -> DashboardFrame:
    """
    Project the store into a full dashboard frame for the current selection.

    Args:
        registry: Registered instruments
        store: Candle windows (read only)
        selection: Active instrument and page
        config: Projection parameters and conversion rate

    Returns:
        DashboardFrame ready for a render surface
    """
    rows = []
    for instrument in registry:
        currency = display_currency(instrument, selection.page)
        factor = conversion_factor(instrument.currency, currency, config.usd_idr_rate)
        rows.append(
            market_row(
                instrument,
                store.last_delta(instrument.id) * factor,
                currency,
                selected=instrument.id == selection.selected,
            )
        )

    instrument = registry[selection.selected]
    currency = display_currency(instrument, selection.page)
    factor = conversion_factor(instrument.currency, currency, config.usd_idr_rate)
    candles = store.candles(instrument.id)
    last_price = store.last_price(instrument.id)

    headline = None
    if last_price is not None:
        headline = Headline(text=headline_text(last_price * factor, currency))

    return DashboardFrame(
        markets=tuple(rows),
        selected_symbol=instrument.symbol,
        page=selection.page,
        display_currency=currency,
        candles=project_candlesticks(candles, currency, factor, config),
        volume=project_volume(candles, config),
        headline=headline,
    )
