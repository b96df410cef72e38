"""
UI components for the candlestick dashboard.

Reusable Textual widgets that paint projected dashboard frames.
"""

from candledash.ui.components.charts_panel import (
    CandlestickChart,
    VolumeChart,
    rasterize_candles,
    rasterize_volume,
)
from candledash.ui.components.markets_panel import MarketsPanel
from candledash.ui.components.status_bar import PriceHeadline

__all__ = [
    "CandlestickChart",
    "MarketsPanel",
    "PriceHeadline",
    "VolumeChart",
    "rasterize_candles",
    "rasterize_volume",
]
