"""
Charts Panel - candlestick and volume charts for the selected instrument.

Uses Unicode block characters for reliable terminal rendering. The widgets
only rasterize series produced by candledash.core.projector; all geometry
and labels are computed there.
"""

from rich.text import Text
from textual.widgets import Static

from candledash.core.projector import COLOR_WICK, CandlestickSeries, VolumeSeries

# Fallback dimensions before the widget has been laid out
CHART_WIDTH = 60
CHART_HEIGHT = 12
VOLUME_HEIGHT = 4

# Unicode block characters for vertical bar chart (8 levels)
BLOCKS = " ▁▂▃▄▅▆▇█"

BODY_CHAR = "█"
WICK_CHAR = "│"

WAITING_TEXT = "Waiting for data..."


def _column(x: float, x_max: float, plot_width: int) -> int:
    """Map a data x coordinate to a character column."""
    if x_max <= 0:
        return 0
    return max(0, min(plot_width - 1, int(x / x_max * plot_width)))


def _label_line(labels: tuple[str, ...], columns: list[int], width: int) -> Text:
    """Lay out x-axis labels; two labels pin to the left and right edges."""
    if not labels:
        return Text("")
    if len(labels) == 2 and len(columns) != 2:
        gap = max(1, width - len(labels[0]) - len(labels[1]))
        return Text(labels[0] + " " * gap + labels[1], style="dim")

    line = [" "] * width
    for label, col in zip(labels, columns):
        start = max(0, min(col - len(label) // 2, width - len(label)))
        if start > 0 and line[start - 1] != " ":
            continue  # Would collide with the previous label
        for offset, char in enumerate(label):
            if start + offset < width:
                line[start + offset] = char
    return Text("".join(line).rstrip(), style="dim")


def rasterize_candles(series: CandlestickSeries, width: int, height: int) -> Text:
    """
    Render a candlestick series as colored text.

    Args:
        series: Projected candlestick series
        width: Available columns (including the price label gutter)
        height: Available rows (including the time label line)

    Returns:
        Rich Text with one line per row
    """
    if series.is_empty:
        return Text(WAITING_TEXT, style="dim")

    gutter = max(len(label) for label in series.y_labels) + 1
    plot_width = max(1, width - gutter)
    plot_height = max(3, height - 1)

    y_min, y_max = series.y_bounds
    x_max = series.x_bounds[1]
    step = (y_max - y_min) / plot_height
    columns = [_column(g.x, x_max, plot_width) for g in series.glyphs]

    label_rows = {0: series.y_labels[2], plot_height // 2: series.y_labels[1], plot_height - 1: series.y_labels[0]}

    output = Text()
    for row in range(plot_height):
        if step > 0:
            row_high = y_max - row * step
            row_low = row_high - step
        else:
            # Flat window: draw everything on the middle row
            row_high = row_low = y_max if row == plot_height // 2 else float("nan")

        cells: list[tuple[str, str | None]] = [(" ", None)] * plot_width
        for glyph, col in zip(series.glyphs, columns):
            if glyph.body_top >= row_low and glyph.body_bottom <= row_high:
                cells[col] = (BODY_CHAR, glyph.color)
            elif glyph.wick_high >= row_low and glyph.wick_low <= row_high:
                cells[col] = (WICK_CHAR, COLOR_WICK)

        for char, style in cells:
            output.append(char, style=style)
        label = label_rows.get(row)
        if label:
            output.append(" " + label, style="dim")
        output.append("\n")

    output.append_text(_label_line(series.x_labels, columns, plot_width))
    return output


def rasterize_volume(series: VolumeSeries, width: int, height: int) -> Text:
    """
    Render a volume series as block-character bars.

    Args:
        series: Projected volume series
        width: Available columns (including the volume label gutter)
        height: Available rows (including the time label line)

    Returns:
        Rich Text with one line per row
    """
    if series.is_empty:
        return Text(WAITING_TEXT, style="dim")

    gutter = max(len(label) for label in series.y_labels) + 1
    plot_width = max(1, width - gutter)
    plot_height = max(1, height - 1)

    y_max = series.y_bounds[1]
    slots = len(series.bars)
    columns = [_column(bar.x + 0.5, float(slots), plot_width) for bar in series.bars]
    levels = [(bar.height / y_max) * plot_height if y_max > 0 else 0.0 for bar in series.bars]

    # Max label last: on a single-row plot it takes the shared row
    label_rows = {plot_height - 1: series.y_labels[0]}
    if plot_height > 2:
        label_rows[plot_height // 2] = series.y_labels[1]
    label_rows[0] = series.y_labels[2]

    output = Text()
    for row in range(plot_height - 1, -1, -1):
        cells = [" "] * plot_width
        for level, col in zip(levels, columns):
            if level >= row + 1:
                cells[col] = BLOCKS[8]
            elif level > row:
                # Partial block for the top of the bar
                cells[col] = BLOCKS[max(1, int((level - row) * 8))]
        output.append("".join(cells), style=series.color)
        label = label_rows.get(plot_height - 1 - row)
        if label:
            output.append(" " + label, style="dim")
        output.append("\n")

    output.append_text(_label_line(series.x_labels, columns, plot_width))
    return output


class CandlestickChart(Static):
    """Candlestick chart for the selected instrument."""

    DEFAULT_CSS = """
    CandlestickChart {
        height: 4fr;
        background: #0a0a0a;
        border: solid #333333;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._series = CandlestickSeries.empty()

    def on_mount(self) -> None:
        self.border_title = self._series.title

    def update_series(self, series: CandlestickSeries, title: str | None = None) -> None:
        """
        Update the chart with a new projected series.

        Args:
            series: Candlestick series for the selected window
            title: Optional border title (defaults to the series title)
        """
        self._series = series
        self.border_title = title or series.title
        self._render_chart()

    def on_resize(self) -> None:
        self._render_chart()

    def _render_chart(self) -> None:
        width = self.content_size.width or CHART_WIDTH
        height = self.content_size.height or CHART_HEIGHT
        self.update(rasterize_candles(self._series, width, height))


class VolumeChart(Static):
    """Volume bars aligned under the candlestick chart."""

    DEFAULT_CSS = """
    VolumeChart {
        height: 1fr;
        background: #0a0a0a;
        border: solid #333333;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._series = VolumeSeries.empty()

    def on_mount(self) -> None:
        self.border_title = self._series.title

    def update_series(self, series: VolumeSeries) -> None:
        """Update the chart with a new projected series."""
        self._series = series
        self._render_chart()

    def on_resize(self) -> None:
        self._render_chart()

    def _render_chart(self) -> None:
        width = self.content_size.width or CHART_WIDTH
        height = self.content_size.height or VOLUME_HEIGHT
        self.update(rasterize_volume(self._series, width, height))
