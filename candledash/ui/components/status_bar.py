"""
Price headline component.

Shows the selected instrument's latest price, right-aligned under the charts.
"""

from rich.text import Text
from textual.widgets import Static

from candledash.core.projector import Headline


class PriceHeadline(Static):
    """Single-line latest price for the selected instrument."""

    DEFAULT_CSS = """
    PriceHeadline {
        height: 1;
        width: 100%;
        text-align: right;
        padding: 0 1;
    }
    """

    def update_headline(self, headline: Headline | None) -> None:
        """Show the headline, or clear the line while no price exists yet."""
        if headline is None:
            self.update("")
            return

        style = f"bold {headline.color}" if headline.bold else headline.color
        self.update(Text(headline.text, style=style, justify=headline.align))
