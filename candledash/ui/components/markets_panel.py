"""
Markets panel component.

Displays every instrument with:
- Tick direction marker
- Symbol
- Last change, formatted for the display currency
The selected instrument is highlighted.
"""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static

from candledash.core.projector import MarketRow
from candledash.core.selection import Page


class MarketsPanel(Container):
    """Sidebar listing all instruments."""

    DEFAULT_CSS = """
    MarketsPanel {
        width: 24;
        height: 100%;
        background: #0a0a0a;
        border: solid #444444;
        padding: 0 1;
    }

    MarketsPanel #page-label {
        color: #888888;
        margin-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("", id="markets-content")
        yield Static("", id="page-label")

    def on_mount(self) -> None:
        self.border_title = "Markets"

    def update_display(self, rows: tuple[MarketRow, ...], page: Page) -> None:
        """
        Update the markets list.

        Args:
            rows: One projected row per instrument
            page: Active display page
        """
        content = Text()
        for i, row in enumerate(rows):
            if i:
                content.append("\n")
            style = f"bold {row.color}" if row.selected else row.color
            content.append(row.label, style=style)

        self.query_one("#markets-content", Static).update(content)
        page_text = "converted" if page is Page.CONVERTED else "native"
        self.query_one("#page-label", Static).update(f"[dim]page: {page_text}[/dim]")
