"""
Selection state - which instrument and which page the dashboard shows.

Mutated only by discrete input events.
"""

from dataclasses import dataclass
from enum import Enum

from candledash.core.errors import ConfigurationError


class Page(Enum):
    """Display page."""
    NATIVE = "native"  # Prices in the instrument's own currency
    CONVERTED = "converted"  # Prices in the other display currency


@dataclass
class SelectionState:
    """Selected instrument index (wraps modulo count) and active page."""

    count: int
    selected: int = 0
    page: Page = Page.NATIVE

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ConfigurationError("Selection needs at least one instrument")
        if not 0 <= self.selected < self.count:
            raise ConfigurationError(f"Selected index {self.selected} out of range")

    def next(self) -> int:
        """Select the next instrument, wrapping to the first."""
        self.selected = (self.selected + 1) % self.count
        return self.selected

    def previous(self) -> int:
        """Select the previous instrument, wrapping to the last."""
        self.selected = (self.selected - 1) % self.count
        return self.selected

    def toggle_page(self) -> Page:
        self.page = Page.CONVERTED if self.page is Page.NATIVE else Page.NATIVE
        return self.page
