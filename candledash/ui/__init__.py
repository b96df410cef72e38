"""
Terminal UI for the candlestick dashboard.

Dark-themed Textual app showing:
- Markets list with tick direction and change
- Candlestick and volume charts for the selected instrument
- Latest price headline
"""
