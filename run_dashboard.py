#!/usr/bin/env python3
"""
Launch the candlestick dashboard.

Usage:
    python run_dashboard.py
    python run_dashboard.py --seed 42 --log-level DEBUG
"""

from candledash.ui.cli import main

if __name__ == "__main__":
    main()
