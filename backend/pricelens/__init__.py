"""
PriceLens Backend

Technical-indicator analysis for stocks, crypto and forex.
"""

__version__ = "0.1.0"
