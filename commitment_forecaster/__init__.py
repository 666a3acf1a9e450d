"""Spend-commitment consumption forecaster."""

__version__ = "0.1.0"
