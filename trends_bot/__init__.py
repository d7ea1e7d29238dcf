"""Trends Bot: DM digests of trending topics for the regions users subscribe to."""

__version__ = "0.1.0"
