"""Catalog browser for the artist roster."""

__version__ = "0.1.0"
