"""Substantial Presence Test calculator."""

__version__ = "0.1.0"
