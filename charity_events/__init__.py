"""Charity events listing site: events API and web client."""

__version__ = "1.0.0"
