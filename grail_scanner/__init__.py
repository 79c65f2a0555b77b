"""Grail Scanner: forensic vintage clothing authentication on Gemini."""

__version__ = "0.1.0"
