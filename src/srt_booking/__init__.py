"""SRT train-ticket booking client."""

__version__ = "0.1.0"
