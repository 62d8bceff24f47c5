"""Twilio Event Streams relay."""

__version__ = "0.1.0"
