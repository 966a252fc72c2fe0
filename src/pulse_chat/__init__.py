"""Pulse Chat: phone-verified one-to-one chat service."""

__version__ = "0.1.0"
