"""Messaging adapters, adapter state tracking, channel records and aspect hooks for chat bots."""

__version__ = "0.1.0"