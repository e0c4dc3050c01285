"""Notification adapters."""

from .collector import CollectingNotifier, Notice

__all__ = ["CollectingNotifier", "Notice"]
