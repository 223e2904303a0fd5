"""Engagement store implementations."""

from liaison.engagement.stores.inmemory import InMemoryEngagementStore

__all__ = ["InMemoryEngagementStore"]
