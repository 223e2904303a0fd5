"""Participation store implementations."""

from liaison.participation.stores.inmemory import InMemoryParticipationStore

__all__ = ["InMemoryParticipationStore"]
