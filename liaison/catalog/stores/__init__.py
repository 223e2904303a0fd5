"""Catalog reader implementations."""

from liaison.catalog.stores.inmemory import InMemoryCatalog

__all__ = ["InMemoryCatalog"]
