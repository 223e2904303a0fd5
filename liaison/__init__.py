"""Liaison: engagement lifecycle and controlled data exchange between tenants and providers."""

__version__ = "0.1.0"
