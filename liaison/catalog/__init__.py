"""Read-only view of the provider catalog.

Offerings and providers are managed elsewhere; the engagement core only
reads them.
"""

from liaison.catalog.models import Offering, Provider
from liaison.catalog.store import CatalogReader
from liaison.catalog.stores import InMemoryCatalog

__all__ = ["CatalogReader", "InMemoryCatalog", "Offering", "Provider"]
