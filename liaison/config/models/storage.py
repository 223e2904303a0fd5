"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory"]


class StorageConfig(BaseModel):
    """Backends for the engagement, participation and catalog stores.

    Only the in-memory backend ships with this package; production
    backends must serialize writes per engagement (row lock or the
    optimistic ``version`` check).
    """

    engagement_backend: BackendType = Field(
        default="inmemory",
        description="Engagement store backend",
    )
    participation_backend: BackendType = Field(
        default="inmemory",
        description="Participation store backend",
    )
    catalog_backend: BackendType = Field(
        default="inmemory",
        description="Catalog reader backend",
    )
