"""Booking configuration."""

from pydantic import BaseModel, Field


class BookingConfig(BaseModel):
    """
    Booking and catalog configuration.

    Pricing constants are not here: they live in the pricing_config and
    album_config catalog tables so the studio can change them without a deploy.
    """

    # Reference codes
    reference_prefix: str = Field(
        default="SB",
        description="Prefix for booking reference codes",
        min_length=1,
        max_length=8,
        pattern="^[A-Z0-9]+$",
    )
    reference_length: int = Field(
        default=6,
        description="Number of random characters in a reference code",
        ge=4,
        le=16,
    )
    reference_max_attempts: int = Field(
        default=5,
        description="Attempts to find an unused reference before giving up",
        ge=1,
        le=20,
    )

    # Catalog loading
    catalog_fetch_workers: int = Field(
        default=4,
        description="Threads used to load catalog tables concurrently",
        ge=1,
        le=8,
    )
    catalog_fetch_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound on loading a full catalog snapshot",
        gt=0,
        le=120,
    )

    # Listing
    default_list_limit: int = Field(
        default=50,
        description="Default page size for booking listings",
        ge=1,
        le=500,
    )
