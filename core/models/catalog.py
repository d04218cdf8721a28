"""Reference catalog models.

Catalog data is owned by the studio and read-only to the booking flow.
All prices are whole currency units (integer). There is no fractional
currency and no multi-currency support.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class FunctionCategory(str, Enum):
    """Catalog grouping of bookable functions."""

    MAIN = "main"              # Wedding, engagement, reception
    OTHER = "other"            # Birthday, baptism, newborn
    ADDITIONAL = "additional"  # Haldi, mehendi, sangeet


class EventFunctionDefinition(BaseModel):
    """
    A bookable function type and what its flat price already covers.

    Duration and crew beyond the included baseline are billed on top.
    """

    id: str = Field(..., min_length=1)
    label: str
    category: FunctionCategory = FunctionCategory.MAIN
    icon: str | None = None
    included_hours: float = Field(0, ge=0, allow_inf_nan=False)
    flat_price: int = Field(0, ge=0)
    included_photographers: int = Field(0, ge=0)
    included_cinematographers: int = Field(0, ge=0)
    extra_hour_rate: float = Field(0, ge=0, allow_inf_nan=False)
    sort_order: int = 0

    model_config = {"frozen": True, "from_attributes": True}


class AlbumConfiguration(BaseModel):
    """
    Album pricing constants.

    Defaults are the values used when a key is missing from album_config.
    """

    base_pages: int = Field(60, ge=0)
    base_price_single: int = Field(8000, ge=0)
    per_10_pages_cost: int = Field(500, ge=0)
    double_album_multiplier: float = Field(1.8, ge=0, allow_inf_nan=False)
    pages_increment: int = Field(10, ge=1)

    model_config = {"frozen": True}

    def is_valid_page_count(self, pages: int) -> bool:
        """Whether pages sits on the base + k * increment grid."""
        if pages < self.base_pages:
            return False
        return (pages - self.base_pages) % self.pages_increment == 0

    def pages_for_step(self, step: int) -> int:
        """Page count after `step` increments above the base (clamped at base)."""
        return self.base_pages + max(0, step) * self.pages_increment


class PricingConfiguration(BaseModel):
    """
    Global pricing constants.

    Defaults are the values used when a key is missing from pricing_config.
    """

    extra_crew_flat_fee: int = Field(8000, ge=0)
    tax_percentage: float = Field(0, ge=0, allow_inf_nan=False)
    advance_percentage: float = Field(30, ge=0, le=100, allow_inf_nan=False)

    model_config = {"frozen": True}


class VideoAddonDefinition(BaseModel):
    """A purchasable video add-on, keyed by its slug."""

    id: str = Field(..., min_length=1)
    label: str
    description: str = ""
    price: int = Field(..., ge=0)
    sort_order: int = 0

    model_config = {"frozen": True, "from_attributes": True}


class ComplimentaryItem(BaseModel):
    """A free item the client may pick (never priced)."""

    id: str = Field(..., min_length=1)
    label: str
    description: str = ""
    icon: str | None = None
    sort_order: int = 0

    model_config = {"frozen": True, "from_attributes": True}


class Package(BaseModel):
    """
    A named coverage package shown on the package step.

    Packages describe what a typical booking of that size includes. They
    are recorded on the booking for the studio's reference only; the
    booking total always comes from the pricing engine.
    """

    id: str = Field(..., min_length=1)
    name: str
    slug: str = Field(..., min_length=1)
    price: int = Field(0, ge=0)
    description: str = ""
    included_photographers: int = Field(0, ge=0)
    included_cinematographers: int = Field(0, ge=0)
    included_hours: float = Field(0, ge=0, allow_inf_nan=False)
    included_album_pages: int = Field(0, ge=0)
    suitable_for_guests: str = ""
    recommended: bool = False
    features: tuple[str, ...] = ()
    display_order: int = 0

    model_config = {"frozen": True, "from_attributes": True}

    @field_validator("features", mode="before")
    @classmethod
    def unwrap_features(cls, value: Any) -> Any:
        """Features are stored either as a list or as {"items": [...]}."""
        if value is None:
            return ()
        if isinstance(value, dict):
            return value.get("items") or ()
        return value


class CatalogSnapshot(BaseModel):
    """Everything pricing needs, resolved together and frozen for one computation."""

    function_definitions: tuple[EventFunctionDefinition, ...] = ()
    album_configuration: AlbumConfiguration = Field(default_factory=AlbumConfiguration)
    pricing_configuration: PricingConfiguration = Field(default_factory=PricingConfiguration)
    video_addons: tuple[VideoAddonDefinition, ...] = ()
    complimentary_items: tuple[ComplimentaryItem, ...] = ()

    model_config = {"frozen": True}
