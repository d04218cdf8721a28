"""Pricing breakdown models.

A breakdown is an immutable priced snapshot. Once a booking is submitted
its breakdown is stored as-is and never recomputed against later catalog
changes. All amounts are whole currency units.
"""

from pydantic import BaseModel, Field

from core.models.draft import AlbumType, FunctionGroup


class FunctionPricingDetails(BaseModel):
    """Inputs behind one function's price, kept for display."""

    duration: float
    included_hours: float
    extra_hours: float
    photographers: int
    included_photographers: int
    cinematographers: int
    included_cinematographers: int
    extra_crew_count: int

    model_config = {"frozen": True}


class FunctionPricing(BaseModel):
    """Priced line for one selected function."""

    selection_id: str
    function_id: str
    function_name: str
    group: FunctionGroup
    definition_found: bool = True
    base_price: int
    extra_hours_cost: int
    extra_crew_cost: int
    total_function_cost: int
    details: FunctionPricingDetails

    model_config = {"frozen": True}


class AlbumPricingDetails(BaseModel):
    """Inputs behind the album price, kept for display."""

    pages: int
    base_pages: int
    extra_pages: int
    album_type: AlbumType
    multiplier: float

    model_config = {"frozen": True}


class AlbumPricing(BaseModel):
    """Priced album line."""

    base_price: int
    extra_pages_cost: int
    total_album_cost: int
    details: AlbumPricingDetails

    model_config = {"frozen": True}


class VideoAddonPricing(BaseModel):
    """Priced line for one selected video add-on."""

    addon_id: str
    label: str
    price: int = Field(..., ge=0)

    model_config = {"frozen": True}


class PricingBreakdown(BaseModel):
    """Full priced snapshot of a booking draft."""

    functions: tuple[FunctionPricing, ...] = ()
    album: AlbumPricing
    video_addons: tuple[VideoAddonPricing, ...] = ()
    functions_total: int
    video_addons_total: int
    subtotal: int
    tax: int
    total: int
    advance: int
    balance: int

    model_config = {"frozen": True}

    @property
    def missing_definitions(self) -> list[str]:
        """Function ids that were priced at zero because the catalog lacks them."""
        return [f.function_id for f in self.functions if not f.definition_found]
