"""Core domain models."""

from core.models.catalog import (
    FunctionCategory, EventFunctionDefinition, AlbumConfiguration, PricingConfiguration,
    VideoAddonDefinition, ComplimentaryItem, Package, CatalogSnapshot,
)
from core.models.draft import (
    FunctionGroup, AlbumType, DraftStage,
    ClientInfo, EventDetails, CrewSelection, SelectedFunction, AlbumSelection,
)
from core.models.pricing import (
    FunctionPricing, FunctionPricingDetails, AlbumPricing, AlbumPricingDetails,
    VideoAddonPricing, PricingBreakdown,
)
from core.models.booking import Booking, BookingCreate, BookingStatus, PaymentStatus

__all__ = [
    # Catalog
    "FunctionCategory", "EventFunctionDefinition", "AlbumConfiguration", "PricingConfiguration",
    "VideoAddonDefinition", "ComplimentaryItem", "Package", "CatalogSnapshot",
    # Draft
    "FunctionGroup", "AlbumType", "DraftStage",
    "ClientInfo", "EventDetails", "CrewSelection", "SelectedFunction", "AlbumSelection",
    # Pricing
    "FunctionPricing", "FunctionPricingDetails", "AlbumPricing", "AlbumPricingDetails",
    "VideoAddonPricing", "PricingBreakdown",
    # Booking
    "Booking", "BookingCreate", "BookingStatus", "PaymentStatus",
]
