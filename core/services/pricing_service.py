"""
Pricing service: loads the catalog and runs the pricing engine for a draft.

The engine itself (core.pricing) is pure. This service does the I/O around
it: it resolves a full catalog snapshot first and only then prices. If the
catalog cannot be loaded, pricing is skipped entirely for that cycle and
the caller gets a retryable CatalogUnavailableError.
"""

import logging

from core.draft import BookingDraft
from core.models import CatalogSnapshot, PricingBreakdown
from core.pricing import price_draft
from core.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


class PricingService:
    """Service for pricing booking drafts."""

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    def quote(self, draft: BookingDraft, snapshot: CatalogSnapshot | None = None) -> PricingBreakdown:
        """
        Price a draft without changing it.

        Args:
            draft: Draft to price
            snapshot: Catalog snapshot to price against (loaded if omitted)

        Raises:
            CatalogUnavailableError: If the catalog could not be loaded
            InvalidPricingInputError: If the draft holds unpriceable values
        """
        if snapshot is None:
            snapshot = self.catalog.load_snapshot()

        breakdown = price_draft(draft, snapshot)

        if breakdown.missing_definitions:
            logger.warning(
                f"Priced draft with {len(breakdown.missing_definitions)} function(s) "
                f"missing from catalog: {', '.join(breakdown.missing_definitions)}"
            )

        return breakdown

    def price(self, draft: BookingDraft) -> PricingBreakdown:
        """
        Recompute pricing from scratch and attach it to the draft.

        Returns:
            The attached breakdown

        Raises:
            CatalogUnavailableError: If the catalog could not be loaded
            DraftStateError: If the draft is not ready to be priced
        """
        breakdown = self.quote(draft)
        draft.attach_pricing(breakdown)

        logger.info(
            f"Draft priced: {len(breakdown.functions)} function(s), "
            f"subtotal={breakdown.subtotal} total={breakdown.total} advance={breakdown.advance}"
        )

        return breakdown
