"""
Pricing engine.

Turns a booking draft plus a catalog snapshot into a PricingBreakdown.
Pure and deterministic: no I/O, no clock, no randomness. Catalog data must
be fully resolved before calling in; there is no partial-data mode.

Rounding is round-half-up to whole currency units and happens per
component (extra hours, album pages, album total, tax, advance). Totals are
sums of already-rounded components and are never re-rounded, so
round-then-sum is observable in the figures and must be kept.

Missing catalog entries degrade rather than fail, asymmetrically:
- a selected function with no definition is priced as a zero line
- a selected add-on with no definition is left out of the breakdown
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

from core.draft import BookingDraft
from core.exceptions import InvalidPricingInputError
from core.models import (
    AlbumConfiguration,
    AlbumPricing,
    AlbumPricingDetails,
    AlbumSelection,
    CatalogSnapshot,
    EventFunctionDefinition,
    FunctionPricing,
    FunctionPricingDetails,
    PricingBreakdown,
    PricingConfiguration,
    SelectedFunction,
    VideoAddonDefinition,
    VideoAddonPricing,
)

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


def round_currency(value: Decimal | int | float) -> int:
    """Round half up to a whole currency unit (2.5 -> 3, 2.4999 -> 2)."""
    return int(_dec(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _dec(value: Decimal | int | float) -> Decimal:
    # str() keeps 1.8 as 1.8 instead of its binary expansion
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _require_quantity(name: str, value: int | float) -> None:
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidPricingInputError(f"{name} must be finite, got {value}")
    if value < 0:
        raise InvalidPricingInputError(f"{name} cannot be negative, got {value}")


def _first_by_id(items: Iterable, kind: str) -> dict:
    """Index catalog entries by id. On duplicate ids the first entry wins."""
    index = {}
    for item in items:
        if item.id in index:
            logger.warning(f"Duplicate {kind} id '{item.id}' in catalog, keeping first")
            continue
        index[item.id] = item
    return index


# =============================================================================
# FUNCTIONS
# =============================================================================


def price_function(
    selected: SelectedFunction,
    definition: EventFunctionDefinition | None,
    pricing_configuration: PricingConfiguration,
) -> FunctionPricing:
    """
    Price one selected function.

    Extra crew is a head count across both roles, billed at one flat fee
    per head whatever the role. A shortfall in one role does not offset an
    excess in the other.
    """
    duration = selected.resolved_duration
    _require_quantity("duration", duration)
    _require_quantity("photographers", selected.photographers)
    _require_quantity("cinematographers", selected.cinematographers)

    if definition is None:
        logger.warning(
            f"No catalog definition for function '{selected.function_id}' "
            f"(selection {selected.id}), pricing it at zero"
        )
        return FunctionPricing(
            selection_id=selected.id,
            function_id=selected.function_id,
            function_name=selected.name,
            group=selected.group,
            definition_found=False,
            base_price=0,
            extra_hours_cost=0,
            extra_crew_cost=0,
            total_function_cost=0,
            details=FunctionPricingDetails(
                duration=duration,
                included_hours=0,
                extra_hours=0,
                photographers=selected.photographers,
                included_photographers=0,
                cinematographers=selected.cinematographers,
                included_cinematographers=0,
                extra_crew_count=0,
            ),
        )

    extra_hours = max(Decimal(0), _dec(duration) - _dec(definition.included_hours))
    extra_hours_cost = round_currency(extra_hours * _dec(definition.extra_hour_rate))

    extra_photographers = max(0, selected.photographers - definition.included_photographers)
    extra_cinematographers = max(0, selected.cinematographers - definition.included_cinematographers)
    extra_crew_count = extra_photographers + extra_cinematographers
    extra_crew_cost = extra_crew_count * pricing_configuration.extra_crew_flat_fee

    return FunctionPricing(
        selection_id=selected.id,
        function_id=selected.function_id,
        function_name=selected.name or definition.label,
        group=selected.group,
        base_price=definition.flat_price,
        extra_hours_cost=extra_hours_cost,
        extra_crew_cost=extra_crew_cost,
        total_function_cost=definition.flat_price + extra_hours_cost + extra_crew_cost,
        details=FunctionPricingDetails(
            duration=duration,
            included_hours=definition.included_hours,
            extra_hours=float(extra_hours),
            photographers=selected.photographers,
            included_photographers=definition.included_photographers,
            cinematographers=selected.cinematographers,
            included_cinematographers=definition.included_cinematographers,
            extra_crew_count=extra_crew_count,
        ),
    )


# =============================================================================
# ALBUM
# =============================================================================


def price_album(
    selection: AlbumSelection,
    configuration: AlbumConfiguration,
) -> AlbumPricing:
    """
    Price the album.

    The dual-album multiplier applies to base price plus extra pages, not
    to the base alone.
    """
    _require_quantity("album pages", selection.pages)
    if configuration.pages_increment <= 0:
        raise InvalidPricingInputError("pages_increment must be positive")
    if not configuration.is_valid_page_count(selection.pages):
        raise InvalidPricingInputError(
            f"album pages must be {configuration.base_pages} plus a multiple of "
            f"{configuration.pages_increment}, got {selection.pages}"
        )

    extra_pages = max(0, selection.pages - configuration.base_pages)
    extra_pages_cost = round_currency(
        Decimal(extra_pages) / Decimal(configuration.pages_increment)
        * _dec(configuration.per_10_pages_cost)
    )

    multiplier = configuration.double_album_multiplier if selection.album_type.is_dual else 1
    total_album_cost = round_currency(
        Decimal(configuration.base_price_single + extra_pages_cost) * _dec(multiplier)
    )

    return AlbumPricing(
        base_price=configuration.base_price_single,
        extra_pages_cost=extra_pages_cost,
        total_album_cost=total_album_cost,
        details=AlbumPricingDetails(
            pages=selection.pages,
            base_pages=configuration.base_pages,
            extra_pages=extra_pages,
            album_type=selection.album_type,
            multiplier=multiplier,
        ),
    )


# =============================================================================
# VIDEO ADD-ONS
# =============================================================================


def price_video_addons(
    addon_ids: Sequence[str],
    addon_definitions: Sequence[VideoAddonDefinition],
) -> list[VideoAddonPricing]:
    """Price selected add-ons in selection order. Unknown ids are dropped."""
    by_id = _first_by_id(addon_definitions, "video add-on")
    lines = []
    for addon_id in addon_ids:
        addon = by_id.get(addon_id)
        if addon is None:
            logger.debug(f"Video add-on '{addon_id}' not in catalog, omitting")
            continue
        lines.append(VideoAddonPricing(addon_id=addon_id, label=addon.label, price=addon.price))
    return lines


# =============================================================================
# FULL BREAKDOWN
# =============================================================================


def compute_pricing(
    selected_functions: Sequence[SelectedFunction],
    additional_functions: Sequence[SelectedFunction],
    album_selection: AlbumSelection,
    video_addon_ids: Sequence[str],
    function_definitions: Sequence[EventFunctionDefinition],
    album_configuration: AlbumConfiguration,
    pricing_configuration: PricingConfiguration,
    addon_definitions: Sequence[VideoAddonDefinition],
) -> PricingBreakdown:
    """
    Compute the full pricing breakdown.

    Main and additional functions are pooled (main first) into one list of
    function lines; their split only matters for display.

    Raises:
        InvalidPricingInputError: For negative or non-finite durations,
            crew counts or page counts.
    """
    definitions = _first_by_id(function_definitions, "function")

    function_lines = [
        price_function(selected, definitions.get(selected.function_id), pricing_configuration)
        for selected in [*selected_functions, *additional_functions]
    ]
    album = price_album(album_selection, album_configuration)
    addon_lines = price_video_addons(video_addon_ids, addon_definitions)

    functions_total = sum(line.total_function_cost for line in function_lines)
    video_addons_total = sum(line.price for line in addon_lines)

    subtotal = functions_total + album.total_album_cost + video_addons_total
    tax = round_currency(
        Decimal(subtotal) * _dec(pricing_configuration.tax_percentage) / _HUNDRED
    )
    total = subtotal + tax
    advance = round_currency(
        Decimal(total) * _dec(pricing_configuration.advance_percentage) / _HUNDRED
    )

    return PricingBreakdown(
        functions=tuple(function_lines),
        album=album,
        video_addons=tuple(addon_lines),
        functions_total=functions_total,
        video_addons_total=video_addons_total,
        subtotal=subtotal,
        tax=tax,
        total=total,
        advance=advance,
        balance=total - advance,
    )


def price_draft(draft: BookingDraft, snapshot: CatalogSnapshot) -> PricingBreakdown:
    """Price a draft's current selections against a catalog snapshot."""
    return compute_pricing(
        selected_functions=draft.selected_functions,
        additional_functions=draft.additional_functions,
        album_selection=draft.album,
        video_addon_ids=draft.video_addons,
        function_definitions=snapshot.function_definitions,
        album_configuration=snapshot.album_configuration,
        pricing_configuration=snapshot.pricing_configuration,
        addon_definitions=snapshot.video_addons,
    )
