"""Shared test fixtures for the studio booking test suite."""

import pytest
from pathlib import Path
from uuid import uuid4

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

from clients.vault_client import reset_cache


# =============================================================================
# VAULT
# =============================================================================


@pytest.fixture(autouse=True)
def reset_vault_cache():
    """No test sees secrets or a client cached by another test."""
    reset_cache()
    yield
    reset_cache()


# =============================================================================
# CATALOG FIXTURES
# =============================================================================


@pytest.fixture
def wedding_definition():
    from core.models import EventFunctionDefinition, FunctionCategory

    return EventFunctionDefinition(
        id="wedding",
        label="Wedding",
        category=FunctionCategory.MAIN,
        icon="rings",
        included_hours=8,
        flat_price=20000,
        included_photographers=2,
        included_cinematographers=2,
        extra_hour_rate=1000,
        sort_order=1,
    )


@pytest.fixture
def haldi_definition():
    from core.models import EventFunctionDefinition, FunctionCategory

    return EventFunctionDefinition(
        id="haldi",
        label="Haldi",
        category=FunctionCategory.ADDITIONAL,
        included_hours=3,
        flat_price=6000,
        included_photographers=1,
        included_cinematographers=1,
        extra_hour_rate=800,
        sort_order=10,
    )


@pytest.fixture
def drone_addon():
    from core.models import VideoAddonDefinition

    return VideoAddonDefinition(id="drone", label="Drone Coverage", price=5000, sort_order=1)


@pytest.fixture
def snapshot(wedding_definition, haldi_definition, drone_addon):
    """Catalog with default album/pricing constants (60 pages, 8000 base, 8000 crew fee, 30% advance)."""
    from core.models import (
        AlbumConfiguration, CatalogSnapshot, ComplimentaryItem, PricingConfiguration,
    )

    return CatalogSnapshot(
        function_definitions=(wedding_definition, haldi_definition),
        album_configuration=AlbumConfiguration(),
        pricing_configuration=PricingConfiguration(),
        video_addons=(drone_addon,),
        complimentary_items=(ComplimentaryItem(id="frame", label="Photo Frame"),),
    )


# =============================================================================
# DRAFT FIXTURES
# =============================================================================


@pytest.fixture
def configured_draft(wedding_definition):
    """Draft with client info, one wedding on a date, and the album step confirmed."""
    from core.draft import BookingDraft

    draft = BookingDraft()
    draft.update_client_info(full_name="Anita Rao", phone="+91 98765 43210", email="anita.rao@gmail.com")
    draft.update_event_details(booking_type="Wedding", event_location="Kochi")
    selected = draft.toggle_function(wedding_definition)
    draft.update_function(selected.id, date="2026-12-12")
    draft.confirm_configuration()
    return draft


@pytest.fixture
def priced_draft(configured_draft, snapshot):
    """
    Copy of the configured draft with pricing attached, signed and terms accepted.

    A copy, so a test that asks for both drafts gets an unpriced configured_draft.
    """
    from core.pricing import price_draft

    draft = configured_draft.model_copy(deep=True)
    draft.attach_pricing(price_draft(draft, snapshot))
    draft.sign("Anita Rao", terms_accepted=True)
    return draft


@pytest.fixture
def booking_row(priced_draft):
    """A bookings table row (as RealDictCursor returns it) for the priced draft."""
    from utils.dates import now_utc

    now = now_utc()
    row = priced_draft.to_booking_create().model_dump(mode="json")
    row.update(
        id=uuid4(),
        booking_reference="SB-261212-ABC234",
        booking_status="pending",
        payment_status="unpaid",
        terms_accepted_at=now,
        created_at=now,
        updated_at=now,
        deleted_at=None,
    )
    return row


# =============================================================================
# PACKAGE FIXTURES
# =============================================================================


@pytest.fixture
def gold_package():
    from core.models import Package

    return Package(
        id="3",
        name="Gold",
        slug="gold",
        price=150000,
        included_photographers=2,
        included_cinematographers=2,
        included_hours=10,
        included_album_pages=80,
        recommended=True,
        features=("Drone coverage", "Same-day teaser"),
    )
