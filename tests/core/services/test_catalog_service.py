"""Tests for CatalogService."""

import logging
import threading
from decimal import Decimal
from unittest.mock import Mock

import pytest

from clients.postgres_client import PostgresClient
from core.config import BookingConfig
from core.exceptions import CatalogUnavailableError
from core.models import FunctionCategory
from core.services.catalog_service import CatalogService


# =============================================================================
# FIXTURES
# =============================================================================


WEDDING_ROW = {
    "id": "6f1c1f1e-0000-4000-8000-000000000001",
    "label": "Wedding",
    "category": "main",
    "icon": "rings",
    "flat_price": 20000,
    "included_hours": Decimal("8.00"),
    "included_photographers": 2,
    "included_cinematographers": 2,
    "extra_hour_rate": Decimal("1000.00"),
    "sort_order": 1,
}

ALBUM_ROWS = [
    {"config_key": "base_pages", "config_value": Decimal("60")},
    {"config_key": "base_price_single", "config_value": Decimal("9000")},
    {"config_key": "double_album_multiplier", "config_value": Decimal("1.8")},
]

PRICING_ROWS = [
    {"config_key": "extra_crew_flat_fee", "config_value": Decimal("8000")},
    {"config_key": "advance_percentage", "config_value": Decimal("30")},
]

ADDON_ROWS = [
    {"id": "drone", "label": "Drone Coverage", "description": "", "price": 5000, "sort_order": 1},
]

ITEM_ROWS = [
    {"id": "frame", "label": "Photo Frame", "description": "", "icon": None, "sort_order": 1},
]

GOLD_PACKAGE_ROW = {
    "id": "3",
    "name": "Gold",
    "slug": "gold",
    "price": 150000,
    "description": "Full day coverage",
    "included_photographers": 2,
    "included_cinematographers": 2,
    "included_hours": Decimal("10.0"),
    "included_album_pages": 80,
    "suitable_for_guests": "300-500",
    "recommended": True,
    "features": {"items": ["Drone coverage", "Same-day teaser"]},
    "display_order": 2,
}


def _dispatch(overrides=None):
    """Answer each catalog query by the table it reads."""
    tables = {
        "event_catalog": [WEDDING_ROW],
        "album_config": ALBUM_ROWS,
        "pricing_config": PRICING_ROWS,
        "video_addons": ADDON_ROWS,
        "complimentary_items": ITEM_ROWS,
        "packages": [GOLD_PACKAGE_ROW],
    }
    tables.update(overrides or {})

    def execute(query, params=None):
        for table, result in tables.items():
            if f"FROM {table}" in query:
                if isinstance(result, BaseException):
                    raise result
                if callable(result):
                    return result()
                return result
        raise AssertionError(f"Unexpected query: {query}")

    return execute


@pytest.fixture
def postgres():
    mock = Mock(spec=PostgresClient)
    mock.execute.side_effect = _dispatch()
    return mock


@pytest.fixture
def catalog(postgres):
    return CatalogService(postgres)


# =============================================================================
# FUNCTION DEFINITIONS
# =============================================================================


class TestFunctionDefinitions:
    """Tests for function definition reads."""

    def test_list_maps_rows(self, catalog, postgres):
        """Active rows become definitions in sort order."""
        definitions = catalog.list_function_definitions()

        assert len(definitions) == 1
        wedding = definitions[0]
        assert wedding.label == "Wedding"
        assert wedding.category == FunctionCategory.MAIN
        assert wedding.included_hours == 8
        assert wedding.extra_hour_rate == 1000
        query = postgres.execute.call_args[0][0]
        assert "is_active = true" in query
        assert "ORDER BY sort_order" in query

    def test_list_by_category_filters(self, catalog, postgres):
        """Category is passed as a query parameter."""
        catalog.list_functions_by_category(FunctionCategory.ADDITIONAL)

        assert postgres.execute.call_args[0][1] == ("additional",)

    def test_get_missing_definition_returns_none(self, catalog, postgres):
        """Unknown id returns None rather than raising."""
        postgres.execute_single.return_value = None

        assert catalog.get_function_definition("nope") is None

    def test_get_definition(self, catalog, postgres):
        """Looks up one definition by its text id."""
        postgres.execute_single.return_value = WEDDING_ROW

        definition = catalog.get_function_definition(WEDDING_ROW["id"])

        assert definition.id == WEDDING_ROW["id"]
        assert postgres.execute_single.call_args[0][1] == (WEDDING_ROW["id"],)


# =============================================================================
# KEY/VALUE CONFIGURATION
# =============================================================================


class TestConfiguration:
    """Tests for album and pricing key/value configuration."""

    def test_album_configuration_uses_stored_and_default_values(self, catalog):
        """Stored keys override defaults, missing keys keep them."""
        config = catalog.get_album_configuration()

        assert config.base_price_single == 9000
        assert config.double_album_multiplier == 1.8
        assert config.per_10_pages_cost == 500   # not stored, default
        assert config.pages_increment == 10

    def test_unknown_keys_are_ignored_with_warning(self, postgres, catalog, caplog):
        """Keys the model doesn't know are logged and skipped."""
        postgres.execute.side_effect = _dispatch({
            "pricing_config": [
                {"config_key": "tax_percentage", "config_value": Decimal("18")},
                {"config_key": "gst_mode", "config_value": Decimal("1")},
            ],
        })

        with caplog.at_level(logging.WARNING, logger="core.services.catalog_service"):
            config = catalog.get_pricing_configuration()

        assert config.tax_percentage == 18
        assert config.advance_percentage == 30
        assert "gst_mode" in caplog.text

    def test_null_values_fall_back_to_defaults(self, postgres, catalog):
        """A NULL config value counts as not configured."""
        postgres.execute.side_effect = _dispatch({
            "pricing_config": [{"config_key": "extra_crew_flat_fee", "config_value": None}],
        })

        assert catalog.get_pricing_configuration().extra_crew_flat_fee == 8000


# =============================================================================
# ADD-ONS AND COMPLIMENTARY ITEMS
# =============================================================================


class TestAddonsAndItems:
    """Tests for add-on and complimentary item reads."""

    def test_video_addons_keyed_by_slug(self, catalog, postgres):
        """Add-on ids are their slugs."""
        addons = catalog.list_video_addon_definitions()

        assert [a.id for a in addons] == ["drone"]
        assert "slug AS id" in postgres.execute.call_args[0][0]

    def test_complimentary_items(self, catalog):
        """Items map straight from rows."""
        items = catalog.list_complimentary_items()

        assert items[0].label == "Photo Frame"


# =============================================================================
# PACKAGES
# =============================================================================


class TestPackages:
    """Tests for coverage package reads."""

    def test_list_packages_maps_rows(self, catalog, postgres):
        """Rows become packages ordered by display order then price."""
        packages = catalog.list_packages()

        assert [p.slug for p in packages] == ["gold"]
        gold = packages[0]
        assert gold.price == 150000
        assert gold.included_hours == 10
        assert gold.recommended is True
        query = postgres.execute.call_args[0][0]
        assert "display_order ASC NULLS LAST" in query
        assert "price ASC" in query

    def test_features_unwrapped_from_items_object(self, catalog):
        """{"items": [...]} features are flattened to a tuple."""
        gold = catalog.list_packages()[0]

        assert gold.features == ("Drone coverage", "Same-day teaser")

    def test_features_stored_as_list(self, postgres, catalog):
        """Plain list features are kept as-is."""
        postgres.execute.side_effect = _dispatch({
            "packages": [{**GOLD_PACKAGE_ROW, "features": ["Album"]}],
        })

        assert catalog.list_packages()[0].features == ("Album",)

    def test_missing_features_are_empty(self, postgres, catalog):
        """NULL features become an empty tuple."""
        postgres.execute.side_effect = _dispatch({
            "packages": [{**GOLD_PACKAGE_ROW, "features": None}],
        })

        assert catalog.list_packages()[0].features == ()

    def test_get_package_by_id(self, catalog, postgres):
        """Looks up a package by its text id."""
        postgres.execute_single.return_value = GOLD_PACKAGE_ROW

        package = catalog.get_package("3")

        assert package.name == "Gold"
        assert postgres.execute_single.call_args[0][1] == ("3",)
        assert "id::text = %s" in postgres.execute_single.call_args[0][0]

    def test_get_missing_package_returns_none(self, catalog, postgres):
        """Unknown package id returns None."""
        postgres.execute_single.return_value = None

        assert catalog.get_package("99") is None

    def test_get_package_by_slug(self, catalog, postgres):
        """Slug lookup trims surrounding whitespace."""
        postgres.execute_single.return_value = GOLD_PACKAGE_ROW

        package = catalog.get_package_by_slug("  gold ")

        assert package.id == "3"
        assert postgres.execute_single.call_args[0][1] == ("gold",)
        assert "slug = %s" in postgres.execute_single.call_args[0][0]

    def test_get_missing_slug_returns_none(self, catalog, postgres):
        """Unknown slug returns None."""
        postgres.execute_single.return_value = None

        assert catalog.get_package_by_slug("platinum") is None


# =============================================================================
# SNAPSHOT
# =============================================================================


class TestLoadSnapshot:
    """Tests for CatalogService.load_snapshot."""

    def test_loads_everything(self, catalog):
        """All five reads land in one snapshot."""
        snapshot = catalog.load_snapshot()

        assert [f.label for f in snapshot.function_definitions] == ["Wedding"]
        assert snapshot.album_configuration.base_price_single == 9000
        assert snapshot.pricing_configuration.extra_crew_flat_fee == 8000
        assert [a.id for a in snapshot.video_addons] == ["drone"]
        assert [i.id for i in snapshot.complimentary_items] == ["frame"]

    def test_failed_read_raises_catalog_unavailable(self, postgres, catalog):
        """A failing read fails the whole load as retryable."""
        failure = RuntimeError("connection reset")
        postgres.execute.side_effect = _dispatch({"video_addons": failure})

        with pytest.raises(CatalogUnavailableError) as exc_info:
            catalog.load_snapshot()

        assert exc_info.value.retryable is True
        assert exc_info.value.__cause__ is failure

    def test_invalid_rows_raise_catalog_unavailable(self, postgres, catalog):
        """Rows that fail validation make the catalog unavailable."""
        postgres.execute.side_effect = _dispatch({
            "event_catalog": [{**WEDDING_ROW, "flat_price": -5}],
        })

        with pytest.raises(CatalogUnavailableError, match="Invalid catalog data"):
            catalog.load_snapshot()

    def test_slow_read_times_out(self, postgres):
        """One read hanging past the timeout fails the load."""
        release = threading.Event()

        def slow_pricing_rows():
            release.wait(5)
            return PRICING_ROWS

        postgres.execute.side_effect = _dispatch({"pricing_config": slow_pricing_rows})
        catalog = CatalogService(postgres, BookingConfig(catalog_fetch_timeout_seconds=0.05))

        try:
            with pytest.raises(CatalogUnavailableError, match="Timed out"):
                catalog.load_snapshot()
        finally:
            release.set()

    def test_timeout_bounds_the_whole_load(self, postgres):
        """Reads that each fit the timeout still fail when together they exceed it."""
        release = threading.Event()

        def slow(rows):
            def read():
                release.wait(0.3)
                return rows
            return read

        postgres.execute.side_effect = _dispatch({
            "event_catalog": slow([WEDDING_ROW]),
            "album_config": slow(ALBUM_ROWS),
        })
        catalog = CatalogService(
            postgres,
            BookingConfig(catalog_fetch_workers=1, catalog_fetch_timeout_seconds=0.5),
        )

        try:
            with pytest.raises(CatalogUnavailableError, match="Timed out"):
                catalog.load_snapshot()
        finally:
            release.set()
