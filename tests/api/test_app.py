"""Tests for application assembly."""

from unittest.mock import Mock, patch

from clients.postgres_client import PostgresClient
from core.event_bus import EventBus
from core.events import BookingEvent, BookingSubmitted, PaymentStatusChanged
from core.services.booking_service import BookingService
from core.services.catalog_service import CatalogService
from core.services.pricing_service import PricingService


class TestBuildServices:

    def test_wires_one_database_and_bus(self):
        """Every service shares the same database client and event bus."""
        from api.app import build_services

        postgres = Mock(spec=PostgresClient)
        bus = EventBus()

        services = build_services(postgres, bus)

        assert isinstance(services["catalog"], CatalogService)
        assert isinstance(services["pricing"], PricingService)
        assert isinstance(services["booking"], BookingService)
        assert services["pricing"].catalog is services["catalog"]
        assert services["booking"].postgres is postgres
        assert services["booking"].event_bus is bus
        assert services["event_bus"] is bus

    def test_subscribes_booking_handlers(self):
        """Activity logging and payment confirmation listen on the bus."""
        from api.app import build_services

        bus = EventBus()
        with patch.object(bus, "subscribe", wraps=bus.subscribe) as subscribe:
            build_services(Mock(spec=PostgresClient), bus)

        event_types = [call.args[0] for call in subscribe.call_args_list]
        assert BookingEvent in event_types
        assert PaymentStatusChanged in event_types
        assert BookingSubmitted not in event_types


class TestCreateApp:

    def test_routes_registered(self, app):
        """All catalog, pricing and booking routes are mounted under /api."""
        paths = {getattr(route, "path", None) for route in app.routes}

        assert "/api/catalog" in paths
        assert "/api/catalog/packages" in paths
        assert "/api/catalog/packages/{package_id}" in paths
        assert "/api/catalog/packages/by-slug/{slug}" in paths
        assert "/api/pricing/quote" in paths
        assert "/api/bookings" in paths
        assert "/api/bookings/{reference}" in paths
        assert "/api/bookings/{booking_id}/status" in paths
        assert "/api/bookings/{booking_id}/payment-status" in paths

    def test_production_app_reads_database_url_from_vault(self):
        """The production app connects with the URL stored in Vault."""
        from api.app import create_production_app

        with patch("clients.vault_client.get_database_url", return_value="postgresql://db/bookings"), \
                patch("api.app.PostgresClient") as postgres_cls:
            app = create_production_app()

        postgres_cls.assert_called_once_with("postgresql://db/bookings")
        assert any(getattr(route, "path", None) == "/api/catalog" for route in app.routes)
