"""
FastAPI application assembly.

create_app() wires routers, middleware and error handlers around an
already-built services dict, which is how tests mount the API over
mocked services. create_production_app() builds the real services from
Vault-provided credentials.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.bookings import create_bookings_router
from api.catalog import create_catalog_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from api.pricing import create_pricing_router
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from core.config import BookingConfig
from core.event_bus import EventBus
from core.events import BookingEvent, PaymentStatusChanged
from core.handlers.booking_activity_handler import handle_booking_activity
from core.handlers.payment_confirmation_handler import handle_payment_received
from core.services.booking_service import BookingService
from core.services.catalog_service import CatalogService
from core.services.pricing_service import PricingService

logger = logging.getLogger(__name__)


def build_services(
    postgres: PostgresClient,
    event_bus: EventBus | None = None,
    config: BookingConfig | None = None,
) -> dict:
    """Construct the service graph over one database client and wire event handlers."""
    config = config or BookingConfig()
    event_bus = event_bus or EventBus()
    audit = AuditLogger(postgres)
    catalog = CatalogService(postgres, config)
    booking = BookingService(postgres, audit, event_bus, config)

    event_bus.subscribe(BookingEvent, handle_booking_activity())
    event_bus.subscribe(PaymentStatusChanged, handle_payment_received(booking))

    return {
        "catalog": catalog,
        "pricing": PricingService(catalog),
        "booking": booking,
        "event_bus": event_bus,
    }


def create_app(services: dict, lifespan=None) -> FastAPI:
    """FastAPI app with error handlers, request IDs and all booking routes."""
    app = FastAPI(title="Studio Booking API", lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_catalog_router(services), prefix="/api")
    app.include_router(create_pricing_router(services), prefix="/api")
    app.include_router(create_bookings_router(services), prefix="/api")

    return app


def create_production_app() -> FastAPI:
    """
    App factory for the ASGI server.

    Usage: uvicorn api.app:create_production_app --factory
    """
    from clients.vault_client import get_database_url

    postgres = PostgresClient(get_database_url())
    services = build_services(postgres)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Shutting down, closing database pool")
        postgres.close()

    return create_app(services, lifespan=lifespan)
