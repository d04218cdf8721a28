"""API test fixtures: TestClient over mocked services."""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from core.services.booking_service import BookingService
from core.services.catalog_service import CatalogService
from core.services.pricing_service import PricingService


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def catalog_service(snapshot):
    mock = Mock(spec=CatalogService)
    mock.load_snapshot.return_value = snapshot
    return mock


@pytest.fixture
def pricing_service(catalog_service):
    """Real pricing over the mocked catalog."""
    return PricingService(catalog_service)


@pytest.fixture
def booking_service():
    return Mock(spec=BookingService)


@pytest.fixture
def services(catalog_service, pricing_service, booking_service):
    return {
        "catalog": catalog_service,
        "pricing": pricing_service,
        "booking": booking_service,
    }


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    return create_app(services)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def draft_payload(priced_draft):
    """A signed draft as the wizard posts it (pricing left off)."""
    return priced_draft.model_dump(mode="json", exclude={"pricing"})
