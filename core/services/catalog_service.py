"""
Catalog service for the studio's reference data.

Read-only access to what can be booked and what it costs: event functions,
album and pricing constants, video add-ons, complimentary items and
coverage packages. The booking flow never writes here; staff maintain
these tables directly.

Album and pricing constants are stored as key/value rows. Missing keys fall
back to the model defaults; unknown keys are logged and ignored.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait

from pydantic import ValidationError

from clients.postgres_client import PostgresClient
from core.config import BookingConfig
from core.exceptions import CatalogUnavailableError
from core.models import (
    AlbumConfiguration,
    CatalogSnapshot,
    ComplimentaryItem,
    EventFunctionDefinition,
    FunctionCategory,
    Package,
    PricingConfiguration,
    VideoAddonDefinition,
)

logger = logging.getLogger(__name__)

_FUNCTION_COLUMNS = """
    id::text AS id, label, category, icon, flat_price, included_hours,
    included_photographers, included_cinematographers,
    COALESCE(extra_hour_rate, 0) AS extra_hour_rate, sort_order
"""

_PACKAGE_COLUMNS = """
    id::text AS id, name, slug, price, COALESCE(description, '') AS description,
    COALESCE(included_photographers, 0) AS included_photographers,
    COALESCE(included_cinematographers, 0) AS included_cinematographers,
    COALESCE(included_hours, 0) AS included_hours,
    COALESCE(included_album_pages, 0) AS included_album_pages,
    COALESCE(suitable_for_guests, '') AS suitable_for_guests,
    COALESCE(is_recommended, false) AS recommended,
    features, COALESCE(display_order, 0) AS display_order
"""


class CatalogService:
    """Service for reference catalog reads."""

    def __init__(self, postgres: PostgresClient, config: BookingConfig | None = None):
        self.postgres = postgres
        self.config = config or BookingConfig()

    # -------------------------------------------------------------------------
    # Event functions
    # -------------------------------------------------------------------------

    def list_function_definitions(self) -> list[EventFunctionDefinition]:
        """
        List all active function definitions.

        Returns:
            Definitions ordered by sort_order
        """
        rows = self.postgres.execute(
            f"""
            SELECT {_FUNCTION_COLUMNS} FROM event_catalog
            WHERE is_active = true
            ORDER BY sort_order ASC, label ASC
            """
        )

        return [EventFunctionDefinition.model_validate(row) for row in rows]

    def list_functions_by_category(self, category: FunctionCategory) -> list[EventFunctionDefinition]:
        """
        List active function definitions in one category.

        Args:
            category: main, other or additional

        Returns:
            Definitions ordered by sort_order
        """
        rows = self.postgres.execute(
            f"""
            SELECT {_FUNCTION_COLUMNS} FROM event_catalog
            WHERE category = %s AND is_active = true
            ORDER BY sort_order ASC, label ASC
            """,
            (category.value,)
        )

        return [EventFunctionDefinition.model_validate(row) for row in rows]

    def get_function_definition(self, function_id: str) -> EventFunctionDefinition | None:
        """
        Get one function definition by id, active or not.

        Returns:
            Definition if found, None otherwise.
        """
        row = self.postgres.execute_single(
            f"SELECT {_FUNCTION_COLUMNS} FROM event_catalog WHERE id::text = %s",
            (function_id,)
        )

        if row is None:
            return None

        return EventFunctionDefinition.model_validate(row)

    # -------------------------------------------------------------------------
    # Key/value configuration
    # -------------------------------------------------------------------------

    def _read_config_values(self, table: str, known_keys: set[str]) -> dict[str, float]:
        rows = self.postgres.execute(
            f"SELECT config_key, config_value FROM {table} WHERE is_active = true"
        )

        values = {}
        for row in rows:
            key = row["config_key"]
            if key not in known_keys:
                logger.warning(f"Ignoring unknown {table} key '{key}'")
                continue
            if row["config_value"] is None:
                continue
            values[key] = row["config_value"]
        return values

    def get_album_configuration(self) -> AlbumConfiguration:
        """Album constants, with defaults for any key not configured."""
        values = self._read_config_values("album_config", set(AlbumConfiguration.model_fields))
        return AlbumConfiguration.model_validate(values)

    def get_pricing_configuration(self) -> PricingConfiguration:
        """Pricing constants, with defaults for any key not configured."""
        values = self._read_config_values("pricing_config", set(PricingConfiguration.model_fields))
        return PricingConfiguration.model_validate(values)

    # -------------------------------------------------------------------------
    # Add-ons and complimentary items
    # -------------------------------------------------------------------------

    def list_video_addon_definitions(self) -> list[VideoAddonDefinition]:
        """
        List active video add-ons, keyed by slug.

        Returns:
            Add-ons ordered by sort_order
        """
        rows = self.postgres.execute(
            """
            SELECT slug AS id, label, COALESCE(description, '') AS description, price, sort_order
            FROM video_addons
            WHERE is_active = true
            ORDER BY sort_order ASC, label ASC
            """
        )

        return [VideoAddonDefinition.model_validate(row) for row in rows]

    def list_complimentary_items(self) -> list[ComplimentaryItem]:
        """
        List active complimentary items, keyed by slug.

        Returns:
            Items ordered by sort_order
        """
        rows = self.postgres.execute(
            """
            SELECT slug AS id, label, COALESCE(description, '') AS description, icon, sort_order
            FROM complimentary_items
            WHERE is_active = true
            ORDER BY sort_order ASC, label ASC
            """
        )

        return [ComplimentaryItem.model_validate(row) for row in rows]

    # -------------------------------------------------------------------------
    # Packages
    # -------------------------------------------------------------------------

    def list_packages(self) -> list[Package]:
        """
        List all packages.

        Returns:
            Packages ordered by display_order (unset last), then price
        """
        rows = self.postgres.execute(
            f"""
            SELECT {_PACKAGE_COLUMNS} FROM packages
            ORDER BY packages.display_order ASC NULLS LAST, packages.price ASC
            """
        )

        return [Package.model_validate(row) for row in rows]

    def get_package(self, package_id: str) -> Package | None:
        """
        Get a package by id.

        Returns:
            Package if found, None otherwise.
        """
        row = self.postgres.execute_single(
            f"SELECT {_PACKAGE_COLUMNS} FROM packages WHERE id::text = %s",
            (package_id,)
        )

        if row is None:
            return None

        return Package.model_validate(row)

    def get_package_by_slug(self, slug: str) -> Package | None:
        """
        Get a package by its slug.

        Returns:
            Package if found, None otherwise.
        """
        row = self.postgres.execute_single(
            f"SELECT {_PACKAGE_COLUMNS} FROM packages WHERE slug = %s",
            (slug.strip(),)
        )

        if row is None:
            return None

        return Package.model_validate(row)

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def load_snapshot(self) -> CatalogSnapshot:
        """
        Load everything pricing needs in one go.

        The five reads have no ordering dependency and run concurrently.
        catalog_fetch_timeout_seconds bounds the whole load, not each read.
        The snapshot is only returned once all of them have completed;
        there is no partial snapshot.

        Raises:
            CatalogUnavailableError: If any read fails or the load times out
        """
        pool = ThreadPoolExecutor(
            max_workers=self.config.catalog_fetch_workers,
            thread_name_prefix="catalog",
        )
        futures = {
            "function_definitions": pool.submit(self.list_function_definitions),
            "album_configuration": pool.submit(self.get_album_configuration),
            "pricing_configuration": pool.submit(self.get_pricing_configuration),
            "video_addons": pool.submit(self.list_video_addon_definitions),
            "complimentary_items": pool.submit(self.list_complimentary_items),
        }

        parts = {}
        try:
            _, pending = wait(futures.values(), timeout=self.config.catalog_fetch_timeout_seconds)
            if pending:
                names = [name for name, future in futures.items() if future in pending]
                logger.error(f"Timed out loading catalog {', '.join(names)}")
                raise CatalogUnavailableError("Timed out loading catalog data")

            for name, future in futures.items():
                try:
                    parts[name] = future.result()
                except ValidationError as e:
                    logger.error(f"Invalid catalog data in {name}: {e}")
                    raise CatalogUnavailableError(f"Invalid catalog data ({name})") from e
                except Exception as e:
                    logger.error(f"Failed to load catalog {name}: {e}")
                    raise CatalogUnavailableError(f"Failed to load catalog data ({name})") from e
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        return CatalogSnapshot(
            function_definitions=tuple(parts["function_definitions"]),
            album_configuration=parts["album_configuration"],
            pricing_configuration=parts["pricing_configuration"],
            video_addons=tuple(parts["video_addons"]),
            complimentary_items=tuple(parts["complimentary_items"]),
        )
