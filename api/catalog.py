"""GET /api/catalog: what can be booked, what it costs, and the coverage packages."""

from fastapi import APIRouter, Query, Request

from api.base import success_response
from core.models import FunctionCategory


def create_catalog_router(services: dict) -> APIRouter:
    router = APIRouter()

    catalog_svc = services["catalog"]

    @router.get("/catalog")
    async def get_catalog(request: Request):
        snapshot = catalog_svc.load_snapshot()
        return success_response(snapshot.model_dump(mode="json"), request).model_dump(mode="json")

    @router.get("/catalog/functions")
    async def list_functions(
        request: Request,
        category: FunctionCategory | None = Query(None),
    ):
        if category is None:
            definitions = catalog_svc.list_function_definitions()
        else:
            definitions = catalog_svc.list_functions_by_category(category)
        return success_response(
            [d.model_dump(mode="json") for d in definitions], request
        ).model_dump(mode="json")

    @router.get("/catalog/functions/{function_id}")
    async def get_function(request: Request, function_id: str):
        definition = catalog_svc.get_function_definition(function_id)
        if definition is None:
            raise ValueError(f"Function {function_id} not found")
        return success_response(definition.model_dump(mode="json"), request).model_dump(mode="json")

    @router.get("/catalog/packages")
    async def list_packages(request: Request):
        packages = catalog_svc.list_packages()
        return success_response(
            [p.model_dump(mode="json") for p in packages], request
        ).model_dump(mode="json")

    @router.get("/catalog/packages/by-slug/{slug}")
    async def get_package_by_slug(request: Request, slug: str):
        package = catalog_svc.get_package_by_slug(slug)
        if package is None:
            raise ValueError(f"Package '{slug}' not found")
        return success_response(package.model_dump(mode="json"), request).model_dump(mode="json")

    @router.get("/catalog/packages/{package_id}")
    async def get_package(request: Request, package_id: str):
        package = catalog_svc.get_package(package_id)
        if package is None:
            raise ValueError(f"Package {package_id} not found")
        return success_response(package.model_dump(mode="json"), request).model_dump(mode="json")

    return router
