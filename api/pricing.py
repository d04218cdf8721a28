"""POST /api/pricing/quote: price a wizard draft without submitting it."""

from fastapi import APIRouter, Request

from api.base import success_response
from core.draft import BookingDraft


def create_pricing_router(services: dict) -> APIRouter:
    router = APIRouter()

    pricing_svc = services["pricing"]

    @router.post("/pricing/quote")
    async def quote(request: Request, draft: BookingDraft):
        breakdown = pricing_svc.quote(draft)
        return success_response(breakdown.model_dump(mode="json"), request).model_dump(mode="json")

    return router
