from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse

# Mounted at settings.SUBSCRIBE_PATH ("/dapr/subscribe")
router = APIRouter(tags=["dapr"])


@router.get("", response_class=ORJSONResponse)
async def subscriptions(req: Request):
    """Discovery payload the sidecar reads at start-up: one entry per subscription."""
    registry = req.app.state.registry
    prefix = req.app.state.settings.MESSAGE_ROUTE_PREFIX
    return ORJSONResponse([d.model_dump() for d in registry.list_descriptors(prefix)])
