from __future__ import annotations

from fastapi import APIRouter, HTTPException

from lightchat.app.config.settings import settings
from lightchat.app.providers.catalogue import list_providers, lookup

router = APIRouter(prefix="/providers", tags=["providers"])


@router.get("")
async def get_providers():
    """Provider catalogue for the settings UI."""
    return {
        "defaultProvider": settings.default_provider,
        "providers": [p.to_dict() for p in list_providers()],
    }


@router.get("/{provider_id}")
async def get_provider(provider_id: str):
    descriptor = lookup(provider_id)
    if descriptor is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "PROVIDER_NOT_FOUND", "message": f"Unknown provider: {provider_id}"},
        )
    return descriptor.to_dict()
