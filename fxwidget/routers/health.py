from fastapi import APIRouter, Depends, Request

from fxwidget.routers.deps import get_rate_provider
from fxwidget.services.rates.providers import HTTPRateProvider

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
async def health(request: Request, provider: HTTPRateProvider = Depends(get_rate_provider)):
    return {
        "status": "ok",
        "version": request.app.state.settings.version,
        "cached_bases": len(provider.cache),
    }
