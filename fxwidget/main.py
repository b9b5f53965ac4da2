import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .models.widget import WidgetState
from .routers import health, rates, ui, widget
from .services.catalog import builtin_options
from .services.controller import ConversionController
from .services.http_client import build_client
from .services.rates.cache_service import RateCache
from .services.rates.providers import HTTPRateProvider

logger = logging.getLogger("fxwidget")


def create_app(
    settings_override: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests.
    transport: httpx transport for the rate provider client; tests pass an
    httpx.MockTransport so no request leaves the process.
    """
    settings = settings_override or get_settings()
    if settings_override is not None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = build_client(timeout=settings.http_timeout_seconds, transport=transport)
        cache = RateCache(ttl_seconds=settings.rates_cache_ttl_seconds)
        provider = HTTPRateProvider(client, settings.provider_base_url, cache)
        state = WidgetState(
            amount_input=settings.default_amount,
            from_currency=settings.default_from_currency,
            to_currency=settings.default_to_currency,
            from_options=builtin_options(),
            to_options=builtin_options(),
        )
        controller = ConversionController(
            provider, cache=cache, state=state, debounce_seconds=settings.debounce_seconds
        )
        controller.populate_options()
        app.state.rate_cache = cache
        app.state.rate_provider = provider
        app.state.controller = controller

        if settings.bootstrap_on_startup:
            controller.start_default_load()
            controller.schedule_conversion(settings.initial_convert_delay_seconds)
        logger.info("converter ready (provider=%s)", settings.provider_base_url)
        try:
            yield
        finally:
            await controller.aclose()
            await client.aclose()

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version, lifespan=lifespan
    )

    app.state.settings = settings

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.ConversionError, errors.conversion_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(widget.router)
    app.include_router(ui.router)

    return app


app = create_app()
