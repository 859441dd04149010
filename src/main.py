"""
Production FastAPI Application

Booking saga over HTTP, backed by ScyllaDB, Vipps and Cognito.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.scylla_setting import close_all_scylla_sessions, warmup_scylla_session
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.trip_booking.domain.exception import PaymentInitiationFailedError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Booking Service] Starting up...')

    # Without gateway credentials every booking would take seats and then fail
    missing = settings.missing_gateway_credentials()
    if missing and not settings.DEBUG:
        raise RuntimeError(f'Missing payment gateway settings: {", ".join(missing)}')
    if missing:
        Logger.base.warning(f'⚠️ [Booking Service] Gateway settings not set: {missing}')

    tracing = TracingConfig(service_name='sharebus-booking')
    tracing.setup()
    Logger.base.info('📊 [Booking Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Booking Service] Dependency injection wired')

    await warmup_scylla_session()

    if not missing:
        try:
            await container.access_token_provider().get_token()
        except PaymentInitiationFailedError as e:
            # First booking retries the fetch
            Logger.base.warning(f'⚠️ [Booking Service] Token prefetch failed: {e.message}')

    Logger.base.info('✅ [Booking Service] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Booking Service] Shutting down...')

    await container.http_client().aclose()
    await close_all_scylla_sessions()
    Logger.base.info('🗄️ [Booking Service] ScyllaDB sessions closed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Booking Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
