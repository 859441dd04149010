"""
FastAPI app factory shared by src/main.py and the test client fixture.

The caller owns the lifespan: production warms Scylla and the gateway token,
tests only wire the container.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.database.scylla_setting import scylla_sessions
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.trip_booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Sharebus trip seat booking',
    service_name: str = 'sharebus-booking',
) -> FastAPI:
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrument before routes are mounted
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)
    app.include_router(booking_router, prefix='/api/booking', tags=['booking'])
    _register_ops_endpoints(app)

    return app


def _register_ops_endpoints(app: FastAPI) -> None:
    @app.get('/health', tags=['ops'])
    async def health_check() -> dict[str, str]:
        """Liveness: the process answers."""
        return {'status': 'healthy', 'version': settings.VERSION, 'env': settings.ENV}

    @app.get('/health/ready', tags=['ops'])
    async def readiness_check() -> JSONResponse:
        """Readiness: at least one Scylla session was opened by the lifespan warmup."""
        ready = bool(scylla_sessions)
        return JSONResponse(
            status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={'status': 'ready' if ready else 'starting', 'scylla_sessions': len(scylla_sessions)},
        )

    @app.get('/metrics', tags=['ops'])
    async def get_metrics() -> PlainTextResponse:
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
