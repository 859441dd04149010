"""
Test Configuration and Fixtures

- Environment is set before any application module reads settings
- BDD step definitions are registered through bdd_steps_loader
- Unit tests (marked `unit`) replace every adapter with mocks or in-memory fakes
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path
from typing import Any


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['ENV'] = 'test'
    os.environ.setdefault('DEBUG', 'true')
    os.environ.setdefault('IDENTITY_LOOKUP_REQUIRED', 'false')


_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.service.trip_booking.domain.value_object import Requester  # noqa: E402
from test.bdd_steps_loader import *  # noqa: E402, F403
from test.service.trip_booking.fakes import (  # noqa: E402
    InMemoryBookingBackend,
    make_requester,
    make_trip,
)


@pytest.fixture
def backend() -> InMemoryBookingBackend:
    return InMemoryBookingBackend()


@pytest.fixture
def seeded_backend(backend: InMemoryBookingBackend) -> InMemoryBookingBackend:
    """200 regular @500 and 180 earlybird @400 on trip-0001."""
    backend.trip_repo.add(make_trip())
    return backend


@pytest.fixture
def requester() -> Requester:
    return make_requester()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """App without lifespan: no Scylla warmup and no gateway token prefetch."""
    from contextlib import asynccontextmanager

    from src.platform.app_factory import create_app
    from src.platform.config.di import container
    from src.platform.config.wire_modules import WIRE_MODULES

    @asynccontextmanager
    async def _lifespan(app):
        container.wire(modules=WIRE_MODULES)
        yield
        container.unwire()

    app = create_app(lifespan=_lifespan, title_suffix=' (Test)')
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def booking_context() -> dict[str, Any]:
    """BookingResponse envelopes produced by BDD When steps, in call order."""
    return {'responses': []}
