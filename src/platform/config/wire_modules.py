"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.trip_booking.app.command import (
    book_trip_tickets_use_case,
    initiate_sharelead_pre_reservation_use_case,
)
from src.service.trip_booking.driving_adapter.http_controller import booking_controller


WIRE_MODULES: list[ModuleType] = [
    book_trip_tickets_use_case,
    initiate_sharelead_pre_reservation_use_case,
    booking_controller,
]
