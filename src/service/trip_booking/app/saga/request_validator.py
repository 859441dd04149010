"""
Request Validator

First stage of the booking saga. Parses the raw input map into a TicketRequest,
then checks the claimed total and the requested counts against the trip as read
in the current attempt. Both steps are pure: nothing is read or written here.
"""

from typing import Any, Mapping

from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.domain.entity import Trip
from src.service.trip_booking.domain.enum import TicketType
from src.service.trip_booking.domain.exception import (
    InsufficientInventoryError,
    InvalidBookingRequestError,
    PriceMismatchError,
)
from src.service.trip_booking.domain.value_object import TicketRequest


# Inventory is checked in this order; the first short tier is the one reported
INVENTORY_CHECK_ORDER = (TicketType.REGULAR, TicketType.EARLYBIRD)


def _parse_count(raw: Any, *, field: str) -> int:
    try:
        count = int(str(raw).strip())
    except (TypeError, ValueError):
        raise InvalidBookingRequestError(f'{field} must be a whole number')
    if count < 0:
        raise InvalidBookingRequestError(f'{field} must not be negative')
    return count


def _parse_price(raw: Any) -> float:
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        raise InvalidBookingRequestError('total_price must be a number')


class RequestValidator:
    @Logger.io
    def parse(self, *, raw_input: Mapping[str, Any]) -> TicketRequest:
        trip_id = str(raw_input.get('trip_id') or '').strip()
        if not trip_id:
            raise InvalidBookingRequestError('trip_id is required')

        request = TicketRequest(
            trip_id=trip_id,
            earlybird_count=_parse_count(
                raw_input.get('early_bird_tickets', 0), field='early_bird_tickets'
            ),
            regular_count=_parse_count(raw_input.get('regular_tickets', 0), field='regular_tickets'),
            total_price=_parse_price(raw_input.get('total_price')),
        )
        if request.total_count == 0:
            raise InvalidBookingRequestError('At least one ticket must be requested')
        return request

    @Logger.io
    def validate(self, *, request: TicketRequest, trip: Trip) -> None:
        """
        Raises:
            PriceMismatchError: claimed total differs from the recomputed one
            InsufficientInventoryError: a tier has fewer seats than requested
        """
        expected = trip.expected_price(
            earlybird_count=request.earlybird_count, regular_count=request.regular_count
        )
        if expected != request.total_price:
            raise PriceMismatchError(claimed=request.total_price, expected=expected)

        for tier in INVENTORY_CHECK_ORDER:
            requested = request.count_for(tier)
            available = trip.available_for(tier)
            if requested > available:
                raise InsufficientInventoryError(
                    tier=tier, requested=requested, available=available
                )
