"""
Booking event handler

Transport-neutral entry point: takes the invocation envelope and always
returns the `{redirect_url, transaction_id, is_error, message}` shape, so the
caller never has to interpret exceptions.
"""

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.command.book_trip_tickets_use_case import (
    BookTripTicketsUseCase,
)
from src.service.trip_booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingEvent,
    BookingResponse,
)


SUCCESS_MESSAGE = 'Tickets successfully booked.'
INTERNAL_ERROR_MESSAGE = 'Internal server error'


async def handle_booking_event(
    event: BookingEvent, *, use_case: BookTripTicketsUseCase
) -> BookingResponse:
    try:
        result = await use_case.book(
            requester=event.to_requester(), raw_input=event.arguments.input
        )
    except CustomBaseError as e:
        return BookingResponse(is_error=True, message=e.message)
    except Exception:
        Logger.base.exception('💥 [BOOKING] Unexpected failure')
        return BookingResponse(is_error=True, message=INTERNAL_ERROR_MESSAGE)

    return BookingResponse(
        redirect_url=result.redirect_url,
        transaction_id=result.transaction_id,
        is_error=False,
        message=SUCCESS_MESSAGE,
    )
