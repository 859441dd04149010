from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.command.book_trip_tickets_use_case import (
    BookTripTicketsUseCase,
)
from src.service.trip_booking.app.command.initiate_sharelead_pre_reservation_use_case import (
    InitiateShareleadPreReservationUseCase,
)
from src.service.trip_booking.driving_adapter.booking_event_handler import handle_booking_event
from src.service.trip_booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingEvent,
    BookingResponse,
    PaymentInitiationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/trip', status_code=status.HTTP_200_OK)
@Logger.io
async def book_trip(
    event: BookingEvent,
    use_case: BookTripTicketsUseCase = Depends(BookTripTicketsUseCase.depends),
) -> BookingResponse:
    """Always 200; failures are reported through is_error/message."""
    with tracer.start_as_current_span('controller.book_trip') as span:
        span.set_attribute('requester.sub', event.identity.sub)
        return await handle_booking_event(event, use_case=use_case)


@router.post('/sharelead', status_code=status.HTTP_200_OK)
@Logger.io
async def initiate_sharelead_pre_reservation(
    event: BookingEvent,
    use_case: InitiateShareleadPreReservationUseCase = Depends(
        InitiateShareleadPreReservationUseCase.depends
    ),
) -> PaymentInitiationResponse:
    with tracer.start_as_current_span('controller.initiate_sharelead_pre_reservation'):
        payment = await use_case.initiate(
            requester=event.to_requester(), raw_input=event.arguments.input
        )
        return PaymentInitiationResponse(orderId=payment.order_id, url=payment.url)
