"""
pytest-bdd steps are synchronous; each step drives the async saga with asyncio.run.

Bookings go through handle_booking_event, so the Then steps see the same
`{redirect_url, transaction_id, is_error, message}` envelope a caller gets.
"""

import asyncio
from typing import Any

from pytest_bdd import parsers, when

from src.service.trip_booking.app.saga import ParticipantRegistry
from src.service.trip_booking.driving_adapter.booking_event_handler import handle_booking_event
from src.service.trip_booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingEvent,
)
from test.service.trip_booking.fakes import InMemoryBookingBackend


def _event(*, sub: str, trip_id: str, regular: int, earlybird: int, total: str) -> BookingEvent:
    return BookingEvent.model_validate(
        {
            'arguments': {
                'input': {
                    'trip_id': trip_id,
                    'regular_tickets': str(regular),
                    'early_bird_tickets': str(earlybird),
                    'total_price': total,
                }
            },
            'identity': {
                'sub': sub,
                'username': sub,
                'issuer': 'https://cognito-idp.eu-north-1.amazonaws.com/eu-north-1_TestPool',
                'claims': {'name': 'Kari Nordmann', 'phone_number': '4712345678'},
            },
        }
    )


@when(
    parsers.parse(
        '"{sub}" books {regular:d} regular and {earlybird:d} earlybird tickets '
        'on trip "{trip_id}" claiming a total of {total}'
    )
)
def book_tickets(
    backend: InMemoryBookingBackend,
    booking_context: dict[str, Any],
    sub: str,
    regular: int,
    earlybird: int,
    trip_id: str,
    total: str,
) -> None:
    event = _event(sub=sub, trip_id=trip_id, regular=regular, earlybird=earlybird, total=total)
    response = asyncio.run(handle_booking_event(event, use_case=backend.book_use_case()))
    booking_context['responses'].append(response)


@when(
    parsers.parse(
        '"{first}" and "{second}" each book 1 regular ticket on trip "{trip_id}" at the same time'
    )
)
def book_concurrently(
    backend: InMemoryBookingBackend,
    booking_context: dict[str, Any],
    first: str,
    second: str,
    trip_id: str,
) -> None:
    total = str(backend.trip_repo.stored(trip_id).regular_ticket_price)
    use_case = backend.book_use_case()
    events = [
        _event(sub=sub, trip_id=trip_id, regular=1, earlybird=0, total=total)
        for sub in (first, second)
    ]

    async def _race() -> list[Any]:
        return await asyncio.gather(
            *(handle_booking_event(event, use_case=use_case) for event in events)
        )

    booking_context['reads_before'] = backend.trip_repo.reads
    booking_context['responses'].extend(asyncio.run(_race()))


@when(
    parsers.parse(
        '"{sub}" is registered twice concurrently from the same read of trip "{trip_id}"'
    )
)
def register_twice_from_one_read(backend: InMemoryBookingBackend, sub: str, trip_id: str) -> None:
    registry = ParticipantRegistry(trip_repo=backend.trip_repo)

    async def _register() -> None:
        trip = await backend.trip_repo.get_by_id(trip_id=trip_id)
        await asyncio.gather(
            registry.register(trip=trip, participant_id=sub),
            registry.register(trip=trip, participant_id=sub),
        )

    asyncio.run(_register())
