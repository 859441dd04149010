"""
Unit tests for BookTripTicketsUseCase

Runs the whole saga against in-memory adapters:
1. Happy path writes (inventory, transaction, participant, tickets)
2. Validation failures write nothing
3. Lost conditional writes are retried on fresh state, then surface
4. Failures after the decrement leave earlier stages in place
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import StoreError
from src.service.trip_booking.domain.enum import TicketType, TransactionStatus
from src.service.trip_booking.domain.exception import (
    ConcurrentModificationError,
    InsufficientInventoryError,
    PaymentInitiationFailedError,
    PriceMismatchError,
    TicketIssuanceFailedError,
    TransientStoreError,
    TripNotFoundError,
)
from test.service.trip_booking.fakes import (
    PAYMENT_URL_PREFIX,
    InMemoryBookingBackend,
    make_requester,
    make_trip,
)


def _raw(**overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        'trip_id': 'trip-0001',
        'early_bird_tickets': '1',
        'regular_tickets': '2',
        'total_price': '1400',
    }
    raw.update(overrides)
    return raw


@pytest.mark.unit
class TestBookTripTicketsUseCase:
    @pytest.mark.asyncio
    async def test_successful_booking(self, seeded_backend: InMemoryBookingBackend) -> None:
        result = await seeded_backend.book_use_case().book(
            requester=make_requester(), raw_input=_raw()
        )

        trip = seeded_backend.trip_repo.stored('trip-0001')
        assert (trip.available_regular_tickets, trip.available_earlybird_tickets) == (198, 179)
        assert trip.participant_ids == ['user-sub-1']

        [transaction] = seeded_backend.transaction_repo.transactions.values()
        assert transaction.id == result.transaction_id
        assert transaction.amount == 140000
        assert transaction.status is TransactionStatus.INITIATED
        assert result.redirect_url == f'{PAYMENT_URL_PREFIX}{transaction.id}'

        tickets = seeded_backend.ticket_repo.for_transaction(transaction.id)
        assert [(t.type, t.sequence) for t in tickets] == [
            (TicketType.REGULAR, 1),
            (TicketType.REGULAR, 2),
            (TicketType.EARLYBIRD, 1),
        ]

    @pytest.mark.asyncio
    async def test_repeat_booking_does_not_duplicate_participant(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        use_case = seeded_backend.book_use_case()
        await use_case.book(requester=make_requester(), raw_input=_raw())
        await use_case.book(requester=make_requester(), raw_input=_raw())

        trip = seeded_backend.trip_repo.stored('trip-0001')
        assert trip.participant_ids == ['user-sub-1']
        assert (trip.available_regular_tickets, trip.available_earlybird_tickets) == (196, 178)

    @pytest.mark.asyncio
    async def test_price_mismatch_writes_nothing(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        with pytest.raises(PriceMismatchError):
            await seeded_backend.book_use_case().book(
                requester=make_requester(), raw_input=_raw(total_price='1399')
            )

        trip = seeded_backend.trip_repo.stored('trip-0001')
        assert (trip.available_regular_tickets, trip.available_earlybird_tickets) == (200, 180)
        assert seeded_backend.payment_gateway.requests == []
        assert seeded_backend.transaction_repo.transactions == {}
        assert seeded_backend.ticket_repo.tickets == []
        assert seeded_backend.trip_repo.reads == 1

    @pytest.mark.asyncio
    async def test_unknown_trip(self, backend: InMemoryBookingBackend) -> None:
        with pytest.raises(TripNotFoundError) as exc_info:
            await backend.book_use_case().book(requester=make_requester(), raw_input=_raw())
        assert exc_info.value.message == "Could not find trip with this id: 'trip-0001'"

    @pytest.mark.asyncio
    async def test_conflict_is_retried_on_fresh_state(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        repo = seeded_backend.trip_repo
        original_reserve = repo.reserve_tickets
        calls = {'count': 0}

        async def reserve_after_competitor(**kwargs: Any) -> None:
            calls['count'] += 1
            if calls['count'] == 1:
                # A competing booking takes one regular seat between our read and write
                await original_reserve(
                    trip_id='trip-0001',
                    expected_regular=200,
                    expected_earlybird=180,
                    regular_count=1,
                    earlybird_count=0,
                )
            await original_reserve(**kwargs)

        repo.reserve_tickets = reserve_after_competitor  # type: ignore[method-assign]

        await seeded_backend.book_use_case().book(requester=make_requester(), raw_input=_raw())

        trip = repo.stored('trip-0001')
        assert repo.conflicts == 1
        assert repo.reads == 2
        assert (trip.available_regular_tickets, trip.available_earlybird_tickets) == (197, 179)

    @pytest.mark.asyncio
    async def test_conflicts_surface_after_last_attempt(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        repo = seeded_backend.trip_repo
        repo.reserve_tickets = AsyncMock(  # type: ignore[method-assign]
            side_effect=ConcurrentModificationError('trip-0001')
        )

        with pytest.raises(ConcurrentModificationError):
            await seeded_backend.book_use_case(max_attempts=3).book(
                requester=make_requester(), raw_input=_raw()
            )

        assert repo.reserve_tickets.await_count == 3
        assert repo.reads == 3
        assert seeded_backend.payment_gateway.requests == []

    @pytest.mark.asyncio
    async def test_transient_read_error_is_retried(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        repo = seeded_backend.trip_repo
        original_get = repo.get_by_id
        repo.get_by_id = AsyncMock(  # type: ignore[method-assign]
            side_effect=[TransientStoreError('read timed out'), await original_get(trip_id='trip-0001')]
        )

        result = await seeded_backend.book_use_case().book(
            requester=make_requester(), raw_input=_raw()
        )

        assert result.transaction_id
        assert repo.get_by_id.await_count == 2

    @pytest.mark.asyncio
    async def test_ambiguous_write_is_not_replayed(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        repo = seeded_backend.trip_repo
        repo.reserve_tickets = AsyncMock(  # type: ignore[method-assign]
            side_effect=StoreError('Reservation on trip trip-0001 timed out')
        )

        with pytest.raises(StoreError):
            await seeded_backend.book_use_case().book(requester=make_requester(), raw_input=_raw())

        assert repo.reserve_tickets.await_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_bookings_for_the_last_seat(
        self, backend: InMemoryBookingBackend
    ) -> None:
        backend.trip_repo.add(make_trip(available_regular_tickets=1, available_earlybird_tickets=0))
        use_case = backend.book_use_case()
        raw = _raw(early_bird_tickets='0', regular_tickets='1', total_price='500')

        outcomes = await asyncio.gather(
            use_case.book(requester=make_requester('user-a'), raw_input=raw),
            use_case.book(requester=make_requester('user-b'), raw_input=raw),
            return_exceptions=True,
        )

        successes = [o for o in outcomes if not isinstance(o, Exception)]
        failures = [o for o in outcomes if isinstance(o, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientInventoryError)
        assert backend.trip_repo.conflicts == 1

        trip = backend.trip_repo.stored('trip-0001')
        assert trip.available_regular_tickets == 0
        assert len(backend.ticket_repo.tickets) == 1
        assert backend.ticket_repo.tickets[0].transaction_id == successes[0].transaction_id

    @pytest.mark.asyncio
    async def test_payment_failure_keeps_the_decrement(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        seeded_backend.payment_gateway.reject()

        with pytest.raises(PaymentInitiationFailedError):
            await seeded_backend.book_use_case().book(requester=make_requester(), raw_input=_raw())

        trip = seeded_backend.trip_repo.stored('trip-0001')
        assert (trip.available_regular_tickets, trip.available_earlybird_tickets) == (198, 179)
        assert seeded_backend.transaction_repo.transactions == {}
        assert seeded_backend.ticket_repo.tickets == []

    @pytest.mark.asyncio
    async def test_ticket_failure_leaves_partial_set(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        seeded_backend.ticket_repo.fail_after = 2

        with pytest.raises(TicketIssuanceFailedError) as exc_info:
            await seeded_backend.book_use_case().book(requester=make_requester(), raw_input=_raw())

        assert exc_info.value.issued_count == 2
        assert len(seeded_backend.transaction_repo.transactions) == 1
        assert [t.type for t in seeded_backend.ticket_repo.tickets] == [
            TicketType.REGULAR,
            TicketType.REGULAR,
        ]

    @pytest.mark.asyncio
    async def test_profile_from_identity_provider_reaches_records(
        self, seeded_backend: InMemoryBookingBackend
    ) -> None:
        seeded_backend.identity_provider.attributes = {
            'name': 'Ola Nordmann',
            'phone_number': '4799999999',
        }

        await seeded_backend.book_use_case().book(requester=make_requester(), raw_input=_raw())

        [transaction] = seeded_backend.transaction_repo.transactions.values()
        assert transaction.contact_person.name == 'Ola Nordmann'
        assert seeded_backend.payment_gateway.requests[0].mobile_number == '4799999999'
        assert all(
            t.contact_person.phone == '4799999999' for t in seeded_backend.ticket_repo.tickets
        )
